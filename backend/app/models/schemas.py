from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class ReportType(str, Enum):
    CRIME = "CRIME"
    FACILITY = "FACILITY"


class ReportStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


ACTIVE_STATUSES = frozenset({ReportStatus.PENDING, ReportStatus.IN_PROGRESS})
TERMINAL_STATUSES = frozenset({ReportStatus.RESOLVED, ReportStatus.REJECTED})


class Role(str, Enum):
    STAFF = "STAFF"
    SUPERVISOR = "SUPERVISOR"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


class TeamStatus(str, Enum):
    """Team workload buckets, heaviest first."""
    OVERLOADED = "OVERLOADED"
    BUSY = "BUSY"
    MODERATE = "MODERATE"
    LIGHT = "LIGHT"
    AVAILABLE = "AVAILABLE"


class WorkloadStatus(str, Enum):
    """Individual staff workload buckets."""
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"


class CamelModel(BaseModel):
    """Base for API models: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Snapshot Records (read-only input from the store)
# ============================================================================

class Report(CamelModel):
    """An incident report as stored."""
    model_config = ConfigDict(frozen=True)

    id: int
    type: ReportType
    status: ReportStatus
    location: str = ""
    submitted_at: datetime
    submitted_by: Optional[int] = None
    submitter_name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    # Raw severity inputs; garbage is tolerated and normalized later
    injury_level: Optional[str] = None
    severity_level: Optional[str] = None
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None


class Assignment(CamelModel):
    """A staff member's assignment to a report."""
    model_config = ConfigDict(frozen=True)

    id: int
    report_id: int
    staff_id: int
    assigned_at: datetime
    action_taken: Optional[str] = None
    additional_feedback: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def has_action(self) -> bool:
        return bool(self.action_taken and self.action_taken.strip())


class Staff(CamelModel):
    """A staff account."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    email: Optional[str] = None
    role: Role
    department: str = ""
    position: str = ""
    supervisor_id: Optional[int] = None


# ============================================================================
# Priority Ranking Models
# ============================================================================

class RankedReport(CamelModel):
    """Report fields plus the priority signals behind its rank."""
    id: int
    type: ReportType
    status: ReportStatus
    location: str
    submitted_at: datetime
    submitted_by: Optional[int] = None
    submitter_name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    injury_level: Optional[str] = None
    severity_level: Optional[str] = None
    rank: int
    waiting_days: int
    severity_score: int
    severity_label: str
    assignment_count: int = 0
    available_staff_count: int
    priority_score: int
    requires_immediate_attention: bool = False


class PrioritySummary(CamelModel):
    """Statistics over the whole ranking, not just the current page."""
    total: int = 0
    high_priority: int = 0
    critical_severity: int = 0
    avg_waiting_days: float = 0.0


class PriorityReportPage(CamelModel):
    """Response from GET /api/reports/unassigned-priority."""
    data: List[RankedReport] = Field(default_factory=list)
    total: int
    page: int
    page_size: int
    summary: PrioritySummary = Field(default_factory=PrioritySummary)


# ============================================================================
# Team / Staff Metrics Models
# ============================================================================

class TeamPerformanceMetrics(CamelModel):
    """Performance row for one supervisor's team."""
    team_id: int
    supervisor_name: str
    department: str
    position: str
    supervisor_email: Optional[str] = None
    team_size: int
    total_cases: int
    resolved_cases: int
    active_cases: int
    resolution_rate_pct: float
    avg_resolution_days: Optional[float] = None
    avg_response_days: Optional[float] = None
    workload_per_member: float
    performance_score: float
    performance_level: str
    team_status: TeamStatus
    first_assignment_date: Optional[datetime] = None
    last_assignment_date: Optional[datetime] = None


class TeamPerformanceSummary(CamelModel):
    """Dashboard header figures across all teams."""
    total_teams: int = 0
    avg_performance_score: float = 0.0
    total_active_cases: int = 0
    avg_resolution_rate_pct: float = 0.0
    top_performers: List[TeamPerformanceMetrics] = Field(default_factory=list)


class StaffWorkloadDetail(CamelModel):
    """Workload breakdown for a single staff member."""
    staff_id: int
    staff_name: str
    role: Role
    department: str
    active_cases: int
    resolved_cases: int
    total_cases: int
    no_action_cases: int
    stale_no_action_cases: int
    urgent_cases: int
    overdue_cases: int
    recent_assignments: int
    avg_case_age_days: float
    oldest_case_days: int
    avg_resolution_days: Optional[float] = None
    avg_response_days: Optional[float] = None
    is_available: bool
    workload_status: WorkloadStatus


# ============================================================================
# API Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    timestamp: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    request_id: Optional[str] = None
