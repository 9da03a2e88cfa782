import sqlite3
from typing import Callable, Optional, List, Dict, Any, TypeVar, Union
from datetime import datetime
from pydantic import ValidationError
from app.core.errors import DataIntegrityWarning
from app.db.database import get_db_connection
from app.core.logging import get_logger
from app.models.schemas import (
    Assignment, Report, ReportStatus, ReportType, Role, Staff
)

logger = get_logger(__name__)

T = TypeVar("T")


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _value(value: Union[str, ReportStatus, ReportType, Role, None]) -> Optional[str]:
    if value is None:
        return None
    return value.value if hasattr(value, "value") else str(value)


def _where(filters: Dict[str, Any]) -> tuple[str, list]:
    """Build a WHERE clause from the filters that are set."""
    active = {col: val for col, val in filters.items() if val is not None}
    if not active:
        return "", []
    clause = " AND ".join(f"{col} = ?" for col in active)
    return f" WHERE {clause}", list(active.values())


# ============================================================================
# Writes (seeding and tests; the engine itself only reads)
# ============================================================================

def create_staff(
    staff_id: int,
    role: Union[Role, str],
    name: str = "",
    email: Optional[str] = None,
    department: str = "",
    position: str = "",
    supervisor_id: Optional[int] = None
) -> None:
    """Create a staff record."""
    with get_db_connection() as conn:
        conn.execute(
            """
            INSERT INTO staff (staff_id, name, email, role, department, position, supervisor_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (staff_id, name, email, _value(role), department, position, supervisor_id)
        )
        conn.commit()
    logger.debug(f"Created staff {staff_id}")


def create_report(
    report_id: int,
    report_type: Union[ReportType, str],
    submitted_at: datetime,
    status: Union[ReportStatus, str] = ReportStatus.PENDING,
    location: str = "",
    title: Optional[str] = None,
    description: Optional[str] = None,
    submitted_by: Optional[int] = None,
    submitter_name: Optional[str] = None,
    injury_level: Optional[str] = None,
    severity_level: Optional[str] = None,
    updated_at: Optional[datetime] = None,
    resolved_at: Optional[datetime] = None
) -> None:
    """Create a report record."""
    with get_db_connection() as conn:
        conn.execute(
            """
            INSERT INTO reports (
                report_id, type, status, title, description, location,
                submitted_at, submitted_by, submitter_name, injury_level,
                severity_level, updated_at, resolved_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                report_id, _value(report_type), _value(status), title, description,
                location, _iso(submitted_at), submitted_by, submitter_name,
                injury_level, severity_level, _iso(updated_at), _iso(resolved_at)
            )
        )
        conn.commit()
    logger.debug(f"Created report {report_id}")


def create_assignment(
    assignment_id: int,
    report_id: int,
    staff_id: int,
    assigned_at: datetime,
    action_taken: Optional[str] = None,
    additional_feedback: Optional[str] = None,
    updated_at: Optional[datetime] = None
) -> None:
    """Create an assignment record."""
    with get_db_connection() as conn:
        conn.execute(
            """
            INSERT INTO report_assignments (
                assignment_id, report_id, staff_id, assigned_at,
                action_taken, additional_feedback, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                assignment_id, report_id, staff_id, _iso(assigned_at),
                action_taken, additional_feedback, _iso(updated_at)
            )
        )
        conn.commit()
    logger.debug(f"Created assignment {assignment_id} ({report_id} -> {staff_id})")


# ============================================================================
# Snapshot reads
# ============================================================================

def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )


def _parse_rows(
    kind: str,
    id_column: str,
    rows: List[sqlite3.Row],
    build: Callable[[sqlite3.Row], T]
) -> List[T]:
    """Build one model per row; rows that fail validation are logged and skipped."""
    records = []
    for row in rows:
        try:
            records.append(build(row))
        except ValidationError as e:
            issue = DataIntegrityWarning(kind, row[id_column], reason=_describe(e))
            logger.warning(f"Skipping row: {issue}")
    return records


def _report_from_row(row: sqlite3.Row) -> Report:
    return Report(
        id=row['report_id'],
        type=row['type'],
        status=row['status'],
        title=row['title'],
        description=row['description'],
        location=row['location'] or "",
        submitted_at=row['submitted_at'],
        submitted_by=row['submitted_by'],
        submitter_name=row['submitter_name'],
        injury_level=row['injury_level'],
        severity_level=row['severity_level'],
        updated_at=row['updated_at'],
        resolved_at=row['resolved_at']
    )


def _assignment_from_row(row: sqlite3.Row) -> Assignment:
    return Assignment(
        id=row['assignment_id'],
        report_id=row['report_id'],
        staff_id=row['staff_id'],
        assigned_at=row['assigned_at'],
        action_taken=row['action_taken'],
        additional_feedback=row['additional_feedback'],
        updated_at=row['updated_at']
    )


def _staff_from_row(row: sqlite3.Row) -> Staff:
    return Staff(
        id=row['staff_id'],
        name=row['name'] or "",
        email=row['email'],
        role=row['role'],
        department=row['department'] or "",
        position=row['position'] or "",
        supervisor_id=row['supervisor_id']
    )


def list_reports(
    status: Union[ReportStatus, str, None] = None,
    report_type: Union[ReportType, str, None] = None
) -> List[Report]:
    """List reports, optionally filtered by status and type."""
    where, params = _where({"status": _value(status), "type": _value(report_type)})
    with get_db_connection(read_only=True) as conn:
        rows = conn.execute(
            f"SELECT * FROM reports{where} ORDER BY report_id ASC",
            params
        ).fetchall()

    return _parse_rows("report", "report_id", rows, _report_from_row)


def list_assignments(
    report_id: Optional[int] = None,
    staff_id: Optional[int] = None
) -> List[Assignment]:
    """List assignments, optionally filtered by report or staff."""
    where, params = _where({"report_id": report_id, "staff_id": staff_id})
    with get_db_connection(read_only=True) as conn:
        rows = conn.execute(
            f"SELECT * FROM report_assignments{where} ORDER BY assignment_id ASC",
            params
        ).fetchall()

    return _parse_rows("assignment", "assignment_id", rows, _assignment_from_row)


def list_staff(
    role: Union[Role, str, None] = None,
    supervisor_id: Optional[int] = None
) -> List[Staff]:
    """List staff, optionally filtered by role and supervisor."""
    where, params = _where({"role": _value(role), "supervisor_id": supervisor_id})
    with get_db_connection(read_only=True) as conn:
        rows = conn.execute(
            f"SELECT * FROM staff{where} ORDER BY staff_id ASC",
            params
        ).fetchall()

    return _parse_rows("staff", "staff_id", rows, _staff_from_row)
