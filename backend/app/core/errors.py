"""
Error taxonomy for the triage engine.

Fetch failures abort the whole request; integrity problems are recovered
locally by excluding the offending record and are only reported.
"""
from typing import Optional


class InputFetchError(Exception):
    """The report/assignment/staff store could not return a snapshot."""

    def __init__(self, source: str, cause: Optional[BaseException] = None):
        self.source = source
        self.cause = cause
        message = f"Failed to fetch {source}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class DataIntegrityWarning(UserWarning):
    """A record is malformed or references something missing from the snapshot."""

    def __init__(
        self,
        kind: str,
        record_id: int,
        missing_id: Optional[int] = None,
        reason: Optional[str] = None
    ):
        self.kind = kind
        self.record_id = record_id
        self.missing_id = missing_id
        self.reason = reason
        if missing_id is not None:
            message = f"assignment {record_id} references unknown {kind} {missing_id}"
        else:
            message = f"{kind} {record_id} is malformed: {reason}"
        super().__init__(message)
