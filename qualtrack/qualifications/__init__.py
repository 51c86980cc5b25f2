"""
QualTrack Qualifications Module

Qualification masters, per-employee qualification records, and the
lifecycle engine: expiration calculation, urgency classification,
report filtering, and CSV/Excel export.
"""

from qualtrack.qualifications.errors import (
    DuplicateQualificationError,
    InvalidDateError,
    InvalidFilterError,
    InvalidPolicyError,
    NotFoundError,
    QualificationError,
    ValidationError,
)
from qualtrack.qualifications.models import (
    PERMANENT,
    ColumnSpec,
    EnrichedRow,
    ExpirationStatus,
    QualificationRecord,
    ValidityPolicy,
)
from qualtrack.qualifications.lifecycle import (
    DEFAULT_VALIDITY_YEARS,
    WARNING_DAYS,
    classify,
    compute_expiration,
    days_between,
)
from qualtrack.qualifications.filters import FilterCriteria, filter_rows
from qualtrack.qualifications.export import DEFAULT_COLUMNS, export_rows, export_rows_xlsx
