"""
Report filtering for the all-employee qualification list.

Turns raw query parameters into FilterCriteria, joins stored rows with
their urgency status, and returns the matching subset in a fixed order:
company name, department name (rows without a department last), employee
name, qualification name, then qualification id.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from qualtrack.qualifications.errors import InvalidFilterError
from qualtrack.qualifications.lifecycle import classify, parse_expiration, parse_iso_date
from qualtrack.qualifications.models import EnrichedRow, ExpirationStatus

# Query parameter aliases accepted from HTTP and CLI callers
_PARAM_KEYS = {
    "company_id": ("companyId", "company_id"),
    "department_id": ("departmentId", "department_id"),
    "expiration_status": ("expirationStatus", "expiration_status", "status"),
    "search_keyword": ("searchKeyword", "search_keyword", "keyword"),
}


def parse_status(value: Any) -> Optional[ExpirationStatus]:
    """Empty means no constraint; anything outside normal/warning/expired fails."""
    if value is None:
        return None
    if isinstance(value, ExpirationStatus):
        return value
    if not isinstance(value, str):
        raise InvalidFilterError(f"Invalid expiration status: {value!r}")
    text = value.strip().lower()
    if not text:
        return None
    try:
        return ExpirationStatus(text)
    except ValueError:
        allowed = ", ".join(s.value for s in ExpirationStatus)
        raise InvalidFilterError(
            f"Invalid expiration status: {value!r} (expected one of: {allowed})"
        ) from None


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class FilterCriteria:
    """All fields optional; set fields are ANDed together."""
    company_id: Optional[str] = None
    department_id: Optional[str] = None
    expiration_status: Optional[ExpirationStatus] = None
    search_keyword: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "company_id", _blank_to_none(self.company_id))
        object.__setattr__(self, "department_id", _blank_to_none(self.department_id))
        object.__setattr__(self, "expiration_status", parse_status(self.expiration_status))
        object.__setattr__(self, "search_keyword", _blank_to_none(self.search_keyword))

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]]) -> "FilterCriteria":
        """Build criteria from query parameters (camelCase or snake_case)."""
        if not params:
            return cls()
        values = {}
        for field_name, keys in _PARAM_KEYS.items():
            for key in keys:
                if params.get(key) not in (None, ""):
                    values[field_name] = params.get(key)
                    break
        return cls(**values)

    def to_dict(self) -> dict:
        return {
            "company_id": self.company_id,
            "department_id": self.department_id,
            "expiration_status": (
                self.expiration_status.value if self.expiration_status else None
            ),
            "search_keyword": self.search_keyword,
        }


# ---------------------------------------------------------------------------
# Row enrichment
# ---------------------------------------------------------------------------

def enrich_row(record: Mapping[str, Any], today: date) -> EnrichedRow:
    """
    Build an EnrichedRow from a joined storage row and classify it.

    Expects keys: qualification_id, employee_id, employee_name, company_id,
    company_name, department_id, department_name, qualification_name,
    acquired_date, expiration_date.
    """
    expiration = parse_expiration(record["expiration_date"])
    return EnrichedRow(
        qualification_id=record["qualification_id"],
        employee_id=record["employee_id"],
        employee_name=record["employee_name"],
        company_id=record["company_id"],
        company_name=record["company_name"],
        department_id=record["department_id"] or None,
        department_name=record["department_name"] or None,
        qualification_name=record["qualification_name"],
        acquired_date=parse_iso_date(record["acquired_date"]),
        expiration_date=expiration,
        status=classify(expiration, today),
    )


# ---------------------------------------------------------------------------
# Filter engine
# ---------------------------------------------------------------------------

def matches(row: EnrichedRow, criteria: FilterCriteria) -> bool:
    if criteria.company_id and row.company_id != criteria.company_id:
        return False
    if criteria.department_id and row.department_id != criteria.department_id:
        return False
    if criteria.expiration_status and row.status != criteria.expiration_status:
        return False
    if criteria.search_keyword:
        needle = criteria.search_keyword.casefold()
        if (needle not in row.employee_name.casefold()
                and needle not in row.qualification_name.casefold()):
            return False
    return True


def sort_key(row: EnrichedRow) -> Tuple:
    return (
        row.company_name,
        row.department_name is None,
        row.department_name or "",
        row.employee_name,
        row.qualification_name,
        row.qualification_id,
    )


def sort_rows(rows: Iterable[EnrichedRow]) -> List[EnrichedRow]:
    return sorted(rows, key=sort_key)


def filter_rows(
    rows: Iterable[EnrichedRow], criteria: Optional[FilterCriteria] = None
) -> List[EnrichedRow]:
    """
    Return the rows matching every set criterion, in report order.

    Never raises for an empty result. Criteria built from raw strings are
    validated on construction (InvalidFilterError).
    """
    if criteria is None:
        criteria = FilterCriteria()
    return sort_rows(row for row in rows if matches(row, criteria))
