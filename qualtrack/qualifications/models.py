"""
Qualification data types.

Plain dataclasses handed between the repositories, the lifecycle engine,
and the API/CLI boundary. Dates are datetime.date; an expiration is either
a date or the PERMANENT sentinel.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

# Serialized sentinel for "never expires" (validity period and expiration date)
PERMANENT = "permanent"

Expiration = Union[date, str]
ValidityPeriod = Union[int, str]


class ExpirationStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    EXPIRED = "expired"

    @property
    def label(self) -> str:
        return self.value.title()


def format_expiration(expiration: Optional[Expiration]) -> str:
    """ISO date string, or the permanent sentinel as stored."""
    if expiration is None:
        return ""
    if isinstance(expiration, date):
        return expiration.isoformat()
    return str(expiration)


@dataclass
class ValidityPolicy:
    """A qualification master: named template with a validity period."""
    policy_id: str
    name: str
    validity_period: ValidityPeriod
    category: Optional[str] = None
    active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.policy_id,
            "name": self.name,
            "validity_period": self.validity_period,
            "category": self.category,
            "is_active": self.active,
        }


@dataclass
class QualificationRecord:
    qualification_id: str
    employee_id: str
    qualification_name: str
    acquired_date: date
    expiration_date: Expiration
    master_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.qualification_id,
            "employee_id": self.employee_id,
            "qualification_name": self.qualification_name,
            "acquired_date": self.acquired_date.isoformat(),
            "expiration_date": format_expiration(self.expiration_date),
            "master_id": self.master_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class EnrichedRow:
    """Qualification joined with organisational names and its urgency status."""
    qualification_id: str
    employee_id: str
    employee_name: str
    company_id: str
    company_name: str
    qualification_name: str
    acquired_date: date
    expiration_date: Expiration
    status: ExpirationStatus
    department_id: Optional[str] = None
    department_name: Optional[str] = None

    @property
    def status_label(self) -> str:
        return self.status.label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "qualification_id": self.qualification_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "company_id": self.company_id,
            "company_name": self.company_name,
            "department_id": self.department_id,
            "department_name": self.department_name,
            "qualification_name": self.qualification_name,
            "acquired_date": self.acquired_date.isoformat(),
            "expiration_date": format_expiration(self.expiration_date),
            "status": self.status.value,
            "status_label": self.status_label,
        }


@dataclass(frozen=True)
class ColumnSpec:
    """One export column: header label plus how to pull the cell from a row."""
    label: str
    key: str
    formatter: Optional[Callable[[Any], str]] = None
    width: int = 18  # spreadsheet column width

    def value_for(self, row: EnrichedRow) -> str:
        value = getattr(row, self.key, None)
        if self.formatter is not None:
            value = self.formatter(value)
        if value is None:
            return ""
        if isinstance(value, Enum):
            return str(value.value)
        if isinstance(value, date):
            return value.isoformat()
        return str(value)
