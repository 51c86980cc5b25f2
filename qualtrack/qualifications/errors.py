"""
Qualification error taxonomy.

Each error carries the HTTP status the API boundary answers with.
"""


class QualificationError(Exception):
    """Base class for expected, user-facing qualification failures."""

    status_code = 400


class InvalidDateError(QualificationError):
    """Malformed or impossible calendar date."""


class InvalidPolicyError(QualificationError):
    """Validity period that is neither a positive integer nor permanent."""


class InvalidFilterError(QualificationError):
    """Unrecognized report filter value."""


class ValidationError(QualificationError):
    """Request payload failed field validation (name length, future date)."""


class NotFoundError(QualificationError):
    """Referenced employee, master, or qualification is missing or inactive."""

    status_code = 404


class DuplicateQualificationError(QualificationError):
    """Employee already holds a qualification with the same name."""

    status_code = 409
