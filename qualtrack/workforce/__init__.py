"""
QualTrack Workforce Module

Companies, departments, and employees of the affiliated group.
"""

from qualtrack.workforce.organization import (
    create_company,
    create_department,
    create_employee,
    employee_options,
    get_company,
    get_department,
    get_employee,
    list_companies,
    list_departments,
    list_employees,
)
