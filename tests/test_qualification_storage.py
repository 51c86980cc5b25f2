"""Tests for qualification master and record storage."""

import sqlite3
from datetime import date

import pytest

from qualtrack.qualifications.errors import DuplicateQualificationError, InvalidPolicyError
from qualtrack.qualifications.masters import (
    create_master,
    get_master,
    list_masters,
    set_master_active,
)
from qualtrack.qualifications.models import PERMANENT
from qualtrack.qualifications.records import (
    delete_qualification,
    fetch_report_rows,
    get_qualification,
    insert_qualification,
    list_by_employee,
    name_exists,
    update_qualification,
)


class TestMasters:
    def test_seeded_masters(self, seeded_db):
        masters = list_masters(seeded_db)
        assert len(masters) == 6
        license_master = get_master(seeded_db, "qual-master-license")
        assert license_master.validity_period == 3
        assert get_master(seeded_db, "qual-master-fe").validity_period == PERMANENT

    def test_get_missing(self, memory_db):
        assert get_master(memory_db, "nope") is None

    def test_create_and_filter_by_category(self, memory_db):
        mid = create_master(memory_db, "Forklift Operator", "5", category="Safety")
        create_master(memory_db, "Crane Operator", 2, category="Heavy")
        master = get_master(memory_db, mid)
        assert mid.startswith("qual-master-")
        assert master.validity_period == 5
        assert [m.name for m in list_masters(memory_db, category="Safety")] == ["Forklift Operator"]

    def test_create_rejects_bad_period(self, memory_db):
        with pytest.raises(InvalidPolicyError):
            create_master(memory_db, "Broken", 0)

    def test_active_only(self, memory_db):
        mid = create_master(memory_db, "Old Cert", 1, master_id="qual-master-old")
        assert set_master_active(memory_db, mid, False)
        assert get_master(memory_db, mid).active is False
        assert list_masters(memory_db, active_only=True) == []
        assert len(list_masters(memory_db)) == 1

    def test_to_dict(self, seeded_db):
        data = get_master(seeded_db, "qual-master-toeic").to_dict()
        assert data["id"] == "qual-master-toeic"
        assert data["validity_period"] == 2
        assert data["is_active"] is True


class TestRecords:
    def test_insert_and_get(self, seeded_db):
        qid = insert_qualification(
            seeded_db, "emp-sato", "First Aid", date(2024, 1, 10), date(2025, 1, 10),
        )
        record = get_qualification(seeded_db, qid)
        assert record.employee_id == "emp-sato"
        assert record.acquired_date == date(2024, 1, 10)
        assert record.expiration_date == date(2025, 1, 10)
        assert record.master_id is None

    def test_permanent_round_trip(self, seeded_db):
        qid = insert_qualification(
            seeded_db, "emp-sato", "Bookkeeping", date(2024, 1, 10), PERMANENT,
            master_id="qual-master-boki",
        )
        assert get_qualification(seeded_db, qid).expiration_date == PERMANENT

    def test_get_missing(self, memory_db):
        assert get_qualification(memory_db, "nope") is None

    def test_list_by_employee_newest_first(self, seeded_db):
        insert_qualification(seeded_db, "emp-sato", "Newer", date(2024, 5, 1), date(2025, 5, 1))
        names = [r.qualification_name for r in list_by_employee(seeded_db, "emp-sato")]
        assert names == ["Newer", "Applied IT Engineer Examination"]

    def test_update(self, seeded_db):
        assert update_qualification(
            seeded_db, "qual-yamada-first-aid", "First Aid (Advanced)",
            date(2024, 5, 1), date(2025, 5, 1),
        )
        record = get_qualification(seeded_db, "qual-yamada-first-aid")
        assert record.qualification_name == "First Aid (Advanced)"
        assert record.expiration_date == date(2025, 5, 1)

    def test_update_missing(self, memory_db):
        assert not update_qualification(memory_db, "nope", "x", date(2024, 1, 1), PERMANENT)

    def test_delete(self, seeded_db):
        assert delete_qualification(seeded_db, "qual-sato-ap")
        assert get_qualification(seeded_db, "qual-sato-ap") is None
        assert not delete_qualification(seeded_db, "qual-sato-ap")

    def test_name_exists(self, seeded_db):
        name = "Applied IT Engineer Examination"
        assert name_exists(seeded_db, "emp-sato", name)
        assert not name_exists(seeded_db, "emp-sato", name, exclude_id="qual-sato-ap")
        assert not name_exists(seeded_db, "emp-tanaka", name)

    def test_insert_same_name_twice_rejected(self, seeded_db):
        insert_qualification(seeded_db, "emp-tanaka", "Forklift", date(2024, 1, 10), PERMANENT)
        with pytest.raises(DuplicateQualificationError):
            insert_qualification(seeded_db, "emp-tanaka", "Forklift", date(2024, 2, 10), PERMANENT)
        names = [r.qualification_name for r in list_by_employee(seeded_db, "emp-tanaka")]
        assert names.count("Forklift") == 1

    def test_same_name_for_other_employee_allowed(self, seeded_db):
        name = "Applied IT Engineer Examination"
        qid = insert_qualification(seeded_db, "emp-tanaka", name, date(2024, 1, 10), PERMANENT)
        assert get_qualification(seeded_db, qid).qualification_name == name

    def test_update_onto_existing_name_rejected(self, seeded_db):
        insert_qualification(seeded_db, "emp-yamada", "CPR", date(2024, 1, 10), PERMANENT)
        with pytest.raises(DuplicateQualificationError):
            update_qualification(
                seeded_db, "qual-yamada-first-aid", "CPR", date(2024, 6, 1), date(2025, 6, 1),
            )
        record = get_qualification(seeded_db, "qual-yamada-first-aid")
        assert record.qualification_name == "First Aid Responder"

    def test_other_integrity_errors_propagate(self, seeded_db):
        with pytest.raises(sqlite3.IntegrityError):
            insert_qualification(seeded_db, "emp-nobody", "Forklift", date(2024, 1, 10), PERMANENT)

    def test_employee_delete_cascades(self, seeded_db):
        seeded_db.execute("DELETE FROM employees WHERE id = 'emp-sato'")
        assert get_qualification(seeded_db, "qual-sato-ap") is None


class TestFetchReportRows:
    def test_all_rows_joined(self, seeded_db):
        rows = fetch_report_rows(seeded_db)
        assert len(rows) == 5
        sato = next(r for r in rows if r["qualification_id"] == "qual-sato-ap")
        assert sato["company_name"] == "Affiliate A"
        assert sato["department_name"] == "Engineering"

    def test_employee_without_department(self, seeded_db):
        rows = fetch_report_rows(seeded_db, company_id="comp-d")
        assert len(rows) == 1
        assert rows[0]["department_id"] is None
        assert rows[0]["department_name"] is None

    def test_department_scope(self, seeded_db):
        rows = fetch_report_rows(seeded_db, department_id="dept-b-sales")
        assert [r["employee_id"] for r in rows] == ["emp-suzuki"]
