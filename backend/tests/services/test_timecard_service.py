"""Tests for TimecardService clock events, dashboards and exports."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from app.core.exceptions import ConflictException, NotFoundException, ValidationException
from app.models.timecard import Employee
from app.services.timecard_service import TimecardService, timecard_state

DAY = date(2030, 1, 7)


def _utc(hour, minute=0, day=7):
    # Guayaquil is UTC-5 all year
    return datetime(2030, 1, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def service(db):
    return TimecardService(db)


@pytest.fixture
def second_employee(db):
    person = Employee(code="LUIS02", name="Luis Vera", position="Asistente", status="active")
    db.add(person)
    db.commit()
    return person


class TestEmployees:
    def test_create_employee_normalizes_code(self, service):
        employee = service.create_employee({"code": " maria03 ", "name": "María"})

        assert employee.code == "MARIA03"
        assert employee.status == "active"

    def test_duplicate_code(self, service, employee):
        with pytest.raises(ConflictException) as exc_info:
            service.create_employee({"code": "ana01", "name": "Otra Ana"})
        assert exc_info.value.code == "duplicate_code"

    def test_missing_fields(self, service):
        with pytest.raises(ValidationException):
            service.create_employee({"code": "X1"})

    def test_update_and_deactivate(self, service, employee):
        updated = service.update_employee(employee.id, {"position": "Jefa de taller"})
        assert updated.position == "Jefa de taller"

        service.set_employee_status(employee.id, "inactive")

        assert service.list_employees(active_only=True) == []
        with pytest.raises(NotFoundException):
            service.clock_in("ANA01", now=_utc(14))

    def test_invalid_status(self, service, employee):
        with pytest.raises(ValidationException) as exc_info:
            service.set_employee_status(employee.id, "vacation")
        assert exc_info.value.code == "invalid_status"


class TestClock:
    def test_clock_in_uses_studio_date(self, service, employee):
        # 02:00 UTC is still the previous evening in the studio
        timecard = service.clock_in("ana01", now=_utc(2, day=8))

        assert timecard.date == DAY
        assert timecard.time_out is None
        assert timecard_state(timecard) == "in_progress"

    def test_clock_out_records_hours(self, service, employee):
        service.clock_in("ANA01", now=_utc(14))

        timecard = service.clock_out("ANA01", now=_utc(22, 15))

        assert timecard.hours_worked == Decimal("8.25")
        assert timecard_state(timecard) == "present"

    def test_double_clock_in(self, service, employee):
        service.clock_in("ANA01", now=_utc(14))

        with pytest.raises(ValidationException) as exc_info:
            service.clock_in("ANA01", now=_utc(15))
        assert exc_info.value.code == "already_clocked_in"

    def test_clock_out_without_clock_in(self, service, employee):
        with pytest.raises(ValidationException) as exc_info:
            service.clock_out("ANA01", now=_utc(22))
        assert exc_info.value.code == "not_clocked_in"

    def test_double_clock_out(self, service, employee):
        service.clock_in("ANA01", now=_utc(14))
        service.clock_out("ANA01", now=_utc(22))

        with pytest.raises(ValidationException) as exc_info:
            service.clock_out("ANA01", now=_utc(23))
        assert exc_info.value.code == "already_clocked_out"

    def test_unknown_code(self, service):
        with pytest.raises(NotFoundException) as exc_info:
            service.clock_in("NOBODY", now=_utc(14))
        assert exc_info.value.code == "employee_not_found"

    def test_status_without_timecard_is_absent(self, service, employee):
        status = service.get_status("ANA01")

        assert status["status"] == "absent"
        assert status["timecard"] is None
        assert status["employee"].code == "ANA01"


class TestReports:
    def test_dashboard(self, service, db, employee, second_employee):
        absent = Employee(code="MARIA03", name="María", status="active")
        db.add(absent)
        db.commit()
        service.clock_in("ANA01", now=_utc(14))
        service.clock_out("ANA01", now=_utc(22))
        service.clock_in("LUIS02", now=_utc(14, 30))

        dashboard = service.get_dashboard(DAY)

        assert dashboard["total_employees"] == 3
        assert dashboard["active_today"] == 2
        assert dashboard["absent_today"] == 1
        assert dashboard["late_today"] == 1
        assert dashboard["average_hours_today"] == 8.0
        states = {row["employee"].code: row["status"] for row in dashboard["employees_status"]}
        assert states == {"ANA01": "present", "LUIS02": "in_progress", "MARIA03": "absent"}

    def test_employee_report(self, service, employee):
        service.clock_in("ANA01", now=_utc(14))
        service.clock_out("ANA01", now=_utc(22))
        service.clock_in("ANA01", now=_utc(14, day=8))
        service.clock_out("ANA01", now=_utc(18, day=8))

        report = service.get_employee_report(employee.id, 1, 2030)

        assert report["total_hours"] == 12.0
        assert report["average_hours"] == 6.0
        assert report["days_present"] == 2
        assert [t.date for t in report["timecards"]] == [date(2030, 1, 8), DAY]

    def test_report_rejects_bad_month(self, service, employee):
        with pytest.raises(ValidationException) as exc_info:
            service.get_employee_report(employee.id, 13, 2030)
        assert exc_info.value.code == "invalid_month"

    def test_history_for_month(self, service, employee):
        service.clock_in("ANA01", now=_utc(14))

        history = service.get_history("ANA01", month=1, year=2030)

        assert [t.date for t in history] == [DAY]
        assert service.get_history("ANA01", month=2, year=2030) == []

    def test_export_csv_skips_inactive_employees(self, service, employee, second_employee):
        service.clock_in("ANA01", now=_utc(14))
        service.clock_out("ANA01", now=_utc(22))
        service.clock_in("LUIS02", now=_utc(15))
        service.set_employee_status(second_employee.id, "inactive")

        lines = service.export_csv(month=1, year=2030).splitlines()

        assert lines[0] == "Código,Nombre,Puesto,Fecha,Entrada,Salida,Horas"
        assert lines[1:] == ["ANA01,Ana Torres,Instructora,2030-01-07,09:00,17:00,8.00"]
