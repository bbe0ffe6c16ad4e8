from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from employee_management.core.enums import Role, SalaryStatus
from employee_management.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


@pytest.fixture
def staff(org):
    dept = org.department()
    pos = org.position(dept)
    return {
        "hr": org.employee(dept, pos, first_name="Hank", role=Role.HR),
        "dev": org.employee(dept, pos, first_name="Dev", role=Role.EMPLOYEE),
        "ops": org.employee(dept, pos, first_name="Ops", role=Role.EMPLOYEE),
    }


def _payload(staff, **overrides):
    data = {
        "employee_id": staff["dev"].employee_id,
        "basic_salary": 60000,
        "allowances": {"hra": 12000},
        "deductions": {"pf": 4000, "tax": 2500},
        "overtime": {"hours": 5, "rate": 300},
        "bonus": 2000,
        "month": 3,
        "year": 2025,
        "attended_days": 20,
    }
    data.update(overrides)
    return data


def test_create_salary_computes_net(container, staff):
    salary = container.payroll_service.create_salary(staff["hr"], _payload(staff))

    assert salary.net_salary == Decimal("69000")
    assert salary.working_days == 22
    assert salary.status == SalaryStatus.DRAFT


@pytest.mark.parametrize(
    "override, message",
    [
        ({"month": 13}, "Month"),
        ({"month": 0}, "Month"),
        ({"employee_id": 999}, "Employee does not exist"),
        ({"basic_salary": None}, "Basic salary"),
        ({"month": 3.7}, "Month must be an integer"),
        ({"deductions": {"fine": 10}}, "Unknown deduction"),
    ],
)
def test_create_salary_validation(container, staff, override, message):
    with pytest.raises(ValidationError, match=message):
        container.payroll_service.create_salary(staff["hr"], _payload(staff, **override))


def test_negative_amounts_flow_into_net(container, staff):
    salary = container.payroll_service.create_salary(
        staff["hr"], _payload(staff, bonus=-500, deductions={"pf": 4000, "tax": 2500, "other": -100})
    )

    assert salary.bonus == Decimal("-500")
    assert salary.deductions.other == Decimal("-100")
    assert salary.net_salary == Decimal("66600")


def test_only_admin_or_hr_manage_salaries(container, staff):
    with pytest.raises(AuthorizationError):
        container.payroll_service.create_salary(staff["dev"], _payload(staff))


def test_update_recomputes_net(container, staff):
    salary = container.payroll_service.create_salary(staff["hr"], _payload(staff))

    updated = container.payroll_service.update_salary(
        staff["hr"], salary.salary_id, {"bonus": 0, "allowances": {"meal": 500}}
    )

    assert updated.allowances.hra == Decimal("12000")
    assert updated.allowances.meal == Decimal("500")
    assert updated.net_salary == Decimal("67500")


def test_lifecycle_draft_processed_paid(container, staff):
    salary = container.payroll_service.create_salary(staff["hr"], _payload(staff))
    processed_at = datetime(2025, 3, 31, 18, 0)
    paid_at = datetime(2025, 4, 1, 9, 0)

    with pytest.raises(ConflictError):
        container.payroll_service.mark_paid(staff["hr"], salary.salary_id, now=paid_at)

    processed = container.payroll_service.process_salary(staff["hr"], salary.salary_id, now=processed_at)
    assert processed.status == SalaryStatus.PROCESSED
    assert processed.processed_date == processed_at

    with pytest.raises(ConflictError):
        container.payroll_service.process_salary(staff["hr"], salary.salary_id)

    paid = container.payroll_service.mark_paid(staff["hr"], salary.salary_id, now=paid_at)
    assert paid.status == SalaryStatus.PAID
    assert paid.paid_date == paid_at

    with pytest.raises(ConflictError):
        container.payroll_service.update_salary(staff["hr"], salary.salary_id, {"bonus": 1})


def test_queries(container, staff):
    svc = container.payroll_service
    svc.create_salary(staff["hr"], _payload(staff, month=1))
    svc.create_salary(staff["hr"], _payload(staff, month=2))
    svc.create_salary(staff["hr"], _payload(staff, employee_id=staff["ops"].employee_id, month=2))

    assert [s.month for s in svc.list_my_salaries(staff["dev"])] == [2, 1]
    assert len(svc.list_salaries(staff["hr"], month="2", year="2025")) == 2
    assert len(svc.list_salaries(staff["hr"])) == 3
    assert len(svc.list_for_employee(staff["hr"], staff["ops"].employee_id)) == 1

    with pytest.raises(AuthorizationError):
        svc.list_salaries(staff["dev"])


def test_get_salary_visibility(container, staff):
    salary = container.payroll_service.create_salary(staff["hr"], _payload(staff))

    assert container.payroll_service.get_salary(staff["dev"], salary.salary_id).salary_id == salary.salary_id
    with pytest.raises(AuthorizationError):
        container.payroll_service.get_salary(staff["ops"], salary.salary_id)
    with pytest.raises(NotFoundError):
        container.payroll_service.get_salary(staff["hr"], 999)
