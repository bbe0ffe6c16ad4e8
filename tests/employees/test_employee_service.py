from __future__ import annotations

import re
from datetime import date

import pytest

from employee_management.core.enums import EmployeeStatus, Role
from employee_management.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from employee_management.employees.service import generate_employee_code


@pytest.fixture
def setup(org):
    dept = org.department("Engineering")
    pos = org.position(dept, "Engineer")
    admin = org.employee(dept, pos, first_name="Ada", last_name="Admin", role=Role.ADMIN)
    hr = org.employee(dept, pos, first_name="Hank", last_name="Hr", role=Role.HR)
    staff = org.employee(dept, pos, first_name="Sam", last_name="Staff", role=Role.EMPLOYEE)
    return {"dept": dept, "pos": pos, "admin": admin, "hr": hr, "staff": staff}


def _payload(setup, **overrides):
    data = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane.doe@company.com",
        "phone": "555-0199",
        "department_id": setup["dept"],
        "position_id": setup["pos"],
        "password": "welcome1",
    }
    data.update(overrides)
    return data


def test_generated_code_is_emp_plus_ten_hex():
    code = generate_employee_code()
    assert re.fullmatch(r"EMP[0-9A-F]{10}", code)
    assert code != generate_employee_code()


def test_create_employee_provisions_identity(container, setup, store):
    employee = container.employee_service.create_employee(setup["hr"], _payload(setup), today=date(2025, 3, 1))

    assert employee.employee_id > 0
    assert employee.department_name == "Engineering"
    assert employee.date_of_joining == date(2025, 3, 1)
    assert employee.address.country == "India"

    identity = container.identities_repo.get_by_email("jane.doe@company.com")
    assert identity.employee_id == employee.employee_id
    assert identity.role == Role.EMPLOYEE


def test_create_employee_requires_admin_or_hr(container, setup):
    with pytest.raises(AuthorizationError):
        container.employee_service.create_employee(setup["staff"], _payload(setup))


def test_only_admin_creates_privileged_accounts(container, setup):
    with pytest.raises(AuthorizationError):
        container.employee_service.create_employee(setup["hr"], _payload(setup, account_role="admin"))

    employee = container.employee_service.create_employee(setup["admin"], _payload(setup, account_role="hr"))
    assert container.identities_repo.get_by_email(employee.email).role == Role.HR


def test_duplicate_email_is_a_conflict(container, setup):
    container.employee_service.create_employee(setup["hr"], _payload(setup))
    with pytest.raises(ConflictError):
        container.employee_service.create_employee(setup["hr"], _payload(setup, email="JANE.DOE@company.com"))


@pytest.mark.parametrize(
    "override, message",
    [
        ({"department_id": 999}, "Department does not exist"),
        ({"position_id": 999}, "Role does not exist"),
        ({"manager_id": 999}, "Manager does not exist"),
        ({"gender": "robot"}, "Gender"),
        ({"email": "not-an-email"}, "Email"),
        ({"first_name": " "}, "First name"),
        ({"password": "123"}, "Password"),
    ],
)
def test_create_employee_validation(container, setup, override, message):
    with pytest.raises(ValidationError, match=message):
        container.employee_service.create_employee(setup["hr"], _payload(setup, **override))


def test_update_is_a_partial_merge(container, setup):
    created = container.employee_service.create_employee(setup["hr"], _payload(setup))

    updated = container.employee_service.update_employee(
        setup["hr"],
        created.employee_id,
        {"phone": "555-0000", "address": {"city": "Pune"}, "status": "inactive"},
    )

    assert updated.phone == "555-0000"
    assert updated.address.city == "Pune"
    assert updated.address.country == "India"
    assert updated.status == EmployeeStatus.INACTIVE
    assert updated.first_name == "Jane"
    assert updated.employee_code == created.employee_code


def test_update_rejects_self_as_manager(container, setup):
    staff = setup["staff"]
    with pytest.raises(ValidationError):
        container.employee_service.update_employee(setup["hr"], staff.employee_id, {"manager_id": staff.employee_id})


def test_update_unknown_employee(container, setup):
    with pytest.raises(NotFoundError):
        container.employee_service.update_employee(setup["hr"], 999, {"phone": "1"})


def test_delete_removes_only_the_linked_identity(container, setup, store):
    staff = setup["staff"]
    before = set(store.identities)

    container.employee_service.delete_employee(setup["admin"], staff.employee_id)

    assert staff.employee_id not in store.employees
    assert set(store.identities) == before - {staff.identity_id}


def test_delete_clears_manager_of_reports(container, setup):
    report = container.employee_service.update_employee(
        setup["hr"], setup["staff"].employee_id, {"manager_id": setup["hr"].employee_id}
    )
    assert report.manager_id == setup["hr"].employee_id

    container.employee_service.delete_employee(setup["admin"], setup["hr"].employee_id)
    updated = container.employee_service.update_employee(
        setup["admin"], setup["staff"].employee_id, {"phone": "555-0101"}
    )

    assert updated.manager_id is None
    assert updated.phone == "555-0101"


def test_delete_requires_admin(container, setup):
    with pytest.raises(AuthorizationError):
        container.employee_service.delete_employee(setup["hr"], setup["staff"].employee_id)


def test_delete_unknown_employee(container, setup):
    with pytest.raises(NotFoundError):
        container.employee_service.delete_employee(setup["admin"], 999)


def test_stats(container, setup, org):
    other = org.department("Sales")
    org.employee(other, setup["pos"], first_name="Ina", status=EmployeeStatus.INACTIVE)

    stats = container.employee_service.get_stats(setup["hr"])

    assert stats.total == 4
    assert stats.active == 3
    assert stats.inactive == 1
    assert {(d.name, d.count) for d in stats.department_stats} == {("Engineering", 3), ("Sales", 1)}


def test_list_by_department_sorted_by_first_name(container, setup):
    rows = container.employee_service.list_by_department(setup["dept"])
    assert [r["first_name"] for r in rows] == ["Ada", "Hank", "Sam"]
    assert set(rows[0]) == {"id", "first_name", "last_name"}
