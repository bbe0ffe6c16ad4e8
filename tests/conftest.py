from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from werkzeug.security import generate_password_hash

from employee_management.auth.model import Identity
from employee_management.auth.tokens import TokenCodec
from employee_management.container import assemble
from employee_management.core.enums import (
    DeleteResult,
    EmployeeStatus,
    LeaveStatus,
    PositionLevel,
    PostingStatus,
    Role,
    SalaryStatus,
)
from employee_management.core.exceptions import ConflictError, NotFoundError
from employee_management.core.permissions import Caller
from employee_management.departments.model import Department
from employee_management.employees.model import DepartmentHeadcount, Employee
from employee_management.main import create_app
from employee_management.positions.model import Position

TEST_JWT_SECRET = "test-jwt-secret"
DEFAULT_PASSWORD = "secret123"

LEVEL_ORDER = {level: i for i, level in enumerate(PositionLevel)}


class InMemoryStore:
    """Shared tables so fakes can answer join-like questions (counts, cascades)."""

    def __init__(self):
        self.identities: dict[int, Identity] = {}
        self.employees: dict[int, Employee] = {}
        self.departments: dict[int, Department] = {}
        self.positions: dict[int, Position] = {}
        self.leaves: dict = {}
        self.reviews: dict = {}
        self.salaries: dict = {}
        self.postings: dict = {}
        self.applications: dict = {}
        self._ids = {}

    def next_id(self, table: str) -> int:
        counter = self._ids.setdefault(table, itertools.count(1))
        return next(counter)


class FakeIdentityRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def add(self, identity: Identity) -> int:
        iid = self._s.next_id("identities")
        self._s.identities[iid] = replace(identity, identity_id=iid)
        return iid

    def get_by_id(self, identity_id):
        return self._s.identities.get(int(identity_id))

    def get_by_email(self, email):
        for i in self._s.identities.values():
            if i.email == email.lower():
                return i
        return None

    def touch_last_login(self, identity_id, *, when):
        i = self._s.identities[int(identity_id)]
        self._s.identities[i.identity_id] = replace(i, last_login=when)

    def update_password(self, identity_id, *, password_hash):
        i = self._s.identities.get(int(identity_id))
        if not i:
            return False
        self._s.identities[i.identity_id] = replace(i, password_hash=password_hash)
        return True


class FakeEmployeeRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _populate(self, e: Employee) -> Employee:
        dept = self._s.departments.get(e.department_id)
        pos = self._s.positions.get(e.position_id)
        manager = self._s.employees.get(e.manager_id) if e.manager_id else None
        return replace(
            e,
            department_name=dept.name if dept else None,
            position_title=pos.title if pos else None,
            position_base_salary=pos.base_salary if pos else None,
            manager_name=manager.full_name if manager else None,
        )

    def get_by_id(self, employee_id):
        e = self._s.employees.get(int(employee_id))
        return self._populate(e) if e else None

    def get_by_email(self, email):
        for e in self._s.employees.values():
            if e.email == email.lower():
                return self._populate(e)
        return None

    def list_all(self):
        return [self._populate(e) for e in sorted(self._s.employees.values(), key=lambda e: -e.employee_id)]

    def list_by_department(self, department_id):
        rows = [e for e in self._s.employees.values() if e.department_id == int(department_id)]
        return [self._populate(e) for e in sorted(rows, key=lambda e: e.first_name)]

    def create_with_identity(self, employee, *, password_hash, account_role):
        for e in self._s.employees.values():
            if e.email == employee.email or e.employee_code == employee.employee_code:
                raise ConflictError("An employee or account with this email already exists")
        eid = self._s.next_id("employees")
        self._s.employees[eid] = replace(employee, employee_id=eid)
        FakeIdentityRepo(self._s).add(
            Identity(
                identity_id=0,
                email=employee.email,
                password_hash=password_hash,
                role=account_role,
                employee_id=eid,
            )
        )
        return eid

    def update(self, employee):
        if employee.employee_id not in self._s.employees:
            return False
        self._s.employees[employee.employee_id] = employee
        return True

    def delete_with_identity(self, employee_id):
        if self._s.employees.pop(int(employee_id), None) is None:
            return False
        for iid in [i.identity_id for i in self._s.identities.values() if i.employee_id == int(employee_id)]:
            del self._s.identities[iid]
        for e in [e for e in self._s.employees.values() if e.manager_id == int(employee_id)]:
            self._s.employees[e.employee_id] = replace(e, manager_id=None)
        for d in [d for d in self._s.departments.values() if d.head_id == int(employee_id)]:
            self._s.departments[d.department_id] = replace(d, head_id=None)
        return True

    def count(self, *, status=None):
        return sum(1 for e in self._s.employees.values() if status is None or e.status == status)

    def headcount_by_department(self):
        out = []
        for d in sorted(self._s.departments.values(), key=lambda d: d.name):
            n = sum(1 for e in self._s.employees.values() if e.department_id == d.department_id)
            if n:
                out.append(DepartmentHeadcount(department_id=d.department_id, name=d.name, count=n))
        return out


class FakeDepartmentRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _populate(self, d: Department) -> Department:
        head = self._s.employees.get(d.head_id) if d.head_id else None
        count = sum(1 for e in self._s.employees.values() if e.department_id == d.department_id)
        return replace(d, employee_count=count, head_name=head.full_name if head else None)

    def list_with_counts(self):
        return [self._populate(d) for d in sorted(self._s.departments.values(), key=lambda d: d.name)]

    def get_by_id(self, department_id):
        d = self._s.departments.get(int(department_id))
        return self._populate(d) if d else None

    def get_by_name(self, name):
        for d in self._s.departments.values():
            if d.name == name:
                return self._populate(d)
        return None

    def create(self, department):
        if self.get_by_name(department.name):
            raise ConflictError("A department with this name already exists")
        did = self._s.next_id("departments")
        self._s.departments[did] = replace(department, department_id=did)
        return did

    def update(self, department):
        if department.department_id not in self._s.departments:
            return False
        self._s.departments[department.department_id] = replace(department, employee_count=None, head_name=None)
        return True

    def delete_if_unreferenced(self, department_id):
        if int(department_id) not in self._s.departments:
            return DeleteResult.NOT_FOUND
        if any(e.department_id == int(department_id) for e in self._s.employees.values()):
            return DeleteResult.IN_USE
        del self._s.departments[int(department_id)]
        return DeleteResult.DELETED


class FakePositionRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _populate(self, p: Position) -> Position:
        dept = self._s.departments.get(p.department_id)
        return replace(p, department_name=dept.name if dept else None)

    def list_all(self):
        rows = sorted(self._s.positions.values(), key=lambda p: (p.department_id, LEVEL_ORDER[p.level]))
        return [self._populate(p) for p in rows]

    def list_active_by_department(self, department_id):
        rows = [p for p in self._s.positions.values() if p.department_id == int(department_id) and p.is_active]
        return [self._populate(p) for p in sorted(rows, key=lambda p: LEVEL_ORDER[p.level])]

    def get_by_id(self, position_id):
        p = self._s.positions.get(int(position_id))
        return self._populate(p) if p else None

    def create(self, position):
        pid = self._s.next_id("positions")
        self._s.positions[pid] = replace(position, position_id=pid)
        return pid

    def update(self, position):
        if position.position_id not in self._s.positions:
            return False
        self._s.positions[position.position_id] = position
        return True

    def delete_if_unreferenced(self, position_id):
        if int(position_id) not in self._s.positions:
            return DeleteResult.NOT_FOUND
        if any(e.position_id == int(position_id) for e in self._s.employees.values()):
            return DeleteResult.IN_USE
        del self._s.positions[int(position_id)]
        return DeleteResult.DELETED


class FakeLeaveRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create(self, leave):
        lid = self._s.next_id("leaves")
        self._s.leaves[lid] = replace(leave, leave_id=lid)
        return lid

    def get_by_id(self, leave_id):
        return self._s.leaves.get(int(leave_id))

    def list(self, *, employee_id=None, status=None):
        rows = [
            l
            for l in self._s.leaves.values()
            if (employee_id is None or l.employee_id == employee_id) and (status is None or l.status == status)
        ]
        return sorted(rows, key=lambda l: -l.leave_id)

    def update_details(self, leave):
        current = self._s.leaves.get(leave.leave_id)
        if not current or current.status != LeaveStatus.PENDING:
            return False
        self._s.leaves[leave.leave_id] = replace(leave, days=current.days)
        return True

    def decide(self, *, leave_id, status, approver_id, decided_at, comments=None):
        current = self._s.leaves.get(int(leave_id))
        if not current or current.status != LeaveStatus.PENDING:
            return False
        self._s.leaves[current.leave_id] = replace(
            current,
            status=status,
            approver_id=approver_id,
            approval_date=decided_at,
            approval_comments=comments,
        )
        return True

    def cancel(self, *, leave_id):
        current = self._s.leaves.get(int(leave_id))
        if not current or current.status != LeaveStatus.PENDING:
            return False
        self._s.leaves[current.leave_id] = replace(current, status=LeaveStatus.CANCELLED)
        return True


class FakeReviewRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create(self, review):
        rid = self._s.next_id("reviews")
        self._s.reviews[rid] = replace(review, review_id=rid)
        return rid

    def update(self, review):
        if review.review_id not in self._s.reviews:
            return False
        self._s.reviews[review.review_id] = review
        return True

    def get_by_id(self, review_id):
        return self._s.reviews.get(int(review_id))

    def list(self, *, employee_id=None):
        rows = [r for r in self._s.reviews.values() if employee_id is None or r.employee_id == employee_id]
        return sorted(rows, key=lambda r: -r.review_id)

    def delete(self, review_id):
        return self._s.reviews.pop(int(review_id), None) is not None


class FakeSalaryRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create(self, salary):
        sid = self._s.next_id("salaries")
        self._s.salaries[sid] = replace(salary, salary_id=sid)
        return sid

    def update(self, salary):
        current = self._s.salaries.get(salary.salary_id)
        if not current:
            return False
        self._s.salaries[salary.salary_id] = replace(salary, status=current.status)
        return True

    def get_by_id(self, salary_id):
        return self._s.salaries.get(int(salary_id))

    def list(self, *, employee_id=None, month=None, year=None):
        rows = [
            s
            for s in self._s.salaries.values()
            if (employee_id is None or s.employee_id == employee_id)
            and (month is None or s.month == month)
            and (year is None or s.year == year)
        ]
        return sorted(rows, key=lambda s: (-s.year, -s.month, -s.salary_id))

    def mark_processed(self, salary_id, *, when):
        current = self._s.salaries.get(int(salary_id))
        if not current or current.status != SalaryStatus.DRAFT:
            return False
        self._s.salaries[current.salary_id] = replace(current, status=SalaryStatus.PROCESSED, processed_date=when)
        return True

    def mark_paid(self, salary_id, *, when):
        current = self._s.salaries.get(int(salary_id))
        if not current or current.status != SalaryStatus.PROCESSED:
            return False
        self._s.salaries[current.salary_id] = replace(current, status=SalaryStatus.PAID, paid_date=when)
        return True


class FakePostingRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def list(self, *, status=None):
        rows = [p for p in self._s.postings.values() if status is None or p.status == status]
        return sorted(rows, key=lambda p: -p.posting_id)

    def get_by_id(self, posting_id):
        return self._s.postings.get(int(posting_id))

    def create(self, posting):
        pid = self._s.next_id("postings")
        self._s.postings[pid] = replace(posting, posting_id=pid, applications_count=0)
        return pid

    def update(self, posting):
        current = self._s.postings.get(posting.posting_id)
        if not current:
            return False
        self._s.postings[posting.posting_id] = replace(posting, applications_count=current.applications_count)
        return True

    def delete(self, posting_id):
        if self._s.postings.pop(int(posting_id), None) is None:
            return False
        for aid in [a.application_id for a in self._s.applications.values() if a.job_posting_id == int(posting_id)]:
            del self._s.applications[aid]
        return True


class FakeApplicationRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create_and_count(self, application):
        posting = self._s.postings.get(application.job_posting_id)
        if not posting or posting.status != PostingStatus.ACTIVE:
            raise NotFoundError("Job posting not found or no longer accepting applications")
        self._s.postings[posting.posting_id] = replace(posting, applications_count=posting.applications_count + 1)
        aid = self._s.next_id("applications")
        self._s.applications[aid] = replace(application, application_id=aid)
        return aid

    def get_by_id(self, application_id):
        return self._s.applications.get(int(application_id))

    def list(self, *, job_posting_id=None, applicant_id=None):
        rows = [
            a
            for a in self._s.applications.values()
            if (job_posting_id is None or a.job_posting_id == job_posting_id)
            and (applicant_id is None or a.applicant_id == applicant_id)
        ]
        return sorted(rows, key=lambda a: -a.application_id)

    def update_review(
        self,
        *,
        application_id,
        status,
        reviewed_by,
        reviewed_at,
        review_comments,
        interview_date,
        interview_feedback,
    ):
        current = self._s.applications.get(int(application_id))
        if not current:
            return False
        self._s.applications[current.application_id] = replace(
            current,
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            review_comments=review_comments,
            interview_date=interview_date,
            interview_feedback=interview_feedback,
        )
        return True


class Org:
    """Seeds a small organization straight into the store and hands out callers."""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.identities = FakeIdentityRepo(store)
        self._password_hash = generate_password_hash(DEFAULT_PASSWORD)

    def department(self, name: str = "Engineering", **kw) -> int:
        did = self.store.next_id("departments")
        self.store.departments[did] = Department(department_id=did, name=name, **kw)
        return did

    def position(self, department_id: int, title: str = "Engineer", base_salary: str = "50000", **kw) -> int:
        pid = self.store.next_id("positions")
        self.store.positions[pid] = Position(
            position_id=pid,
            title=title,
            department_id=department_id,
            base_salary=Decimal(base_salary),
            **kw,
        )
        return pid

    def employee(
        self,
        department_id: int,
        position_id: int,
        *,
        first_name: str = "Jane",
        last_name: str = "Doe",
        email: str | None = None,
        role: Role | None = Role.EMPLOYEE,
        status: EmployeeStatus = EmployeeStatus.ACTIVE,
    ) -> Caller:
        eid = self.store.next_id("employees")
        email = email or f"{first_name}.{last_name}.{eid}@company.com".lower()
        self.store.employees[eid] = Employee(
            employee_id=eid,
            employee_code=f"EMPTEST{eid:04d}",
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone="555-0100",
            department_id=department_id,
            position_id=position_id,
            date_of_joining=date(2024, 1, 15),
            status=status,
        )
        if role is None:
            return Caller(identity_id=0, role=Role.EMPLOYEE, employee_id=eid)
        iid = self.identities.add(
            Identity(
                identity_id=0,
                email=email,
                password_hash=self._password_hash,
                role=role,
                employee_id=eid,
            )
        )
        return Caller(identity_id=iid, role=role, employee_id=eid)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def org(store):
    return Org(store)


@pytest.fixture
def tokens():
    return TokenCodec(TEST_JWT_SECRET, algorithm="HS256", ttl_hours=24)


@pytest.fixture
def container(store, tokens):
    return assemble(
        identities_repo=FakeIdentityRepo(store),
        employees_repo=FakeEmployeeRepo(store),
        departments_repo=FakeDepartmentRepo(store),
        positions_repo=FakePositionRepo(store),
        leaves_repo=FakeLeaveRepo(store),
        reviews_repo=FakeReviewRepo(store),
        salaries_repo=FakeSalaryRepo(store),
        postings_repo=FakePostingRepo(store),
        applications_repo=FakeApplicationRepo(store),
        tokens=tokens,
    )


@pytest.fixture
def fixed_now():
    return datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def app(container):
    app = create_app(container=container, settings_module="employee_management.config.testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(tokens):
    def make(caller: Caller) -> dict:
        token = tokens.issue(identity_id=caller.identity_id, role=caller.role)
        return {"Authorization": f"Bearer {token}"}

    return make


@pytest.fixture
def password():
    return DEFAULT_PASSWORD
