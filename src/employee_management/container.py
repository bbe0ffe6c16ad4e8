from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.mysql_identity_repository import MySQLIdentityRepository
from .auth.repository import IdentityRepository
from .auth.service import AuthService
from .auth.tokens import TokenCodec
from .core.constants import TOKEN_TTL_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.repository import DepartmentRepository
from .departments.service import DepartmentService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.repository import SalaryRepository
from .payroll.service import PayrollService
from .performance.mysql_review_repository import MySQLReviewRepository
from .performance.repository import ReviewRepository
from .performance.service import PerformanceService
from .positions.mysql_position_repository import MySQLPositionRepository
from .positions.repository import PositionRepository
from .positions.service import PositionService
from .recruitment.mysql_application_repository import MySQLApplicationRepository
from .recruitment.mysql_posting_repository import MySQLPostingRepository
from .recruitment.repository import ApplicationRepository, PostingRepository
from .recruitment.service import RecruitmentService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    identities_repo: IdentityRepository
    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    positions_repo: PositionRepository
    leaves_repo: LeaveRepository
    reviews_repo: ReviewRepository
    salaries_repo: SalaryRepository
    postings_repo: PostingRepository
    applications_repo: ApplicationRepository

    auth_service: AuthService
    employee_service: EmployeeService
    department_service: DepartmentService
    position_service: PositionService
    leave_service: LeaveService
    performance_service: PerformanceService
    payroll_service: PayrollService
    recruitment_service: RecruitmentService


def assemble(
    *,
    identities_repo: IdentityRepository,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    positions_repo: PositionRepository,
    leaves_repo: LeaveRepository,
    reviews_repo: ReviewRepository,
    salaries_repo: SalaryRepository,
    postings_repo: PostingRepository,
    applications_repo: ApplicationRepository,
    tokens: TokenCodec,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over whatever repositories are given (MySQL in production, fakes in tests)."""
    return Container(
        conn=conn,
        identities_repo=identities_repo,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        positions_repo=positions_repo,
        leaves_repo=leaves_repo,
        reviews_repo=reviews_repo,
        salaries_repo=salaries_repo,
        postings_repo=postings_repo,
        applications_repo=applications_repo,
        auth_service=AuthService(identities_repo, employees_repo, tokens),
        employee_service=EmployeeService(employees_repo, departments_repo, positions_repo, identities_repo),
        department_service=DepartmentService(departments_repo, employees_repo),
        position_service=PositionService(positions_repo, departments_repo),
        leave_service=LeaveService(leaves_repo, employees_repo),
        performance_service=PerformanceService(reviews_repo, employees_repo),
        payroll_service=PayrollService(salaries_repo, employees_repo),
        recruitment_service=RecruitmentService(postings_repo, applications_repo, departments_repo),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    token_ttl_hours: int = TOKEN_TTL_HOURS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        identities_repo=MySQLIdentityRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        positions_repo=MySQLPositionRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        reviews_repo=MySQLReviewRepository(conn),
        salaries_repo=MySQLSalaryRepository(conn),
        postings_repo=MySQLPostingRepository(conn),
        applications_repo=MySQLApplicationRepository(conn),
        tokens=TokenCodec(jwt_secret, algorithm=jwt_algorithm, ttl_hours=token_ttl_hours),
    )
