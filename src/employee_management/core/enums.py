from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for authorization."""

    ADMIN = "admin"
    HR = "hr"
    MANAGER = "manager"
    DEPARTMENT_HEAD = "department_head"
    EMPLOYEE = "employee"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class PositionLevel(str, Enum):
    """Seniority band of a position. Declaration order is the sort order."""

    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    MANAGER = "manager"


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    EMERGENCY = "emergency"


class LeaveStatus(str, Enum):
    """Leave approval flow: pending -> approved/rejected, or cancelled by the owner."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class ReviewStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"


class GoalStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class SalaryStatus(str, Enum):
    """Payroll flow: draft -> processed -> paid."""

    DRAFT = "draft"
    PROCESSED = "processed"
    PAID = "paid"


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class PostingStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    FILLED = "filled"


class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    UNDER_REVIEW = "under_review"
    SHORTLISTED = "shortlisted"
    INTERVIEWED = "interviewed"
    SELECTED = "selected"
    REJECTED = "rejected"


class DeleteResult(str, Enum):
    """Outcome of a conditional delete against referencing rows."""

    DELETED = "deleted"
    NOT_FOUND = "not_found"
    IN_USE = "in_use"
