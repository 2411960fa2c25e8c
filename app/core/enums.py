from enum import Enum


class StudentStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    GRADUATED = "Graduated"


class FacultyStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    RETIRED = "Retired"


class BusStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    UNDER_MAINTENANCE = "Under Maintenance"


class AnnouncementStatus(str, Enum):
    DRAFT = "Draft"
    PUBLISHED = "Published"
    SCHEDULED = "Scheduled"


class RequestStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"


class RequestType(str, Enum):
    LEAVE = "Leave"
    PERMISSION = "Permission"
    OTHER = "Other"


class PartyType(str, Enum):
    """Sender / recipient / requester kinds."""

    ADMIN = "admin"
    STAFF = "staff"
    STUDENT = "student"
    OTHER = "other"


class ReportKind(str, Enum):
    STUDENTS = "students"
    STAFF = "staff"
    TRANSPORT = "transport"
