from app.core.models.announcement import Announcement
from app.core.models.bus import Bus, BusMaintenance
from app.core.models.class_model import SchoolClass
from app.core.models.exam import Exam
from app.core.models.faculty import Faculty
from app.core.models.message import Message
from app.core.models.request import UserRequest
from app.core.models.section_model import Section
from app.core.models.student import Student
from app.core.models.student_mark import StudentMark
from app.core.models.subject import Subject

__all__ = [
    "Announcement",
    "Bus",
    "BusMaintenance",
    "Exam",
    "Faculty",
    "Message",
    "SchoolClass",
    "Section",
    "Student",
    "StudentMark",
    "Subject",
    "UserRequest",
]
