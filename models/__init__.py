from extensions import db

from .user import User, Role
from .student import Student
from .course import Course, CourseSubject
from .progress import SubjectProgress, ProgressStage
from .weekly_slot import WeeklyStudySlot
from .study_plan import StudyPlan, StudyPlanSubject, StudyPlanStatus, StudyPlanSource
from .activity import Activity

__all__ = [
    "db",
    "User", "Role",
    "Student",
    "Course", "CourseSubject",
    "SubjectProgress", "ProgressStage",
    "WeeklyStudySlot",
    "StudyPlan", "StudyPlanSubject", "StudyPlanStatus", "StudyPlanSource",
    "Activity",
]
