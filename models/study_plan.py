from datetime import datetime
import enum
from extensions import db

class StudyPlanStatus(str, enum.Enum):
    PLANNED = "planned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class StudyPlanSource(str, enum.Enum):
    MANUAL = "manual"
    AUTOFILL = "autofill"

class StudyPlan(db.Model):
    __tablename__ = "study_plans"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(16), nullable=False, default=StudyPlanStatus.PLANNED.value)
    source = db.Column(db.String(16), nullable=False, default=StudyPlanSource.MANUAL.value)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    course = db.relationship("Course")
    subjects = db.relationship("StudyPlanSubject", back_populates="study_plan",
                               order_by="StudyPlanSubject.id",
                               cascade="all, delete-orphan")


class StudyPlanSubject(db.Model):
    __tablename__ = "study_plan_subjects"

    id = db.Column(db.Integer, primary_key=True)
    study_plan_id = db.Column(db.Integer, db.ForeignKey("study_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_progress_id = db.Column(db.Integer, db.ForeignKey("subject_progress.id", ondelete="CASCADE"), nullable=False)
    allocated_minutes = db.Column(db.Integer, nullable=False)
    is_review = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    study_plan = db.relationship("StudyPlan", back_populates="subjects")
    progress = db.relationship("SubjectProgress")
