from datetime import datetime
import enum
from extensions import db

class ProgressStage(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

class SubjectProgress(db.Model):
    __tablename__ = "subject_progress"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = db.Column(db.Integer, db.ForeignKey("course_subjects.id", ondelete="CASCADE"), nullable=False)
    total_minutes = db.Column(db.Integer, nullable=False)
    completed_minutes = db.Column(db.Integer, nullable=False, default=0)
    remaining_minutes = db.Column(db.Integer, nullable=False)
    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    last_study_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    subject = db.relationship("CourseSubject")

    __table_args__ = (
        db.UniqueConstraint("student_id", "subject_id", name="uq_progress_student_subject"),
    )

    @property
    def state(self) -> ProgressStage:
        if self.is_completed:
            return ProgressStage.COMPLETED
        if self.completed_minutes:
            return ProgressStage.IN_PROGRESS
        return ProgressStage.NOT_STARTED
