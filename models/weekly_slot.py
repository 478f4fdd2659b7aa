from datetime import datetime
from extensions import db

class WeeklyStudySlot(db.Model):
    __tablename__ = "weekly_study_slots"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    day_of_week = db.Column(db.Integer, nullable=False)  # 1=Mon .. 7=Sun
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    course = db.relationship("Course")

    __table_args__ = (
        db.Index("ix_weekly_slot_student_day", "student_id", "day_of_week"),
    )
