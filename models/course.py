from datetime import datetime
from extensions import db

class Course(db.Model):
    __tablename__ = "courses"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    subjects = db.relationship("CourseSubject", back_populates="course",
                               order_by="CourseSubject.id", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Course {self.name}>"


class CourseSubject(db.Model):
    __tablename__ = "course_subjects"

    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    duration_minutes = db.Column(db.Integer, nullable=False)  # nominal time to master the subject
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    course = db.relationship("Course", back_populates="subjects")
