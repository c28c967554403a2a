from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mini_lms.core.database import Base

class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    enrolled_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    status = Column(String(50), nullable=False, default="Active")

    # (learner_id, course_id) is intentionally not unique
    learner = relationship("User", back_populates="enrollments")
    course = relationship("Course")

    def __repr__(self):
        return f"<Enrollment(id={self.id}, learner_id={self.learner_id}, course_id={self.course_id}, status='{self.status}')>"
