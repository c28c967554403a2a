from sqlalchemy import Column, Integer, Text, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mini_lms.core.database import Base

class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    message = Column(Text, nullable=True)
    rating = Column(Integer, nullable=False) # 1-5
    submitted_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    learner = relationship("User")
    course = relationship("Course")

    def __repr__(self):
        return f"<Feedback(id={self.id}, learner_id={self.learner_id}, course_id={self.course_id}, rating={self.rating})>"
