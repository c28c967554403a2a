from sqlalchemy import Column, Integer, Boolean, Float, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mini_lms.core.database import Base

class ModuleProgress(Base):
    __tablename__ = "module_progress"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    module_id = Column(Integer, ForeignKey("modules.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True) # Denormalized for easier querying

    progress_percentage = Column(Float, nullable=True) # 0-100, null counts as 0
    is_completed = Column(Boolean, nullable=True)

    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    learner = relationship("User")
    module = relationship("Module")

    __table_args__ = (
        UniqueConstraint('learner_id', 'module_id', name='uq_learner_module_progress'),
    )

    def __repr__(self):
        return f"<ModuleProgress(id={self.id}, learner_id={self.learner_id}, module_id={self.module_id}, course_id={self.course_id}, progress={self.progress_percentage})>"
