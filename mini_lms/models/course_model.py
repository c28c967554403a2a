from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mini_lms.core.database import Base

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    type = Column(String(100), nullable=True)
    duration = Column(Integer, nullable=True) # In hours
    visibility = Column(String(20), nullable=False, default="Public")
    is_approved = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), default=func.now(), onupdate=func.now())

    # Relationships. Deletion of modules, feedback and notifications is done
    # explicitly by the consistency service, never through ORM cascades.
    trainer = relationship("User", back_populates="courses_owned")
    modules = relationship("Module", back_populates="course", order_by="Module.id")

    def __repr__(self):
        return f"<Course(id={self.id}, name='{self.name}', trainer_id={self.trainer_id})>"

class Module(Base):
    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    file_path = Column(String(1024), nullable=True) # Attachment URL from blob storage

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), default=func.now(), onupdate=func.now())

    course = relationship("Course", back_populates="modules")

    def __repr__(self):
        return f"<Module(id={self.id}, name='{self.name}', course_id={self.course_id})>"
