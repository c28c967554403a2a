from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mini_lms.core.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=True) # Null for seeded/system users
    username = Column(String(150), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    role = Column(String(50), nullable=False, default='Learner') # Trainer, Learner, Admin
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    # No ORM delete cascades: dependent rows are removed by the consistency service
    courses_owned = relationship("Course", back_populates="trainer")
    enrollments = relationship("Enrollment", back_populates="learner")
    notifications = relationship("Notification", back_populates="user")

    __table_args__ = (
        UniqueConstraint('email', name='uq_user_email'),
        UniqueConstraint('firebase_uid', name='uq_user_firebase_uid'),
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
