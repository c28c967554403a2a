from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime

from mini_lms.models.enums import UserRole

class UserBase(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=1, max_length=150)
    role: UserRole = UserRole.LEARNER

# Schema for creating a user in our database AFTER Firebase authentication
class UserCreateInternal(UserBase):
    firebase_uid: Optional[str] = None

class UserDisplay(UserBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Schema representing the data decoded from a Firebase ID token
class TokenData(BaseModel):
    firebase_uid: str
    email: EmailStr


class Caller(BaseModel):
    """
    The resolved identity of whoever is making a request.
    Passed explicitly into every service operation; never read from ambient state.
    """
    model_config = ConfigDict(frozen=True)

    user_id: int
    role: UserRole
    email: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


# Request body for /auth/register: the client has already signed up with Firebase
class UserRegisterRequest(BaseModel):
    firebase_id_token: str
    username: str = Field(..., min_length=1, max_length=150)
    role: UserRole = Field(UserRole.LEARNER, description="Trainer or Learner. Admin accounts are provisioned out of band.")

class UserLoginRequest(BaseModel):
    firebase_id_token: str

class AuthResponse(BaseModel):
    message: str
    user: Optional[UserDisplay] = None
