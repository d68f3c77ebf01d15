from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from clubhub.models import UserRole

class UserBase(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    otp: str
    role: UserRole = UserRole.USER

class User(UserBase):
    id: str
    role: UserRole
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OTPRequest(BaseModel):
    email: EmailStr

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class AuthResponse(BaseModel):
    access_token: str
    token_type: str
    user: User

class TokenData(BaseModel):
    user_id: Optional[str] = None
    role: Optional[str] = None
