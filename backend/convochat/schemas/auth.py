"""
Pydantic schemas for authentication requests and responses.
"""
from pydantic import BaseModel, EmailStr, Field


class UserLogin(BaseModel):
    """Request schema for user login"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserCreate(BaseModel):
    """Request schema for user registration"""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)


class RegisterResponse(BaseModel):
    status: str = "success"
    message: str = "User registered successfully"
    userId: int
    username: str


class LoginResponse(BaseModel):
    status: str = "success"
    message: str = "Login successful"
    userId: int
    username: str
    email: str
    access_token: str
    token_type: str = "bearer"
