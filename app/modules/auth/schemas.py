from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class SignInEmailRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=255)


class SignInUsernameRequest(BaseModel):
    username: str
    password: str = Field(min_length=1, max_length=255)


class SignUpEmailRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=255)
    username: str


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    refresh_token: Optional[str] = None
    user_id: str
    email: str
    username: Optional[str] = None
    expires_at: Optional[datetime] = None


class SendVerificationOTPRequest(BaseModel):
    email: EmailStr
    type: str = "email-verification"


class SendVerificationOTPResponse(BaseModel):
    success: bool = True
    message: str = "Verification code sent"


class VerifyEmailRequest(BaseModel):
    email: EmailStr
    otp: str = Field(min_length=1, max_length=64)
