"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field


class LoginForm(BaseModel):
    """Credentials posted from the login page."""

    email: EmailStr
    password: str = Field(..., min_length=1)
