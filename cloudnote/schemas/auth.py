"""
CloudNote Backend — Account Request/Response Schemas
======================================================

What:  Pydantic models for signup, login and the user profile.
How:   JSON uses camelCase (firstName, birthDate); Python uses snake_case.
       The alias generator bridges the two, and populate_by_name lets tests
       and services construct models with either spelling.

The plaintext password only ever appears in request models. No response
model has a password or hash field.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from cloudnote.models.user import Gender


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SignupRequest(CamelModel):
    """
    Body of POST /api/auth/signup.

    Password strength is not checked here: the policy is configurable, so
    AccountService applies it with the settings it was built with.
    """
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    gender: Gender
    birth_date: date
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class LoginRequest(CamelModel):
    """Body of POST /api/auth/login."""
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(CamelModel):
    """
    Canonical login response.

    Only the bearer credential is returned; the profile is available from
    GET /api/auth/userdetails.
    """
    token: str = Field(description="Signed bearer token (JWT)")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(description="Seconds until the token expires")


class UserProfile(CamelModel):
    """Public profile returned by GET /api/auth/userdetails."""
    email: EmailStr
    first_name: str
    last_name: str
    gender: Gender
    birth_date: date
