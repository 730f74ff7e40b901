"""Authentication-related request and response schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.utils.enums import RoleType


class RegisterRequest(BaseModel):
    """Payload for public user registration."""

    email: str
    password: str = Field(min_length=6)
    username: str | None = None


class LoginRequest(BaseModel):
    """Payload for user login by username or email."""

    login: str
    password: str


class TokenResponse(BaseModel):
    """JWT response payload."""

    access_token: str
    token_type: str = "bearer"


class AuthUserResponse(BaseModel):
    """User response for auth endpoints."""

    id: int
    username: str
    email: str | None
    role: RoleType
    organization_id: int | None = None
    place_id: int | None = None
    company_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class RoleAssignmentRequest(BaseModel):
    """Role plus the scope id the role requires."""

    role: str
    organization_id: int | None = None
    place_id: int | None = None
    company_id: int | None = None
