"""Request/response schemas for signup, login and the resolved caller identity."""

from pydantic import BaseModel, Field

from userhub.models.user import ADDRESS_MAX_LEN, EMAIL_MAX_LEN, NAME_MAX_LEN, Role

PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128


class SignupRequest(BaseModel):
    """New account. Role and ban status are not accepted here; signup always creates a plain user."""

    model_config = {"extra": "ignore"}

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN, description="Display name")
    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LEN, description="Email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )
    address: str | None = Field(default=None, max_length=ADDRESS_MAX_LEN)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN, description="Email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )


class LoginResponse(BaseModel):
    """Returned after successful login; the token is also set as a cookie."""

    role: Role
    token: str = Field(..., description="JWT access token")
    email: str


class SuccessResponse(BaseModel):
    success: bool


class TokenClaims(BaseModel):
    """Identity claims carried inside a verified token."""

    model_config = {"frozen": True}

    email: str
    role: Role


class AuthenticatedIdentity(BaseModel):
    """Caller identity resolved by the authentication gate and passed to handlers."""

    model_config = {"frozen": True}

    email: str
    role: Role
