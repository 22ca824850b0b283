"""User-related Pydantic schemas."""

from pydantic import Field

from .common import CamelModel, InsertModel


class UserCreate(InsertModel):
    """Registration payload."""

    username: str = Field(..., description="Unique login name")
    password: str = Field(..., description="Plaintext password; hashed before storage")
    location: str | None = Field(None, description="Optional free-text location")
    latitude: str | None = Field(None, description="Optional latitude")
    longitude: str | None = Field(None, description="Optional longitude")


class LoginRequest(InsertModel):
    """Credentials submitted to log in."""

    username: str
    password: str


class UserResponse(CamelModel):
    """Public view of a user; the password hash is never included."""

    id: int
    username: str
    location: str | None = None
    latitude: str | None = None
    longitude: str | None = None


class AuthSessionResponse(CamelModel):
    """Returned after register/login."""

    access_token: str = Field(..., description="Signed session token")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")
    user: UserResponse
