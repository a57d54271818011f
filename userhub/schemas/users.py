"""Read projections of user records and request bodies for the user-management routes.

Projections never include the password hash. Wire names follow the public
API (isBanned, createdAt, updatedAt).
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from userhub.models.user import ADDRESS_MAX_LEN, EMAIL_MAX_LEN, NAME_MAX_LEN, Role


class UserDetails(BaseModel):
    """A user's own record: no password hash, no id."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    email: str
    role: Role
    is_banned: bool = Field(
        validation_alias=AliasChoices("is_banned", "isBanned"),
        serialization_alias="isBanned",
    )
    address: str | None = None
    created_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )


class UserListItem(UserDetails):
    """User entry for the admin/moderator list (no password hash)."""

    id: str


class UsersListResponse(BaseModel):
    users: list[UserListItem]


class ChangeRoleRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)
    role: Role


class ChangeRoleResponse(BaseModel):
    role: bool


class ChangeStatusRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)
    is_banned: bool = Field(..., alias="isBanned")


class DeleteUserRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)


class EditUserRequest(BaseModel):
    """Profile edit. Only the fields present in the body are changed."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)
    name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    address: str | None = Field(default=None, max_length=ADDRESS_MAX_LEN)
