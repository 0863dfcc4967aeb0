"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field

# Length rules are enforced by the policy engine (400 with a readable message),
# not here, so request models only describe shape.


class AuthRequest(BaseModel):
    """Credentials for register and login."""

    username: str = Field(..., description="Username (3-20 chars)")
    password: str = Field(..., description="Password (8-40 chars)")


class LoginResponse(BaseModel):
    """Identity, bearer token and roles returned by register and login."""

    id: int
    username: str
    token: str = Field(..., description="Bearer token; send in the Authorization header")
    roles: list[str]


class AddUserRequest(BaseModel):
    """Admin request to create a shop-scoped user."""

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., description="Username (3-20 chars)")
    password: str = Field(..., description="Password (8-40 chars)")
    shop_id: int = Field(..., alias="shopId", description="Shop the user belongs to")


class ChangePasswordRequest(BaseModel):
    """Body shared by the admin and user password-change endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    target_id: int = Field(..., alias="targetId")
    old_password: str = Field(..., alias="oldPassword")
    new_password: str = Field(..., alias="newPassword")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class UserListItem(BaseModel):
    """User entry for admin list (no password or token)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    enabled: bool
    shop_id: int | None = None
    roles: list[str]


class UsersListResponse(BaseModel):
    """Response for GET /auth/users (admin only)."""

    users: list[UserListItem]
