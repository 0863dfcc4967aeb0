"""Auth endpoints (register, login, admin user management) and the caller dependencies."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models import User
from app.schemas.auth import (
    AddUserRequest,
    AuthRequest,
    ChangePasswordRequest,
    LoginResponse,
    MessageResponse,
    UserListItem,
    UsersListResponse,
)
from app.services import auth as auth_service
from app.services.errors import (
    AuthError,
    Disabled,
    Forbidden,
    InvalidCredentials,
    NotFound,
    UsernameTaken,
    ValidationError,
)
from app.services.user_store import UserStore

router = APIRouter()

# Policy failure -> HTTP status. Checked in order, so subclasses must precede bases.
_STATUS_BY_ERROR: tuple[tuple[type[AuthError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UsernameTaken, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_400_BAD_REQUEST),
    (InvalidCredentials, status.HTTP_401_UNAUTHORIZED),
    (Disabled, status.HTTP_403_FORBIDDEN),
    (Forbidden, status.HTTP_403_FORBIDDEN),
)


def _http_error(e: AuthError) -> HTTPException:
    """Translate a policy failure into the HTTPException the client sees."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            headers = (
                {"WWW-Authenticate": "Bearer"}
                if status_code == status.HTTP_401_UNAUTHORIZED
                else None
            )
            return HTTPException(status_code=status_code, detail=e.message, headers=headers)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


def _login_response(user: User) -> LoginResponse:
    return LoginResponse(
        id=user.id,
        username=user.username,
        token=user.token,
        roles=sorted(role.value for role in user.role_set),
    )


def get_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    """Dependency: credential store bound to the request's session."""
    return UserStore(db)


def get_current_user(
    store: Annotated[UserStore, Depends(get_store)],
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """
    Dependency: resolve the caller from the Authorization header.

    Accepts "Bearer <token>" or the bare token. Raises 401 if missing or not the
    user's current token, 403 if the user is suspended.
    """
    token = authorization.strip() if authorization else None
    if token and token.lower().startswith("bearer "):
        token = token[7:].strip()
    try:
        return auth_service.resolve_caller(store, token)
    except AuthError as e:
        raise _http_error(e) from e


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: require an authenticated caller holding ROLE_ADMIN. Raises 403 otherwise."""
    if not current_user.is_admin():
        raise _http_error(Forbidden())
    return current_user


@router.post("/register", response_model=LoginResponse)
def register(
    body: AuthRequest,
    store: Annotated[UserStore, Depends(get_store)],
) -> LoginResponse:
    """Create a tenant-less account and return its identity, token and roles."""
    try:
        user = auth_service.register(store, body.username, body.password)
    except AuthError as e:
        raise _http_error(e) from e
    return _login_response(user)


@router.post("/login", response_model=LoginResponse)
def login(
    body: AuthRequest,
    store: Annotated[UserStore, Depends(get_store)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a new bearer token.
    Any token issued earlier for the same user stops working.
    """
    try:
        user = auth_service.login(store, body.username, body.password)
    except AuthError as e:
        raise _http_error(e) from e
    return _login_response(user)


@router.post("/add_user", response_model=MessageResponse)
def add_user(
    body: AddUserRequest,
    caller: Annotated[User, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_store)],
) -> MessageResponse:
    """Admin only: create a ROLE_USER account inside a shop."""
    try:
        auth_service.add_user(store, caller, body.username, body.password, body.shop_id)
    except AuthError as e:
        raise _http_error(e) from e
    return MessageResponse(message="User added successfully")


@router.put("/suspend_user/{user_id}", response_model=MessageResponse)
def suspend_user(
    user_id: int,
    caller: Annotated[User, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_store)],
) -> MessageResponse:
    """Admin only: disable a user account."""
    try:
        auth_service.suspend_user(store, caller, user_id)
    except AuthError as e:
        raise _http_error(e) from e
    return MessageResponse(message="User suspended successfully")


@router.post("/change_password/admin", response_model=MessageResponse)
def change_admin_password(
    body: ChangePasswordRequest,
    caller: Annotated[User, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_store)],
) -> MessageResponse:
    """An admin changes their own password."""
    try:
        auth_service.change_password(
            store,
            caller,
            body.target_id,
            body.old_password,
            body.new_password,
            as_admin=True,
        )
    except AuthError as e:
        raise _http_error(e) from e
    return MessageResponse(message="Admin password changed successfully")


@router.post("/change_password/user", response_model=MessageResponse)
def change_user_password(
    body: ChangePasswordRequest,
    caller: Annotated[User, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_store)],
) -> MessageResponse:
    """
    A user changes their own password, or an admin changes a regular user's
    password (old password is the admin's own).
    """
    try:
        auth_service.change_password(
            store,
            caller,
            body.target_id,
            body.old_password,
            body.new_password,
            as_admin=False,
        )
    except AuthError as e:
        raise _http_error(e) from e
    return MessageResponse(message="User password changed successfully")


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[User, Depends(require_admin)],
    store: Annotated[UserStore, Depends(get_store)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(
        users=[
            UserListItem(
                id=u.id,
                username=u.username,
                enabled=u.enabled,
                shop_id=u.shop_id,
                roles=sorted(u.roles or []),
            )
            for u in store.list_users()
        ]
    )
