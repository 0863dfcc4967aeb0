"""Auth policy engine: registration, login, token resolution, and admin operations.

Every operation validates input first, then authorization, and only then
mutates through the UserStore. Failures are raised as AuthError subclasses
(see app.services.errors); nothing here knows about HTTP.
"""

import logging

import jwt

from app.core.config import get_settings
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models import Role, User
from app.services.errors import (
    Disabled,
    Forbidden,
    InvalidCredentials,
    NotFound,
    UsernameTaken,
    ValidationError,
)
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

USERNAME_LENGTH_MESSAGE = f"username size must be between {USERNAME_MIN_LEN} and {USERNAME_MAX_LEN}"
PASSWORD_LENGTH_MESSAGE = f"password size must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN}"
USERNAME_BLANK_MESSAGE = "username must not be blank"
PASSWORD_BLANK_MESSAGE = "password must not be blank"

LOGIN_NOT_FOUND_MESSAGE = "Not found"
USER_NOT_FOUND_MESSAGE = "Error: User not found."
SHOP_NOT_FOUND_MESSAGE = "Error: Shop not found."
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def _check_credentials_shape(username: str | None, password: str | None) -> None:
    """Raise ValidationError listing every length or blank violation (username first)."""
    errors: list[str] = []
    if username is None or not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        errors.append(USERNAME_LENGTH_MESSAGE)
    elif not username.strip():
        errors.append(USERNAME_BLANK_MESSAGE)
    if password is None or not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        errors.append(PASSWORD_LENGTH_MESSAGE)
    elif not password.strip():
        errors.append(PASSWORD_BLANK_MESSAGE)
    if errors:
        raise ValidationError(", ".join(errors))


def _issue_token(store: UserStore, user: User) -> User:
    """Mint a new token for a persisted user, replacing any previous one."""
    user.token = create_access_token(sub=user.id, roles=(r.value for r in user.role_set))
    return store.save(user)


def register(store: UserStore, username: str, password: str) -> User:
    """
    Self-service registration. Returns the persisted user with a fresh token.

    Registered users get ROLE_USER plus ROLE_ADMIN while REGISTER_GRANTS_ADMIN
    is enabled (bootstrap admins); they belong to no shop.
    """
    _check_credentials_shape(username, password)
    if store.exists_by_username(username):
        raise UsernameTaken()

    roles = {Role.USER}
    if get_settings().REGISTER_GRANTS_ADMIN:
        roles.add(Role.ADMIN)
    user = User(
        username=username,
        password_hash=hash_password(password),
        enabled=True,
    )
    user.role_set = roles
    user = store.save(user)
    user = _issue_token(store, user)
    logger.info(
        "User registered",
        extra={"user_id": user.id, "username": user.username, "admin": user.is_admin()},
    )
    return user


def login(store: UserStore, username: str, password: str) -> User:
    """Verify credentials and return the user with a newly issued token."""
    user = store.find_by_username(username)
    if user is None:
        raise NotFound(LOGIN_NOT_FOUND_MESSAGE)
    # Disabled is reported before any password check.
    if not user.enabled:
        logger.warning("Login refused for disabled user", extra={"user_id": user.id})
        raise Disabled()
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed: bad password", extra={"user_id": user.id})
        raise InvalidCredentials()
    user = _issue_token(store, user)
    logger.info("User logged in", extra={"user_id": user.id, "username": user.username})
    return user


def resolve_caller(store: UserStore, token: str | None) -> User:
    """
    Map a bearer token to its user.

    The token must decode, name an existing user, and equal that user's current
    token (a later login invalidates earlier tokens). Suspended users are refused
    here so their outstanding tokens stop working immediately.
    """
    if not token:
        raise InvalidCredentials(INVALID_TOKEN_MESSAGE)
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise InvalidCredentials(INVALID_TOKEN_MESSAGE)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise InvalidCredentials(INVALID_TOKEN_MESSAGE)
    user = store.find_by_id(user_id)
    if user is None or user.token != token:
        raise InvalidCredentials(INVALID_TOKEN_MESSAGE)
    if not user.enabled:
        raise Disabled()
    return user


def _require_admin(caller: User) -> None:
    if not caller.is_admin():
        logger.warning("Admin operation refused", extra={"user_id": caller.id})
        raise Forbidden()


def add_user(
    store: UserStore,
    caller: User,
    username: str,
    password: str,
    shop_id: int,
) -> User:
    """Admin creates a regular (ROLE_USER only) user in a shop. No token until first login."""
    _require_admin(caller)
    _check_credentials_shape(username, password)
    if store.exists_by_username(username):
        raise UsernameTaken()
    if not store.shop_exists(shop_id):
        raise NotFound(SHOP_NOT_FOUND_MESSAGE)

    user = User(
        username=username,
        password_hash=hash_password(password),
        enabled=True,
        shop_id=shop_id,
    )
    user.role_set = {Role.USER}
    user = store.save(user)
    logger.info(
        "User added",
        extra={"user_id": user.id, "username": user.username, "shop_id": shop_id, "by": caller.id},
    )
    return user


def suspend_user(store: UserStore, caller: User, target_user_id: int) -> User:
    """Admin disables a user. The stored token is kept; resolve_caller rejects it."""
    _require_admin(caller)
    target = store.find_by_id(target_user_id)
    if target is None:
        raise NotFound(USER_NOT_FOUND_MESSAGE)
    target.enabled = False
    target = store.save(target)
    logger.info("User suspended", extra={"user_id": target.id, "by": caller.id})
    return target


def _password_change_verifier(caller: User, target: User, as_admin: bool) -> User:
    """
    Apply the password-change authorization table and return the user whose
    current password must match old_password.

    Admin variant: an admin changing their own password only.
    User variant: a user changing their own password, or an admin changing a
    non-admin user's password (verified against the admin's password).
    """
    is_self = caller.id == target.id
    if as_admin:
        if caller.is_admin() and is_self:
            return caller
        raise Forbidden()
    if target.is_admin():
        raise Forbidden()
    if is_self:
        return caller
    if caller.is_admin():
        return caller
    raise Forbidden()


def change_password(
    store: UserStore,
    caller: User,
    target_user_id: int,
    old_password: str,
    new_password: str,
    as_admin: bool,
) -> User:
    """Replace the target's password hash after authorization and old-password checks."""
    if new_password is None or not (PASSWORD_MIN_LEN <= len(new_password) <= PASSWORD_MAX_LEN):
        raise ValidationError(PASSWORD_LENGTH_MESSAGE)
    if not new_password.strip():
        raise ValidationError(PASSWORD_BLANK_MESSAGE)
    target = store.find_by_id(target_user_id)
    if target is None:
        raise NotFound(USER_NOT_FOUND_MESSAGE)

    verifier = _password_change_verifier(caller, target, as_admin)
    if not verify_password(old_password or "", verifier.password_hash):
        logger.warning(
            "Password change refused: old password mismatch",
            extra={"user_id": target.id, "by": caller.id},
        )
        raise InvalidCredentials()

    target.password_hash = hash_password(new_password)
    target = store.save(target)
    logger.info(
        "Password changed",
        extra={"user_id": target.id, "by": caller.id, "variant": "admin" if as_admin else "user"},
    )
    return target
