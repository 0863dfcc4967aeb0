"""Credential store: SQLAlchemy repository for users and shop lookups.

Policy code never queries the session directly; it goes through UserStore.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Shop, User
from app.services.errors import UsernameTaken

logger = logging.getLogger(__name__)


class UserStore:
    """Repository over one request-scoped Session.

    Usage:
        store = UserStore(db)
        user = store.find_by_username("admin")
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def exists_by_username(self, username: str) -> bool:
        return (
            self.session.query(User.id).filter(User.username == username).first()
            is not None
        )

    def shop_exists(self, shop_id: int) -> bool:
        return self.session.get(Shop, shop_id) is not None

    def list_users(self) -> list[User]:
        return self.session.query(User).order_by(User.id).all()

    def save(self, user: User) -> User:
        """
        Insert or update a user and commit.

        The exists-then-insert check in the policy layer is not atomic; a unique
        constraint violation here means a concurrent writer took the username.
        Any other integrity failure (e.g. a dangling shop_id) is re-raised as is.
        """
        username, user_id = user.username, user.id
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            reason = str(e.orig)[:200]
            existing = self.find_by_username(username)
            if existing is not None and existing.id != user_id:
                logger.warning(
                    "User save rejected: username taken",
                    extra={"username": username, "reason": reason},
                )
                raise UsernameTaken() from e
            logger.warning(
                "User save rejected by integrity constraint",
                extra={"username": username, "reason": reason},
            )
            raise
        self.session.refresh(user)
        return user
