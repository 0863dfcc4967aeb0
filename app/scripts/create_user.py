"""
Create a user without going through the API (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--admin] [--shop-id ID]
Example:
  python -m app.scripts.create_user owner your-secure-password --admin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from app.models import Role, User
from app.services.errors import UsernameTaken
from app.services.user_store import UserStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a shop auth user.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--admin", action="store_true", help="Grant ROLE_ADMIN as well as ROLE_USER")
    parser.add_argument("--shop-id", type=int, default=None, help="Shop the user belongs to")
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        store = UserStore(db)
        if store.exists_by_username(username):
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        if args.shop_id is not None and not store.shop_exists(args.shop_id):
            print(f"Shop {args.shop_id} does not exist.", file=sys.stderr)
            return 1
        user = User(
            username=username,
            password_hash=hash_password(args.password),
            enabled=True,
            shop_id=args.shop_id,
        )
        user.role_set = {Role.USER, Role.ADMIN} if args.admin else {Role.USER}
        try:
            user = store.save(user)
        except UsernameTaken:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        logger.info("Created user id=%s username=%s roles=%s", user.id, user.username, user.roles)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
