"""
Create a shop (tenant) so admins can add users to it. Run from project root:
  python -m app.scripts.create_shop NAME
"""
import argparse
import logging
import sys

from sqlalchemy.exc import IntegrityError

from app.core.database import SessionLocal
from app.models import Shop

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a shop.")
    parser.add_argument("name", help="Shop name (1-255 chars, unique)")
    args = parser.parse_args(argv)

    name = args.name.strip()
    if not name or len(name) > 255:
        print("Invalid shop name length.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        shop = Shop(name=name)
        db.add(shop)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            print(f"Shop '{name}' already exists.", file=sys.stderr)
            return 1
        logger.info("Created shop id=%s name=%s", shop.id, shop.name)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
