"""Create (or rebuild) the user tables on the configured database."""
from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers User on Base.metadata

logger = logging.getLogger(__name__)


def create_all(drop_first: bool = False) -> list[str]:
    """Create missing tables and return their names. ``drop_first`` wipes existing data."""
    engine = get_engine()
    if drop_first:
        logger.warning("Dropping user tables on %s", engine.url.render_as_string(hide_password=True))
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return sorted(Base.metadata.tables)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the userapi database schema.")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first (destroys all users)")
    args = parser.parse_args(argv)

    url = get_engine().url.render_as_string(hide_password=True)
    try:
        tables = create_all(drop_first=args.drop)
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables on {url}: {exc}") from exc
    print(f"Tables ready on {url}: {', '.join(tables)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
