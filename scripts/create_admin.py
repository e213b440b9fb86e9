#!/usr/bin/env python3
"""
Create an administrator account directly in the database.

Self-registration never grants admin rights, so the first admin has to be
created here.

Usage:
  python scripts/create_admin.py --login root --name Admin [--password S3cret]
"""
from __future__ import annotations

import argparse
import getpass
import sys

from userapi.db.create_tables import create_all
from userapi.db.session import get_session
from userapi.domain.users import is_valid_login, is_valid_name
from userapi.repositories.user_repository import LoginTakenError, UserRepository


def main() -> None:
    ap = argparse.ArgumentParser(description="Create an administrator account")
    ap.add_argument("--login", required=True, help="Login (latin letters and digits)")
    ap.add_argument("--name", required=True, help="Display name")
    ap.add_argument("--password", help="Password (prompted when omitted)")
    ap.add_argument("--create-tables", action="store_true", help="Create the schema first")
    args = ap.parse_args()

    login = (args.login or "").strip()
    if not is_valid_login(login):
        raise SystemExit("Invalid login (use 1-50 chars [A-Za-z0-9])")
    name = (args.name or "").strip()
    if not is_valid_name(name):
        raise SystemExit("Invalid name (letters only)")
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 6:
        raise SystemExit("Password must have at least 6 characters")

    if args.create_tables:
        create_all()
    with get_session() as session:
        repo = UserRepository(session)
        try:
            user = repo.create(login, password, name, is_admin=True, created_by=None)
        except LoginTakenError:
            raise SystemExit(f"Login '{login}' already exists")
    print("OK: admin created")
    print(f"  Login: {user.login}")
    print(f"  Id: {user.id}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
