"""
Login credentials.

This list is the only thing `/api/auth/login` checks. It is NOT the user
records in users.json: a credential id and a user record id may refer to
different people, and nothing keeps the two in step.

Set AUTH_CREDENTIALS_FILE to a JSON list of objects with the same keys to
replace the built-in entries. Add entries to such a file with

    python -m auth.credentials add --email ops@example.com --role manager
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import sys
from pathlib import Path

from .security import AuthSecurityError, hash_password

logger = logging.getLogger(__name__)

ROLES = {"admin", "manager"}

BUILTIN_CREDENTIALS: list[dict] = [
    {
        "id": 1,
        "name": "Admin User",
        "email": "admin@app.com",
        "password": "$2a$10$Nzpx8tbpEcq5NjYb6T1r3uT7mrj9GFVKvjiUOKdnSJuYOkDySecpe",
        "role": "admin",
    },
    {
        "id": 2,
        "name": "Manager User",
        "email": "manager@app.com",
        "password": "$2a$10$Nzpx8tbpEcq5NjYb6T1r3uT7mrj9GFVKvjiUOKdnSJuYOkDySecpe",
        "role": "manager",
    },
]


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _valid_entry(entry: object) -> bool:
    if not isinstance(entry, dict):
        return False
    return (
        isinstance(entry.get("id"), int)
        and bool(normalize_email(str(entry.get("email") or "")))
        and bool(str(entry.get("password") or ""))
        and entry.get("role") in ROLES
    )


def load_credentials() -> list[dict]:
    raw_path = os.environ.get("AUTH_CREDENTIALS_FILE", "").strip()
    if not raw_path:
        return BUILTIN_CREDENTIALS

    path = Path(raw_path)
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        # Falling back silently would hand out the built-in accounts.
        raise RuntimeError(f"Could not load AUTH_CREDENTIALS_FILE {path}.") from exc

    if not isinstance(entries, list):
        raise RuntimeError("AUTH_CREDENTIALS_FILE must contain a JSON list.")

    valid = [e for e in entries if _valid_entry(e)]
    if len(valid) != len(entries):
        logger.warning("credentials_skipped count=%s path=%s", len(entries) - len(valid), path)
    return valid


def find_by_email(email: str) -> dict | None:
    wanted = normalize_email(email)
    for entry in load_credentials():
        if normalize_email(str(entry.get("email") or "")) == wanted:
            return entry
    return None


def add_credential(
    path: Path,
    *,
    email: str,
    password: str,
    role: str,
    name: str | None = None,
) -> dict:
    """
    Append a login to the credentials file at `path`, creating the file if
    needed. The password is stored as a bcrypt hash.
    """
    email = normalize_email(email)
    if not email:
        raise ValueError("email is required.")
    if role not in ROLES:
        raise ValueError(f"role must be one of {sorted(ROLES)}.")

    entries: list = []
    if path.exists():
        entries = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(entries, list):
            raise ValueError(f"{path} must contain a JSON list.")
    if any(normalize_email(str(e.get("email") or "")) == email for e in entries if isinstance(e, dict)):
        raise ValueError(f"{email} already has a credential.")

    ids = [e["id"] for e in entries if isinstance(e, dict) and _valid_entry(e)]
    entry = {
        "id": max(ids, default=0) + 1,
        "name": name or email.split("@")[0],
        "email": email,
        "password": hash_password(password),
        "role": role,
    }
    entries.append(entry)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
    logger.info("credential_added id=%s role=%s path=%s", entry["id"], role, path)
    return entry


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="storefront-credentials", description="Manage login credentials.")
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="add a login to the credentials file")
    add.add_argument(
        "--file",
        default=os.environ.get("AUTH_CREDENTIALS_FILE", "").strip() or None,
        help="credentials JSON file (default: $AUTH_CREDENTIALS_FILE)",
    )
    add.add_argument("--email", required=True)
    add.add_argument("--role", required=True, choices=sorted(ROLES))
    add.add_argument("--name")
    add.add_argument("--password", help="prompted for when omitted")

    args = parser.parse_args(argv)
    if not args.file:
        parser.error("--file is required when AUTH_CREDENTIALS_FILE is not set.")

    password = args.password or getpass.getpass("Password: ")
    try:
        entry = add_credential(Path(args.file), email=args.email, password=password, role=args.role, name=args.name)
    except (ValueError, AuthSecurityError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"Added {entry['email']} ({entry['role']}) as id {entry['id']} to {args.file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
