"""Create or update the superadmin account.

Reads SUPERADMIN_EMAIL, SUPERADMIN_PASSWORD and optionally SUPERADMIN_NAME
from the environment (or a .env file).
"""

from __future__ import annotations

import importlib
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.time_tracker.time_tracker.common.validators import is_strong_password
from src.time_tracker.time_tracker.core.constants import MIN_SUPERADMIN_PASSWORD_LENGTH
from src.time_tracker.time_tracker.core.exceptions import ConflictError
from src.time_tracker.time_tracker.database.bootstrap import ensure_superadmin


def main() -> int:
    load_dotenv(override=False)
    email = (os.getenv("SUPERADMIN_EMAIL") or "").strip().lower()
    password = os.getenv("SUPERADMIN_PASSWORD") or ""
    name = (os.getenv("SUPERADMIN_NAME") or "Super Admin").strip()

    if not email or not password:
        print("ERROR: SUPERADMIN_EMAIL and SUPERADMIN_PASSWORD must be set", file=sys.stderr)
        return 1
    if not is_strong_password(password, min_len=MIN_SUPERADMIN_PASSWORD_LENGTH):
        print(
            f"ERROR: password needs {MIN_SUPERADMIN_PASSWORD_LENGTH}+ chars with upper, lower, digit and symbol",
            file=sys.stderr,
        )
        return 1

    settings = importlib.import_module(get_settings_module())
    try:
        user_id = ensure_superadmin(dict(settings.DB_CONFIG), name=name, email=email, password=password)
    except ConflictError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    print(f"OK: superadmin {email} (user_id={user_id})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
