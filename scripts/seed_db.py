from __future__ import annotations

import argparse
import importlib
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hris_payroll.hris_payroll.database.bootstrap import apply_seed_sql, ensure_demo_admin


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed subscription plans, a default schedule and the demo Admin.")
    parser.add_argument("--admin-username", default=os.getenv("SEED_ADMIN_USERNAME", "admin"))
    parser.add_argument("--admin-email", default=os.getenv("SEED_ADMIN_EMAIL", "admin@hris.local"))
    parser.add_argument("--admin-password", default=os.getenv("SEED_ADMIN_PASSWORD", "admin123"))
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_admin(
        db_config,
        username=args.admin_username,
        email=args.admin_email,
        password=args.admin_password,
    )

    print(
        f"OK: seeded {db_config.get('database')} "
        f"(admin={args.admin_username}, host={db_config.get('host')}:{db_config.get('port', 3306)})"
    )


if __name__ == "__main__":
    main()
