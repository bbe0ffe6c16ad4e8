from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from employee_management.config import get_settings_module
from employee_management.database.bootstrap import ensure_demo_admin


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the demo administrator account.")
    parser.add_argument("--email", default="admin@company.com")
    parser.add_argument("--password", default="admin123")
    args = parser.parse_args()

    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_admin(db_config, email=args.email, password=args.password)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(admin={args.email})"
    )


if __name__ == "__main__":
    main()
