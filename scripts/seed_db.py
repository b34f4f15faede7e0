from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.field_attendance.field_attendance.database.bootstrap import apply_seed_sql, missing_tables


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    # Seed rows land in the reference tables, so the schema has to be there first.
    missing = missing_tables(db_config)
    if missing:
        print(f"FAIL: run scripts/init_db.py first, missing tables: {', '.join(missing)}")
        return 1

    statements = apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    print(
        "OK: Seeded districts, work types, office names, leave types and holidays -> "
        f"{db_config.get('database')} ({statements} statements)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
