from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.field_attendance.field_attendance.database.bootstrap import apply_schema, missing_tables


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    statements = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    missing = missing_tables(db_config)
    if missing:
        print(f"FAIL: schema.sql applied to {target} but these tables are missing: {', '.join(missing)}")
        return 1

    print(f"OK: Applied schema.sql -> {target} ({statements} statements)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
