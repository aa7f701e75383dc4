from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from lecture_attendance.config import get_settings_module
from lecture_attendance.database.bootstrap import apply_schema, list_tables
from lecture_attendance.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    load_dotenv(override=False)

    settings = importlib.import_module(get_settings_module())
    db = DBConfig.from_dict(dict(settings.DB_CONFIG))
    conn = DatabaseConnection.get_instance(db)

    apply_schema(conn)
    tables = list_tables(conn)
    logging.info("OK: Applied schema.sql -> %s@%s:%s/%s (tables=%s)", db.user, db.host, db.port, db.database, len(tables))


if __name__ == "__main__":
    main()
