import logging
import os
import sys

# Add root to pythonpath
sys.path.append(os.getcwd())

from src.adapters.clock import SystemClock  # noqa: E402
from src.adapters.sqlite.document_store import SQLiteDocumentStore  # noqa: E402
from src.adapters.sqlite.migrator import SQLiteMigrator  # noqa: E402
from src.api.deps import Settings  # noqa: E402
from src.app_shell.seed import seed  # noqa: E402


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = Settings()
    print(f"Seeding to {settings.db_path}")
    SQLiteMigrator(settings.db_path).run_migrations()
    created = seed(SQLiteDocumentStore(settings.db_path), SystemClock())
    print(f"Seeded {created} posts.")


if __name__ == "__main__":
    main()
