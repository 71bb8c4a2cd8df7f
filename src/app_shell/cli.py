import argparse
import logging
import sys
from pathlib import Path

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.auth.identity import LocalAuthGateway
from src.adapters.clock import SystemClock
from src.adapters.sqlite.document_store import SQLiteDocumentStore
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import Settings
from src.app_shell.seed import seed
from src.components.auth import CreateUserInput, run_create_user
from src.rules.loader import load_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def handle_migrate(settings: Settings) -> None:
    applied = SQLiteMigrator(settings.db_path).run_migrations()
    if applied:
        for name in applied:
            print(f"Applied {name}")
    else:
        print("Database is up to date.")


def handle_seed(settings: Settings) -> None:
    handle_migrate(settings)
    created = seed(SQLiteDocumentStore(settings.db_path), SystemClock())
    print(f"Seeded {created} posts.")


def handle_create_admin(settings: Settings, args: argparse.Namespace) -> None:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    rules = load_rules(settings.rules_path)
    handle_migrate(settings)

    store = SQLiteDocumentStore(settings.db_path)
    clock = SystemClock()
    gateway = LocalAuthGateway(
        store,
        clock,
        tokens=JWTAuthAdapter(secret_key=settings.secret_key),
        min_password_length=rules.auth.min_password_length,
        token_ttl_minutes=rules.auth.token_ttl_minutes,
    )
    result = run_create_user(
        CreateUserInput(email=args.email, password=args.password, display_name=args.name),
        gateway,
        store,
        clock,
    )
    if not result.success or result.user is None:
        logger.error("Could not create admin: %s", result.error)
        sys.exit(1)
    print(f"Created admin {result.user.email} ({result.user.uid})")


def handle_serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("src.api.main:app", host=args.host, port=args.port, reload=args.reload)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Product review site CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")
    subparsers.add_parser("seed", help="Write default settings, pages and sample posts")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--name", default="", help="Display name")

    serve_parser = subparsers.add_parser("serve", help="Run the web server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)
    settings = Settings()
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)

    if args.command == "migrate":
        handle_migrate(settings)
    elif args.command == "seed":
        handle_seed(settings)
    elif args.command == "create-admin":
        handle_create_admin(settings, args)
    elif args.command == "serve":
        handle_serve(args)


if __name__ == "__main__":
    main()
