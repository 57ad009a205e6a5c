import argparse
import asyncio
import getpass
import sys
from typing import Optional, Sequence

from rich import print as rprint

from .config import settings
from .core.exceptions import QuillException
from .core.logging import configure_logging


async def init_database() -> int:
    from .database import engine, init_db

    await init_db()
    await engine.dispose()
    rprint(f"[bold green]Database ready at {settings.DATABASE_URL}")
    return 0


async def create_admin(email: str, password: str, role: str = "super-admin") -> int:
    """Create an admin account directly in the database."""
    from .database import RefreshToken, User, async_session_maker, engine, init_db
    from .repositories import RefreshTokenRepository, UserRepository
    from .services import AuthService

    await init_db()
    try:
        async with async_session_maker() as session:
            service = AuthService(
                UserRepository(User, session),
                RefreshTokenRepository(RefreshToken, session),
            )
            user = await service.register(email=email, password=password, role=role)
    except QuillException as e:
        rprint(f"[bold red]Error: {e.message}")
        return 1
    finally:
        await engine.dispose()

    rprint(f"[bold green]Created {user.role} {user.email}")
    return 0


def serve(host: str, port: int, reload: bool = False) -> int:
    import uvicorn

    uvicorn.run(
        "quill.server:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Command-line interface (CLI) entry point for Quill.
    """
    parser = argparse.ArgumentParser(description="Quill CMS")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", type=str, default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Init-db command
    subparsers.add_parser("init-db", help="Create database tables")

    # Create-admin command
    admin_parser = subparsers.add_parser("create-admin", help="Create a super-admin account")
    admin_parser.add_argument("--email", type=str, help="Account email (prompted if omitted)")
    admin_parser.add_argument("--password", type=str, help="Account password (prompted if omitted)")
    admin_parser.add_argument(
        "--role",
        type=str,
        choices=["admin", "super-admin"],
        default="super-admin",
        help="Account role (default: super-admin)",
    )

    args = parser.parse_args(argv)
    configure_logging(settings.LOG_LEVEL)

    if args.command == "serve":
        return serve(args.host, args.port, args.reload)
    if args.command == "init-db":
        return asyncio.run(init_database())
    if args.command == "create-admin":
        email = args.email or input("Email: ").strip()
        password = args.password or getpass.getpass("Password: ")
        return asyncio.run(create_admin(email, password, args.role))

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
