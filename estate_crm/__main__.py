"""Operational CLI for Estate CRM.

Usage:
    python -m estate_crm init-db                  Create tables and default automation rules
    python -m estate_crm create-user USERNAME ... Provision an account
    python -m estate_crm sync-scores              Recompute all prospect scores
"""

import argparse
import asyncio
import getpass
import logging
import sys

from pydantic import ValidationError as PydanticValidationError

from estate_crm.config import settings
from estate_crm.core.exceptions import CRMException
from estate_crm.core.logging_config import setup_logging
from estate_crm.core.permissions import Role

logger = logging.getLogger(__name__)


async def _init_db() -> int:
    from estate_crm.database import init_db, async_session_maker
    from estate_crm.services.automation_service import RuleService

    await init_db()
    print("Database tables created")

    async with async_session_maker() as session:
        created = await RuleService(session).ensure_default_rules()
    if created:
        print(f"Created {created} default automation rules")
    return 0


async def _create_user(args: argparse.Namespace) -> int:
    from estate_crm.database import async_session_maker
    from estate_crm.schemas.user import UserCreate
    from estate_crm.services.auth_service import AuthService

    password = args.password or getpass.getpass("Password: ")
    user_data = UserCreate(
        username=args.username,
        password=password,
        name=args.name,
        email=args.email,
        role=Role(args.role),
    )
    async with async_session_maker() as session:
        user = await AuthService(session).create_user(user_data)
    print(f"Created {user.role} {user.username} ({user.id})")
    return 0


async def _sync_scores() -> int:
    from estate_crm.database import async_session_maker
    from estate_crm.services.score_sync_service import run_score_sync

    async with async_session_maker() as session:
        report = await run_score_sync(session)

    print(f"Scanned: {report.scanned}")
    print(f"Updated: {report.updated}")
    if report.failed:
        print(f"Failed:  {len(report.failed)}")
        for failure in report.failed:
            print(f"  - {failure.prospect_id}: {failure.error}")
        return 1
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="estate_crm", description="Estate CRM operations")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create tables and default automation rules")

    create_user = subparsers.add_parser("create-user", help="Provision an account")
    create_user.add_argument("username")
    create_user.add_argument("--name", required=True)
    create_user.add_argument("--email", required=True)
    create_user.add_argument("--role", choices=[r.value for r in Role], default=Role.AGENT.value)
    create_user.add_argument("--password", help="Prompted for when omitted")

    subparsers.add_parser("sync-scores", help="Recompute and persist all prospect scores")

    args = parser.parse_args(argv)
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    if args.command == "init-db":
        command = _init_db()
    elif args.command == "create-user":
        command = _create_user(args)
    else:
        command = _sync_scores()

    try:
        return asyncio.run(command)
    except CRMException as e:
        logger.error(e.message)
        return 1
    except PydanticValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            logger.error(f"Invalid {field}: {error['msg']}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
