"""Fire deal_days_in_stage workflows for deals that reached a days-in-stage threshold today.

Usage:
    uv run python -m scripts.run_stage_age_triggers
Schedule once a day (e.g. cron at 06:00 UTC); a second run on the same day fires again.
Requires DATABASE_URL.
"""

import asyncio
import sys

import app.infrastructure.persistence.database as database
from app.application.use_cases.deals import run_stage_age_sweep
from app.core.config import get_settings
from app.infrastructure.external.email import create_mail_sender
from app.infrastructure.services import build_workflow_engine
from app.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Run the sweep in one transaction and print a summary."""
    settings = get_settings()
    setup_logging()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("DATABASE_URL not configured", file=sys.stderr)
        sys.exit(1)

    mail_sender = create_mail_sender(settings)
    try:
        async with database.session_scope() as session:
            engine = build_workflow_engine(session, settings, mail_sender=mail_sender)
            result = await run_stage_age_sweep(
                engine.workflow_repo, engine.deal_repo, engine
            )
    finally:
        await database.dispose_engine()

    print(
        f"Done. Teams scanned: {result.teams_scanned}, "
        f"deals triggered: {result.deals_triggered}, "
        f"workflow runs: {result.workflow_runs}"
    )


if __name__ == "__main__":
    asyncio.run(main())
