"""
UFC Picks scoring management CLI

Comandos de mantenimiento: recálculo de stats, re-scoring de eventos,
validación de consistencia e índices.
"""

import asyncio
import logging
import sys

import click

from ufc_scoring.core.config import get_settings
from ufc_scoring.core.logging_config import setup_logging
from ufc_scoring.database import Database, create_indexes
from ufc_scoring.services.points_service import PointsService, PointsServiceError
from ufc_scoring.services.stats_service import (
    RecalculationSummary,
    StatsServiceError,
    UserStatsService,
)

logger = logging.getLogger(__name__)


def _run(coro_factory):
    """Conecta a la base, corre la corrutina y desconecta siempre"""

    async def runner():
        await Database.connect()
        try:
            return await coro_factory(Database.get_db())
        finally:
            await Database.disconnect()

    return asyncio.run(runner())


def _stats_service(db) -> UserStatsService:
    settings = get_settings()
    return UserStatsService(db, batch_size=settings.stats_batch_size)


def _points_service(db) -> PointsService:
    settings = get_settings()
    return PointsService(
        db,
        time_tolerance_seconds=settings.time_tolerance_seconds,
        batch_size=settings.stats_batch_size
    )


def _echo_summary(summary: RecalculationSummary):
    click.echo(f"Users: {summary.total_users}")
    click.echo(f"  - Successful: {summary.success_count}")
    click.echo(f"  - Failed: {summary.error_count}")
    for error in summary.errors:
        click.echo(f"  - User {error.user_id}: {error.error}")


@click.group()
def cli():
    """UFC Picks scoring management CLI"""
    setup_logging(get_settings())


@cli.command("recalculate-all")
def recalculate_all():
    """Recalculate stats for every active user"""
    summary = _run(lambda db: _stats_service(db).recalculate_all_user_stats())
    _echo_summary(summary)
    if summary.error_count:
        sys.exit(1)


@cli.command("recalculate-user")
@click.argument("user_id")
def recalculate_user(user_id):
    """Recalculate stats for one user"""
    try:
        stats = _run(lambda db: _stats_service(db).recalculate_user_stats(user_id))
    except StatsServiceError as e:
        raise click.ClickException(str(e))

    for field, value in stats.numbers().items():
        click.echo(f"{field}: {value}")


@cli.command("recalculate-event")
@click.argument("event_id", type=int)
def recalculate_event(event_id):
    """Recalculate stats for every user with a pick in an event"""
    summary = _run(lambda db: _stats_service(db).recalculate_event_user_stats(event_id))
    _echo_summary(summary)
    if summary.error_count:
        sys.exit(1)


@cli.command("rescore-event")
@click.argument("event_id", type=int)
def rescore_event(event_id):
    """Re-score all submitted picks of an event with its stored results"""
    try:
        summary = _run(lambda db: _points_service(db).score_event(event_id))
    except PointsServiceError as e:
        raise click.ClickException(str(e))

    click.echo(f"Picks processed: {summary.picks_processed}")
    click.echo(f"Points distributed: {summary.points_distributed}")
    click.echo(f"Details without result: {summary.details_skipped}")
    click.echo(f"Max points per pick: {summary.max_points}")
    _echo_summary(summary.users)


@cli.command()
def validate():
    """Check stored stats against the pick data"""
    inconsistencies = _run(lambda db: _stats_service(db).validate_user_stats())

    if not inconsistencies:
        click.echo("All user stats are consistent")
        return

    for item in inconsistencies:
        click.echo(f"{item.user_id}: {item.field} stored={item.stored} actual={item.actual}")
    sys.exit(1)


@cli.command("create-indexes")
def create_indexes_command():
    """Create the MongoDB indexes"""
    _run(create_indexes)
    click.echo("Indexes created")


if __name__ == "__main__":
    cli()
