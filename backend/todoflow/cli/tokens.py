"""Flask CLI commands for refresh token housekeeping."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import click
from flask.cli import AppGroup

from todoflow.core.security import get_components

LOGGER = logging.getLogger(__name__)


@click.group("tokens", cls=AppGroup)
@click.option("--verbose", is_flag=True, help="Enable verbose logging.")
def tokens_cli(verbose: bool) -> None:
    """Refresh token maintenance commands."""
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)


@tokens_cli.command("purge-expired")
@click.option(
    "--before",
    type=click.DateTime(formats=["%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"]),
    default=None,
    help="Purge rows expiring at or before this UTC instant (default: now).",
)
def purge_expired(before: datetime | None) -> None:
    """Delete expired refresh tokens from the configured store."""
    cutoff = before.replace(tzinfo=UTC) if before is not None else datetime.now(UTC)
    removed = get_components().store.purge_expired(cutoff)
    LOGGER.info("tokens.purged count=%s cutoff=%s", removed, cutoff.isoformat())
    click.echo(f"Purged {removed} expired refresh token(s) up to {cutoff.isoformat()}.")
