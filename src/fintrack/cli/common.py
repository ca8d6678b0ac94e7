#!/usr/bin/env python3
"""
Shared CLI helpers.
"""

import click

from ..core.config import Config, get_config
from ..ledger import LedgerSession, PersistenceFailure


def context_config(ctx: click.Context) -> Config:
    """Get the configuration stored by the main group, loading it if absent."""
    if ctx.obj and ctx.obj.get("config") is not None:
        return ctx.obj["config"]
    return get_config()


def open_session(ctx: click.Context) -> LedgerSession:
    """Open the configured user's ledger, turning load failures into CLI errors."""
    config = context_config(ctx)
    try:
        return LedgerSession.open(config)
    except (PersistenceFailure, ValueError) as e:
        click.echo(f"❌ Cannot open ledger in {config.storage.user_dir}: {e}", err=True)
        raise click.ClickException(str(e)) from e
