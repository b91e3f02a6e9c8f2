"""
cli.py — Click CLI entrypoint for the performance service.

Usage:
    sichr serve --port 8000
    sichr maintain
"""

from __future__ import annotations

import asyncio

import click
import structlog

from sichr_shared.config import settings

from sichr_api.utils.logging import configure_logging

log = structlog.get_logger(__name__)

STATUS_SYMBOLS = {"success": "✓", "warning": "⚠", "error": "✗"}


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
def main(log_level: str) -> None:
    """SichrPlace performance-optimization service."""
    configure_logging(log_level=log_level)


@main.command()
@click.option("--host", default=settings.api_host, show_default=True)
@click.option("--port", default=settings.api_port, type=int, show_default=True)
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    log.info("server_starting", host=host, port=port)
    uvicorn.run("sichr_api.app:app", host=host, port=port, reload=reload)


@main.command()
@click.option(
    "--retention-days",
    default=settings.analytics_retention_days,
    type=int,
    show_default=True,
    help="Analytics events older than this are deleted",
)
def maintain(retention_days: int) -> None:
    """Run the database maintenance steps once and report each outcome."""
    from sichr_shared.db import get_supabase_client

    from sichr_api.services.maintenance_service import DatabaseOptimizer

    async def _run():
        client = await get_supabase_client()
        return await DatabaseOptimizer(client, retention_days=retention_days).run_maintenance()

    results = asyncio.run(_run())
    click.echo("Database maintenance:")
    for result in results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        click.echo(f"  {symbol} {result.operation:20s} {result.status:8s} {result.result}")

    if any(r.status == "error" for r in results):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
