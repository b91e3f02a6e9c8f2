"""On-demand database maintenance.

Each step runs independently: a failure is captured as a tagged
`OperationResult` and the remaining steps still run.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from sichr_shared.constants import (
    CLEANUP_ANALYTICS_RPC,
    OPTIMIZE_TABLES_RPC,
    REFRESH_ANALYTICS_RPC,
)
from sichr_shared.models.performance import MaintenanceStatus, OperationResult

from sichr_api.errors import error_message

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MaintenanceStep:
    operation: str
    run: Callable[[], Awaitable[str]]
    # status reported when `run` raises
    failure_status: MaintenanceStatus = "error"
    failure_prefix: str = ""


class DatabaseOptimizer:
    def __init__(self, supabase: Any, retention_days: int = 90) -> None:
        self._supabase = supabase
        self._retention_days = retention_days

    async def _cleanup_analytics(self) -> str:
        response = await self._supabase.rpc(
            CLEANUP_ANALYTICS_RPC, {"retention_days": self._retention_days}
        ).execute()
        return f"Cleaned {response.data} old records"

    async def _refresh_analytics(self) -> str:
        await self._supabase.rpc(REFRESH_ANALYTICS_RPC).execute()
        return "Analytics summaries updated"

    async def _optimize_tables(self) -> str:
        await self._supabase.rpc(OPTIMIZE_TABLES_RPC).execute()
        return "Tables optimized"

    def steps(self) -> list[MaintenanceStep]:
        return [
            MaintenanceStep("cleanup_analytics", self._cleanup_analytics),
            MaintenanceStep("refresh_analytics", self._refresh_analytics),
            # VACUUM/ANALYZE needs elevated grants that hosted projects may lack
            MaintenanceStep(
                "optimize_tables",
                self._optimize_tables,
                failure_status="warning",
                failure_prefix="Limited permissions - ",
            ),
        ]

    async def run_maintenance(
        self, steps: list[MaintenanceStep] | None = None
    ) -> list[OperationResult]:
        results: list[OperationResult] = []
        for step in steps if steps is not None else self.steps():
            try:
                message = await step.run()
            except Exception as exc:
                logger.warning(
                    "maintenance_step_failed",
                    operation=step.operation,
                    status=step.failure_status,
                    error=error_message(exc),
                )
                results.append(
                    OperationResult(
                        operation=step.operation,
                        result=f"{step.failure_prefix}{error_message(exc)}",
                        status=step.failure_status,
                    )
                )
                continue
            logger.info("maintenance_step_completed", operation=step.operation, result=message)
            results.append(OperationResult.ok(step.operation, message))
        return results
