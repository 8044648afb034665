"""
Health Check Utilities.

Every component check is a coroutine returning optional details; the
``health_check_with_timeout`` decorator turns it into a HealthCheckResult
with latency, a timeout, and failures captured instead of raised.

Usage:
    @health_check_with_timeout(timeout=2.0, component="data_dir")
    async def check_data_dir_health():
        return await asyncio.to_thread(probe_directory, settings.data_dir)

    report = await aggregate_health_checks([check_data_dir_health()])
"""

from __future__ import annotations

import asyncio
import functools
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable

from shared.config.logging import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class HealthCheckResult:
    """Outcome of one component check."""

    status: HealthStatus
    component: str
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    def to_dict(self) -> dict[str, Any]:
        """JSON shape: optional keys are left out when empty."""
        result: dict[str, Any] = {"status": self.status.value, "component": self.component}
        if self.latency_ms is not None:
            result["latency_ms"] = round(self.latency_ms, 2)
        if self.error:
            result["error"] = self.error
        if self.details:
            result["details"] = self.details
        return result


def _component_name(func: Callable[..., Any]) -> str:
    name = func.__name__
    name = name.removeprefix("check_")
    return name.removesuffix("_health")


def health_check_with_timeout(timeout: float = 5.0, component: str | None = None):
    """
    Decorate a check coroutine with timeout protection.

    Args:
        timeout: Seconds before the check counts as failed.
        component: Name in the report. Defaults to the function name
            without its ``check_`` prefix and ``_health`` suffix.
    """

    def decorator(
        func: Callable[..., Awaitable[dict[str, Any] | None]],
    ) -> Callable[..., Awaitable[HealthCheckResult]]:
        name = component or _component_name(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> HealthCheckResult:
            started = time.perf_counter()
            try:
                details = await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
            except asyncio.TimeoutError:
                error = f"timeout after {timeout}s"
            except Exception as e:
                error = str(e) or type(e).__name__
            else:
                return HealthCheckResult(
                    status=HealthStatus.HEALTHY,
                    component=name,
                    latency_ms=(time.perf_counter() - started) * 1000,
                    details=details if isinstance(details, dict) else {},
                )

            latency_ms = (time.perf_counter() - started) * 1000
            logger.warning("Health check failed", component=name, error=error, latency_ms=latency_ms)
            return HealthCheckResult(
                status=HealthStatus.UNHEALTHY,
                component=name,
                latency_ms=latency_ms,
                error=error,
            )

        return wrapper

    return decorator


def probe_directory(path: Path, pattern: str = "*") -> dict[str, Any]:
    """
    Details of a storage directory: its path and how many files match.

    Raises:
        OSError: Missing, or not readable and writable.
    """
    if not path.is_dir():
        raise OSError(f"{path} is not a directory")
    if not os.access(path, os.R_OK | os.W_OK):
        raise OSError(f"{path} is not readable and writable")
    return {"path": str(path), "files": sum(1 for _ in path.glob(pattern))}


async def aggregate_health_checks(
    checks: list[Awaitable[HealthCheckResult]],
) -> dict[str, Any]:
    """
    Run the checks concurrently.

    Returns:
        {"status": "healthy" | "degraded", "components": {name: result}}
    """
    results = await asyncio.gather(*checks)
    components = {result.component: result.to_dict() for result in results}
    status = HealthStatus.HEALTHY if all(r.healthy for r in results) else HealthStatus.DEGRADED
    return {"status": status.value, "components": components}
