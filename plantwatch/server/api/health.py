"""Liveness of the data store and the alert transport."""

import asyncio
from datetime import UTC, datetime

import redis.asyncio as redis
from starlette.requests import Request
from starlette.responses import JSONResponse

from plantwatch.lib.config import get_settings
from plantwatch.lib.db import SQLitePlantRepository
from plantwatch.lib.exceptions import PlantwatchError
from plantwatch.logging import get_logger

logger = get_logger("server.api.health")

type _CheckResult = tuple[bool, str]


async def _check_database() -> _CheckResult:
    """Read the tenant list, which needs the plant tables to be present."""
    try:
        tenants = await SQLitePlantRepository().list_tenants()
    except (PlantwatchError, OSError) as e:
        logger.error("Database health check failed: %s", e)
        return False, str(e)
    return True, f"{len(tenants)} tenant(s)"


async def _check_redis() -> _CheckResult:
    """Ping the Redis server alerts are published to."""
    client = redis.from_url(get_settings().eventbus.redis_url)
    try:
        await client.ping()
    except (redis.RedisError, OSError) as e:
        logger.error("Redis health check failed: %s", e)
        return False, str(e)
    finally:
        await client.aclose()
    return True, "ok"


async def health_check(request: Request) -> JSONResponse:
    """Report healthy (200) only when every dependency answers."""
    checks = dict(
        zip(
            ("database", "redis"),
            await asyncio.gather(_check_database(), _check_redis()),
            strict=True,
        )
    )
    healthy = all(ok for ok, _ in checks.values())

    return JSONResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "checks": {
                name: {"ok": ok, "status": status}
                for name, (ok, status) in checks.items()
            },
        },
        status_code=200 if healthy else 503,
    )
