"""On-demand plant condition check endpoint."""

from starlette.requests import Request
from starlette.responses import JSONResponse

from plantwatch.lib.exceptions import PlantwatchError
from plantwatch.logging import get_logger
from plantwatch.monitor.scanner import TenantScanner

logger = get_logger("server.api.conditions")

_TENANT_HEADER = "clientId"


async def check_conditions(request: Request) -> JSONResponse:
    """Return the plants of the calling tenant that are not in ideal conditions.

    The list is empty when every plant is fine.
    """
    tenant_id = request.headers.get(_TENANT_HEADER, "").strip()
    if not tenant_id:
        return JSONResponse(
            {"error": f"Missing {_TENANT_HEADER} header"}, status_code=400
        )

    scanner: TenantScanner = request.app.state.scanner
    try:
        alerts = await scanner.check_tenant(tenant_id)
    except (PlantwatchError, OSError) as e:
        logger.error("Condition check failed for tenant %s: %s", tenant_id, e)
        return JSONResponse(
            {"error": "Plant data unavailable"}, status_code=503
        )

    return JSONResponse([alert.to_dict() for alert in alerts])
