"""HTTP handler for the live rate refresh endpoint.

Mounted under /functions/v1. Every request refreshes prices; OPTIONS answers
the CORS preflight with an empty 200. The handler is the error boundary:
nothing it calls can make it raise, failures become a 500 JSON body.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from cryptocourse.logging import get_logger, refresh_context

log = get_logger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}

FUNCTION_PATH = "/get-live-rates"
SUB_PATH = FUNCTION_PATH + "/{subpath:path}"


@router.options(FUNCTION_PATH)
@router.options(SUB_PATH, include_in_schema=False)
async def preflight() -> Response:
    """CORS preflight: empty body, permissive headers."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route(FUNCTION_PATH, methods=["GET", "POST"])
@router.api_route(SUB_PATH, methods=["GET", "POST"], include_in_schema=False)
async def get_live_rates(request: Request) -> JSONResponse:
    """Refresh all tracked pairs and return the current rows."""
    with refresh_context("http", method=request.method):
        try:
            result = await request.app.state.refresher.refresh()
        except Exception as e:
            log.error("live_rates_refresh_error", error=str(e), exc_info=True)
            return JSONResponse(
                content={"success": False, "error": str(e)},
                status_code=500,
                headers=CORS_HEADERS,
            )

    return JSONResponse(content=result.to_dict(), headers=CORS_HEADERS)
