"""
Response builders for the gateway endpoint
Every response, errors included, carries the same CORS headers
"""

from typing import Dict

from fastapi import Response
from fastapi.responses import JSONResponse

from ..config import CORS_ORIGINS, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS, get_distinct_route_errors
from ..outcome import ErrorKind, Outcome

ROUTING_MISS_MESSAGE = "Invalid resource or action, or insufficient permissions"

STATUS_CODES = {
    ErrorKind.MISSING_CREDENTIALS: 401,
    ErrorKind.INVALID_KEY: 401,
    ErrorKind.EXPIRED_KEY: 401,
    ErrorKind.ROUTE_NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.FORM_NOT_FOUND: 404,
    ErrorKind.RECORD_NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


def get_cors_headers() -> Dict[str, str]:
    """Get CORS headers"""
    return {
        "Access-Control-Allow-Origin": "*" if "*" in CORS_ORIGINS else ", ".join(CORS_ORIGINS),
        "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
    }


def build_preflight_response() -> Response:
    """Empty 200 for OPTIONS, no authentication involved"""
    return Response(status_code=200, headers=get_cors_headers())


def build_error_response(kind: ErrorKind, message: str) -> JSONResponse:
    status_code = STATUS_CODES[kind]
    if kind in (ErrorKind.ROUTE_NOT_FOUND, ErrorKind.FORBIDDEN) and not get_distinct_route_errors():
        # unknown route and missing permission look the same to the caller
        status_code, message = 400, ROUTING_MISS_MESSAGE
    return JSONResponse(status_code=status_code, content={"error": message}, headers=get_cors_headers())


def build_response(outcome: Outcome) -> JSONResponse:
    """Map a pipeline outcome to the HTTP response"""
    if outcome.is_ok:
        return JSONResponse(status_code=200, content=outcome.body, headers=get_cors_headers())
    return build_error_response(outcome.error, outcome.message)
