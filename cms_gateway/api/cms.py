"""
The content gateway endpoint
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..db import get_db
from ..gateway import handle
from ..schemas.request import GatewayRequest
from .response_builders import build_preflight_response, build_response

router = APIRouter(tags=["CMS"])


@router.options("/cms", include_in_schema=False)
async def preflight():
    """CORS preflight, answered without looking at credentials"""
    return build_preflight_response()


@router.api_route("/cms", methods=["GET", "POST", "PUT", "DELETE"], summary="Content gateway")
async def cms_gateway(request: Request, db: Session = Depends(get_db)):
    """Authenticate, authorize and dispatch one ``{resource, action, ...}`` operation"""
    req = GatewayRequest.from_body(await request.body())
    outcome = await run_in_threadpool(
        handle,
        db,
        request.headers.get("X-API-Key"),
        request.headers.get("X-Tenant-ID"),
        req,
    )
    return build_response(outcome)
