"""
Health and metrics endpoints - no authentication required
"""
import logging

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse

from ..config import API_VERSION, SERVICE_NAME
from ..metrics import get_content_type, get_metrics

router = APIRouter()


@router.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok", "service": SERVICE_NAME, "version": API_VERSION}


@router.get("/metrics/prometheus", summary="Prometheus metrics", tags=["Metrics"])
async def prometheus_metrics() -> Response:
    """Metrics in Prometheus exposition format"""
    try:
        return Response(content=get_metrics(), media_type=get_content_type())
    except Exception as e:
        logging.getLogger("cms").error("Failed to get metrics: %s", e)
        return PlainTextResponse(content="# Metrics temporarily unavailable\n")
