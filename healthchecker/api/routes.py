"""Scrape and liveness endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from healthchecker.observability.metrics import GaugeRegistry

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
def metrics(request: Request) -> Response:
    """Current value of every health gauge in the Prometheus text format.

    Gauges that no check cycle has written yet are omitted.
    """
    registry: GaugeRegistry = request.app.state.registry
    return Response(content=registry.render(), media_type=CONTENT_TYPE_LATEST)


@router.get("/healthz", response_class=PlainTextResponse)
def healthz() -> str:
    return "ok\n"
