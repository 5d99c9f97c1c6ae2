"""
Typesense server status endpoints
"""

import time

from fastapi import APIRouter, Depends

from search_api_typesense.api.models.status import HealthResponse, StatusResponse
from search_api_typesense.services.backend import TypesenseBackend, get_typesense_backend

router = APIRouter(prefix="/typesense", tags=["typesense"])


@router.get("/health", response_model=HealthResponse)
def get_health(backend: TypesenseBackend = Depends(get_typesense_backend)):
    """Whether the Typesense server reports an operational state"""
    return HealthResponse(available=backend.is_available(), timestamp=int(time.time() * 1000))


@router.get("/status", response_model=StatusResponse)
def get_status(backend: TypesenseBackend = Depends(get_typesense_backend)):
    """
    Get the server status report.

    Collections, health, version and metrics. Typesense failures show up
    as missing lines in the report, never as an error response.
    """
    return StatusResponse(
        available=backend.is_available(),
        info=backend.view_settings(),
        timestamp=int(time.time() * 1000),
    )
