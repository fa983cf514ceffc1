"""Health check endpoint."""

import datetime
from typing import Dict, Any

from fastapi import APIRouter

from .. import __version__

router = APIRouter(prefix="/paperless", tags=["health"])


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint."""
    # TODO: report Paperless reachability once /api/ status checks are wired in
    return {
        "status": "ok",
        "service": "paperless-bridge",
        "timestamp": datetime.datetime.now().isoformat(),
        "version": __version__
    }
