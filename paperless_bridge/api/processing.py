"""Document processing endpoint."""

from typing import Any, AsyncIterator, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ..core.config import Settings, get_settings
from ..core.logging import get_logger
from ..fetchers.paperless_client import PaperlessClient
from ..models.ingestion import IngestionRequest
from ..workflows.ingestion_workflow import IngestionWorkflow

logger = get_logger(__name__)
router = APIRouter(prefix="/paperless", tags=["processing"])

REQUIRED_FIELDS = ("url", "id", "token")


async def get_workflow(
    settings: Settings = Depends(get_settings)
) -> AsyncIterator[IngestionWorkflow]:
    """One HTTP client per request, closed when the response is sent."""
    async with PaperlessClient(settings) as client:
        yield IngestionWorkflow.from_settings(client, settings)


@router.post("/process")
async def process_document(
    payload: Dict[str, Any] = Body(...),
    workflow: IngestionWorkflow = Depends(get_workflow),
):
    """Send a bookmarked PDF through Paperless and return its archived text.

    Internal failures still answer 200; only missing input is a 400.
    """
    for field in REQUIRED_FIELDS:
        if not payload.get(field):
            return JSONResponse({"error": f"Missing {field}"}, status_code=400)

    request = IngestionRequest(
        url=str(payload["url"]),
        id=str(payload["id"]),
        token=str(payload["token"]),
    )
    logger.info("Processing request", source_url=request.source_url, external_id=request.external_id)

    result = await workflow.run(request)

    logger.info(
        "Processing finished",
        external_id=request.external_id,
        new_entry=result.is_new_entry,
        document_id=result.document_id,
        failure=result.failure
    )
    return result.to_response()
