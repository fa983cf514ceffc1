"""Upload, poll, resolve duplicates, download the archive copy, extract text."""

from typing import Optional

from structlog.stdlib import BoundLogger

from ..core.config import Settings, get_settings
from ..core.errors import PaperlessBridgeError
from ..core.logging import get_logger
from ..core.storage import ScratchStorage
from ..fetchers.paperless_client import PaperlessClient
from ..models.ingestion import (
    FailureKind,
    IngestionRequest,
    IngestionResult,
    IngestionTask,
)
from ..parsers.pdf_parser import PDFTextExtractor, is_pdf
from ..services.duplicate_resolver import DuplicateResolver
from ..services.task_poller import TaskPoller

logger = get_logger(__name__)


class IngestionWorkflow:
    """Takes one source URL through Paperless and returns its archived text.

    ``run`` never raises: every failure ends up in the returned
    ``IngestionResult`` with ``is_new_entry`` false, the best-known document
    id and a ``FailureKind``.
    """

    def __init__(
        self,
        client: PaperlessClient,
        poller: TaskPoller,
        resolver: DuplicateResolver,
        extractor: PDFTextExtractor,
        storage: ScratchStorage,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client
        self.poller = poller
        self.resolver = resolver
        self.extractor = extractor
        self.storage = storage

    @classmethod
    def from_settings(
        cls,
        client: PaperlessClient,
        settings: Optional[Settings] = None
    ) -> "IngestionWorkflow":
        settings = settings or get_settings()
        return cls(
            client=client,
            poller=TaskPoller.from_settings(client, settings),
            resolver=DuplicateResolver.from_settings(settings),
            extractor=PDFTextExtractor(),
            storage=ScratchStorage(settings),
            settings=settings,
        )

    async def process(
        self,
        source_url: str,
        external_id: str,
        auth_token: str
    ) -> IngestionResult:
        return await self.run(
            IngestionRequest(
                source_url=source_url,
                external_id=external_id,
                auth_token=auth_token,
            )
        )

    async def run(self, request: IngestionRequest) -> IngestionResult:
        if not request.source_url:
            return IngestionResult.empty()

        log = logger.bind(
            external_id=request.external_id,
            source_url=request.source_url,
        )
        try:
            return await self._run(request, log)
        except Exception as e:
            log.exception("Unexpected error during ingestion", error=str(e))
            return IngestionResult.failed(FailureKind.UNEXPECTED_ERROR, detail=str(e))

    async def _run(self, request: IngestionRequest, log: BoundLogger) -> IngestionResult:
        token = request.auth_token

        # Upload
        try:
            if not self.settings.ignore_existing_file and self.storage.has_original(request.external_id):
                log.info("Original already staged, nothing to do")
                return IngestionResult.empty()

            task_id = await self._upload(request, log)
        except PaperlessBridgeError as e:
            log.error("Upload failed", error=e.message)
            return IngestionResult.failed(e.kind, detail=e.message)

        # Poll
        try:
            task = await self.poller.poll(task_id, token)
        except PaperlessBridgeError as e:
            log.error("Polling failed", task_id=task_id, error=e.message)
            return IngestionResult.failed(e.kind, detail=e.message)

        document_id = task.document_id

        if task.is_failure:
            resolved = self._resolve_failure(task, log)
            if isinstance(resolved, IngestionResult):
                return resolved
            document_id = resolved
        elif document_id is None:
            log.error("Task finished without a document id", task_id=task_id, status=task.status)
            return IngestionResult.failed(
                FailureKind.PROTOCOL_VIOLATION,
                detail=f"Task {task_id} finished with status {task.status} but no document",
            )

        log.info("Document processed", document_id=document_id, status=task.status)

        # Download the archival copy
        try:
            content = await self.client.download_document(
                document_id, token, original=self.settings.download_original
            )
            if not is_pdf(content):
                log.warning("Downloaded document is not a PDF", document_id=document_id)
            archive_path = await self.storage.save_archive(content, document_id)
        except PaperlessBridgeError as e:
            log.error("Archive download failed", document_id=document_id, error=e.message)
            return IngestionResult.failed(e.kind, document_id=document_id, detail=e.message)

        # Extract
        try:
            text = await self.extractor.extract(archive_path)
        except PaperlessBridgeError as e:
            log.error("Text extraction failed", document_id=document_id, error=e.message)
            return IngestionResult.failed(e.kind, document_id=document_id, detail=e.message)

        log.info("Ingestion completed", document_id=document_id, text_length=len(text))
        return IngestionResult.created(document_id, text)

    async def _upload(self, request: IngestionRequest, log: BoundLogger) -> str:
        external_id = request.external_id
        content = await self.client.fetch_source(request.source_url)
        if not is_pdf(content):
            log.warning("Source does not look like a PDF", file_size=len(content))

        staged_path = await self.storage.save_original(content, external_id)
        task_id = await self.client.upload_document(
            staged_path,
            request.auth_token,
            file_name=self.storage.original_path(external_id).name,
        )
        # Only an accepted upload marks the id as done.
        self.storage.promote_original(external_id)
        log.info("Consumption started", task_id=task_id)
        return task_id

    def _resolve_failure(self, task: IngestionTask, log: BoundLogger):
        """Return the document id to continue with, or the final result."""
        message = task.result
        log.warning("Paperless reported a failure", task_id=task.task_id, result=message)

        if not self.resolver.is_duplicate_message(message):
            return IngestionResult.failed(
                FailureKind.PROCESSING_FAILURE,
                document_id=task.document_id,
                detail=message,
            )

        existing_id = self.resolver.extract_existing_id(message)
        if existing_id is None:
            log.error("Could not extract duplicate id", result=message)
            return IngestionResult.failed(
                FailureKind.DUPLICATE_UNRESOLVABLE,
                document_id=task.document_id,
                detail=message,
            )

        if not self.settings.reprocess_existing_documents:
            log.info("Ignoring existing document", document_id=existing_id)
            return IngestionResult.failed(
                FailureKind.DUPLICATE_SKIPPED,
                document_id=existing_id,
                detail=message,
            )

        log.info("Reprocessing existing document", document_id=existing_id)
        return existing_id
