"""Async HTTP client for the Paperless document API and raw source URLs."""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
import httpx
from pydantic import ValidationError

from ..core.config import Settings, get_settings
from ..core.errors import ProtocolError, StorageError, TransportError
from ..core.logging import get_logger
from ..models.ingestion import IngestionTask

logger = get_logger(__name__)


class PaperlessClient:
    """Authenticated calls against Paperless plus plain source downloads.

    The client does not retry. Connection errors and non-2xx responses raise
    ``TransportError``; responses whose payload cannot be used raise
    ``ProtocolError``. A staged upload file that cannot be read raises
    ``StorageError``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.paperless_url
        self.client = httpx.AsyncClient(
            timeout=self.settings.request_timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    @staticmethod
    def _auth_headers(token: str) -> Dict[str, str]:
        return {"Authorization": f"Token {token}"}

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any
    ) -> httpx.Response:
        """Send one request, turning failures into ``TransportError``."""
        start_time = time.time()

        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                "Request failed",
                method=method,
                url=url,
                error=str(e),
                elapsed=time.time() - start_time
            )
            raise TransportError(f"{method} {url} failed: {e}") from e

        if not response.is_success:
            logger.error(
                "Unexpected response status",
                method=method,
                url=url,
                status_code=response.status_code,
                reason=response.reason_phrase
            )
            raise TransportError(
                f"{method} {url} returned {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        logger.debug(
            "Request succeeded",
            method=method,
            url=url,
            status_code=response.status_code,
            elapsed=time.time() - start_time
        )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(
                f"Response from {response.request.url} is not valid JSON: {e}"
            ) from e

    async def fetch_source(self, url: str) -> bytes:
        """Download the original PDF from an arbitrary, unauthenticated URL."""
        logger.info("Fetching source", url=url)
        response = await self._request("GET", url)

        content = response.content
        if not content:
            raise ProtocolError(f"Source {url} returned an empty body")

        logger.info(
            "Fetched source",
            url=url,
            content_type=response.headers.get("content-type", ""),
            file_size=len(content)
        )
        return content

    async def upload_document(
        self,
        file_path: Path,
        token: str,
        file_name: Optional[str] = None
    ) -> str:
        """Post a document for consumption and return the task id.

        ``file_name`` overrides the name Paperless sees, which defaults to
        the name of ``file_path``.
        """
        url = f"{self.base_url}/api/documents/post_document/"
        file_name = file_name or file_path.name

        try:
            async with aiofiles.open(file_path, 'rb') as f:
                content = await f.read()
        except OSError as e:
            logger.error("Failed to read upload", file_path=str(file_path), error=str(e))
            raise StorageError(f"Cannot read {file_path} for upload: {e}") from e

        files = {"document": (file_name, content, "application/octet-stream")}
        response = await self._request(
            "POST", url, headers=self._auth_headers(token), files=files
        )

        task_id = self._parse_task_id(self._json(response))
        if not task_id:
            raise ProtocolError("Upload response did not contain a task id")

        logger.info("Document uploaded", file_name=file_name, task_id=task_id)
        return task_id

    @staticmethod
    def _parse_task_id(payload: Any) -> Optional[str]:
        # Paperless answers with a bare JSON string; some proxies wrap it.
        if isinstance(payload, str):
            return payload.strip() or None
        if isinstance(payload, dict):
            value = payload.get("task_id")
            if isinstance(value, str):
                return value.strip() or None
        return None

    async def get_task(self, task_id: str, token: str) -> IngestionTask:
        """Fetch the current state of a consumption task."""
        url = f"{self.base_url}/api/tasks/"
        response = await self._request(
            "GET",
            url,
            headers=self._auth_headers(token),
            params={"task_id": task_id},
        )

        records = self._task_records(self._json(response))
        if not records:
            raise ProtocolError(f"No task record returned for task {task_id}")

        # Several matches are possible; the first one is authoritative.
        try:
            return IngestionTask.model_validate(records[0])
        except ValidationError as e:
            raise ProtocolError(f"Malformed task record for task {task_id}: {e}") from e

    @staticmethod
    def _task_records(payload: Any) -> List[Any]:
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict) and isinstance(payload.get("results"), list):
            return payload["results"]
        raise ProtocolError("Task listing is neither a list nor a paginated result")

    async def download_document(
        self,
        document_id: int,
        token: str,
        original: bool = False
    ) -> bytes:
        """Download a document; the archival copy unless ``original`` is set."""
        url = f"{self.base_url}/api/documents/{document_id}/download/"
        params = {"original": "true"} if original else None

        response = await self._request(
            "GET", url, headers=self._auth_headers(token), params=params
        )

        content = response.content
        if not content:
            raise ProtocolError(f"Empty download for document {document_id}")

        logger.info(
            "Document downloaded",
            document_id=document_id,
            original=original,
            file_size=len(content)
        )
        return content
