"""Shared fixtures: settings in a temp dir and a fake Paperless server."""

import os
import tempfile
from typing import Any, Callable, Dict, List, Optional

import fitz
import httpx
import pytest

# Keep staging directories created at import time out of the working tree.
os.environ.setdefault("BASE_DIR", tempfile.mkdtemp(prefix="paperless-bridge-"))

from paperless_bridge.core.config import Settings  # noqa: E402
from paperless_bridge.fetchers.paperless_client import PaperlessClient  # noqa: E402

PAPERLESS_URL = "http://paperless.test"
SOURCE_URL = "http://files.test/invoice.pdf"
TOKEN = "secret-token"


def make_pdf(text: str) -> bytes:
    """Build a one-page PDF with a text layer."""
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    content = doc.tobytes()
    doc.close()
    return content


def task_record(status: str, result: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    record = {
        "id": 57,
        "task_id": "task-uuid",
        "task_file_name": "abc.pdf",
        "date_created": "2024-06-28T10:00:00Z",
        "date_done": None,
        "type": "file",
        "status": status,
        "result": result,
        "acknowledged": False,
        "related_document": None,
    }
    record.update(extra)
    return record


class FakePaperless:
    """Routes requests the way Paperless and a file host would answer them."""

    def __init__(self):
        self.source = httpx.Response(200, content=make_pdf("Source invoice"))
        self.upload = httpx.Response(200, json="task-uuid")
        self.tasks: List[Any] = [[task_record("SUCCESS", related_document="12")]]
        self.documents: Dict[int, httpx.Response] = {}
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.url.host == "files.test":
            return self._respond(self.source, request)
        if path == "/api/documents/post_document/":
            return self._respond(self.upload, request)
        if path == "/api/tasks/":
            # Keep answering with the last snapshot once the list is exhausted.
            answer = self.tasks.pop(0) if len(self.tasks) > 1 else self.tasks[0]
            if isinstance(answer, httpx.Response):
                return self._respond(answer, request)
            return httpx.Response(200, json=answer)
        if path.startswith("/api/documents/") and path.endswith("/download/"):
            document_id = int(path.split("/")[3])
            answer = self.documents.get(document_id, httpx.Response(404))
            return self._respond(answer, request)
        return httpx.Response(404)

    @staticmethod
    def _respond(answer, request: httpx.Request) -> httpx.Response:
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(request)
        return answer

    def requests_to(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def uploaded_body(self) -> bytes:
        return self.requests_to("/api/documents/post_document/")[0].content


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        paperless_url=PAPERLESS_URL + "/",
        base_dir=tmp_path,
        poll_interval=0,
        poll_timeout=0,
        poll_max_attempts=20,
        log_format="console",
    )


@pytest.fixture
def fake_paperless() -> FakePaperless:
    return FakePaperless()


@pytest.fixture
def client_factory(settings, fake_paperless) -> Callable[..., PaperlessClient]:
    def _build(custom_settings: Optional[Settings] = None) -> PaperlessClient:
        return PaperlessClient(
            custom_settings or settings,
            transport=httpx.MockTransport(fake_paperless.handler),
        )

    return _build
