"""Ingestion models shared by the workflow, the client and the API."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FailureKind(str, Enum):
    """Why an ingestion did not produce a new entry."""
    TRANSPORT_FAILURE = "transport_failure"
    PROTOCOL_VIOLATION = "protocol_violation"
    POLL_TIMEOUT = "poll_timeout"
    PROCESSING_FAILURE = "processing_failure"
    DUPLICATE_UNRESOLVABLE = "duplicate_unresolvable"
    DUPLICATE_SKIPPED = "duplicate_skipped"
    EXTRACTION_FAILURE = "extraction_failure"
    LOCAL_IO_FAILURE = "local_io_failure"
    UNEXPECTED_ERROR = "unexpected_error"


class TaskStatus(str, Enum):
    """Task states reported by Paperless (celery states)."""
    PENDING = "PENDING"
    STARTED = "STARTED"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    RETRY = "RETRY"
    REVOKED = "REVOKED"


class IngestionRequest(BaseModel):
    """One request to push a bookmarked PDF through Paperless."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    source_url: str = Field(alias="url")
    external_id: str = Field(alias="id")
    auth_token: str = Field(alias="token", repr=False)


class IngestionTask(BaseModel):
    """Snapshot of a Paperless consumption task."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    task_id: str
    task_file_name: Optional[str] = None
    date_created: Optional[str] = None
    date_done: Optional[str] = None
    type: Optional[str] = None
    status: str = ""
    result: Optional[str] = None
    acknowledged: bool = False
    related_document: Optional[Any] = None

    @property
    def document_id(self) -> Optional[int]:
        """Document the task produced, falling back to the task record id."""
        if self.related_document is not None:
            try:
                return int(self.related_document)
            except (TypeError, ValueError):
                pass
        return self.id

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING.value

    @property
    def is_failure(self) -> bool:
        return self.status == TaskStatus.FAILURE.value

    @property
    def is_terminal(self) -> bool:
        """Any non-empty status other than PENDING ends polling."""
        return bool(self.status) and not self.is_pending


class IngestionResult(BaseModel):
    """Outcome of one workflow run.

    On the wire the legacy names ``new_entry``, ``uuid`` and ``content`` are
    used so existing callers keep working; ``failure`` and ``detail`` are
    additive.
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    is_new_entry: bool = Field(default=False, alias="new_entry")
    document_id: Optional[int] = Field(default=None, alias="uuid")
    extracted_text: str = Field(default="", alias="content")
    failure: Optional[FailureKind] = None
    detail: Optional[str] = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "IngestionResult":
        if self.is_new_entry:
            if self.document_id is None or not self.extracted_text:
                raise ValueError("a new entry needs a document id and extracted text")
            if self.failure is not None:
                raise ValueError("a new entry cannot carry a failure")
        elif self.extracted_text:
            raise ValueError("extracted text is only returned for new entries")
        return self

    @classmethod
    def empty(cls) -> "IngestionResult":
        """Nothing to do: no document and no text."""
        return cls()

    @classmethod
    def failed(
        cls,
        failure: FailureKind,
        document_id: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> "IngestionResult":
        return cls(document_id=document_id, failure=failure, detail=detail)

    @classmethod
    def created(cls, document_id: int, extracted_text: str) -> "IngestionResult":
        return cls(is_new_entry=True, document_id=document_id, extracted_text=extracted_text)

    @property
    def succeeded(self) -> bool:
        return self.is_new_entry

    def to_response(self) -> Dict[str, Any]:
        """Serialize with the wire names."""
        return self.model_dump(by_alias=True, mode="json")
