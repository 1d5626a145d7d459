"""
API request and response models for Self Diary REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
journal/models.py, which own the internal domain representation. Route
handlers map between the two.

Username and password shape rules are NOT expressed as Field constraints:
auth/validation.py owns them, and a violation must reach the client as a 400
with the rule's own message rather than a generic 422.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.database import MAX_ROW_ID
from journal.models import Entry

# Entry ids outside the SQLite INTEGER range never reach the store.
EntryId = Annotated[int, Field(ge=1, le=MAX_ROW_ID)]

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class Credentials(BaseModel):
    """Request body for POST /api/register and POST /api/login."""

    username: str = Field(max_length=255)
    password: str = Field(max_length=1024)


class EntryBody(BaseModel):
    """Request body for POST /api/entries/{user_id} and PUT /api/entries/{user_id}/{entry_id}.

    recordings_map is an opaque serialized structure (the frontend sends a
    JSON-encoded list). It is stored and returned as-is.
    """

    content: str
    recordings_map: str = "[]"


class DeleteMultipleBody(BaseModel):
    """Request body for POST /api/entries/{user_id}/delete_multiple."""

    entry_ids: list[EntryId]


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class SessionResponse(BaseModel):
    """Identity bound to the caller's session. Both fields are null together."""

    model_config = ConfigDict(frozen=True)

    user_id: Optional[int] = None
    username: Optional[str] = None


class EntryResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    content: str
    recordings_map: str
    created_at: str

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryResponse":
        """Build an EntryResponse from a journal Entry dataclass."""
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            content=entry.content,
            recordings_map=entry.recordings_map,
            created_at=entry.created_at,
        )


class ErrorDetail(BaseModel):
    """Structured error payload. code is stable; message is safe to display."""

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Envelope for every error response: {"error": {...}}."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
