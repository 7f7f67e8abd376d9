"""
Lingxi upstream models.

Connection parameters resolved per request, the request payload posted to
the Lingxi completions endpoint, and the semantic parts decoded from its
event stream.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ConnectionConfig(BaseModel):
    """Connection parameters for one upstream call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str
    session_id: str = ""
    cookie: str = ""
    user_agent: str
    client_type: str
    sse_path: str = ""
    referer: str = ""
    refresh_url: str = ""
    logging_enabled: bool = False
    shared_cookie: bool = Field(
        True, description="Cookie was taken from the process-wide store"
    )

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.sse_path}"


class LingxiPayload(BaseModel):
    """Body of POST /api/aigc/v3/assistant/sessions/{id}/completions."""

    model_config = ConfigDict(extra="forbid")

    question: str = ""
    file_ids: List[str] = Field(default_factory=list)
    upload_ids: List[str] = Field(default_factory=list)
    collect_ids: List[str] = Field(default_factory=list)
    quote_files: List[str] = Field(default_factory=list)
    quote_images: List[str] = Field(default_factory=list)
    thinking: str = "enabled"
    command: str = ""


class PartKind(str, Enum):
    REASONING = "reasoning"
    REASONING_END = "reasoning_end"
    TEXT = "text"
    OTHER = "other"


@dataclass(frozen=True)
class SemanticPart:
    kind: PartKind
    text: str = ""


OTHER_PART = SemanticPart(PartKind.OTHER)
REASONING_END_PART = SemanticPart(PartKind.REASONING_END)
