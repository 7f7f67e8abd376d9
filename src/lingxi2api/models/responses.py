"""
API response models for Lingxi2API.

This module contains the OpenAI compatible response shapes produced by
the chat completions endpoint.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class Usage(BaseModel):
    """
    Token usage information.

    Lingxi never reports token counts, so every field is usually None.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    prompt_tokens: Optional[int] = Field(None, description="Number of tokens in the prompt", ge=0)
    completion_tokens: Optional[int] = Field(
        None, description="Number of tokens in the completion", ge=0
    )
    total_tokens: Optional[int] = Field(None, description="Total number of tokens used", ge=0)


class ChatCompletionMessage(BaseModel):
    """
    Chat completion message in response.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    role: Literal["assistant"] = Field("assistant", description="Role of the message sender")
    content: str = Field("", description="Message content")
    reasoning_content: Optional[str] = Field(
        None, description="Reasoning text produced before the answer"
    )

    @model_serializer(mode="wrap")
    def _drop_missing_reasoning(self, handler) -> Dict[str, Any]:
        data = handler(self)
        if data.get("reasoning_content") is None:
            data.pop("reasoning_content", None)
        return data


class ChatCompletionChoice(BaseModel):
    """
    Individual choice in chat completion response.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    index: int = Field(..., description="Index of this choice", ge=0)
    message: ChatCompletionMessage = Field(..., description="The completion message")
    finish_reason: Optional[Literal["stop", "length", "content_filter"]] = Field(
        None, description="Reason why the completion finished"
    )


class ChatCompletionResponse(BaseModel):
    """
    Response model for chat completions API.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str = Field(..., description="Unique identifier for the completion", min_length=1)
    object: Literal["chat.completion"] = Field("chat.completion", description="Object type")
    created: int = Field(..., description="Unix timestamp of creation", gt=0)
    model: str = Field(..., description="Model used for completion", min_length=1)
    choices: List[ChatCompletionChoice] = Field(
        ..., description="List of completion choices", min_length=1
    )
    usage: Usage = Field(default_factory=Usage, description="Token usage information")


class ChoiceDelta(BaseModel):
    """
    Incremental fragment carried by a streaming chunk.

    Exactly one of ``content`` and ``reasoning_content`` is set per chunk.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    content: Optional[str] = None
    reasoning_content: Optional[str] = None

    @model_serializer(mode="wrap")
    def _drop_unset(self, handler) -> Dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}


class ChatCompletionChunkChoice(BaseModel):
    """
    Individual choice in a streaming chunk.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    index: int = Field(0, ge=0)
    delta: ChoiceDelta = Field(..., description="Incremental content")
    finish_reason: Optional[str] = Field(None, description="Always None before [DONE]")


class ChatCompletionChunk(BaseModel):
    """
    Streaming chunk for chat completions.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str = Field(..., description="Unique identifier for the completion", min_length=1)
    object: Literal["chat.completion.chunk"] = Field(
        "chat.completion.chunk", description="Object type"
    )
    created: int = Field(..., description="Unix timestamp of creation", gt=0)
    model: str = Field(..., description="Model used for completion", min_length=1)
    choices: List[ChatCompletionChunkChoice] = Field(
        ..., description="List of completion choice deltas"
    )


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    model_config = ConfigDict(extra="forbid")

    error: Dict[str, Any] = Field(..., description="Error details")
