"""Pydantic schemas for the FastAPI endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """One message of the client-side conversation."""

    role: Literal["user", "assistant"]
    content: str

    def to_langchain(self) -> BaseMessage:
        if self.role == "user":
            return HumanMessage(content=self.content)
        return AIMessage(content=self.content)


def to_langchain_history(history: list[ChatMessage]) -> list[BaseMessage]:
    return [message.to_langchain() for message in history]


class AskOptions(BaseModel):
    streaming: bool = False


class AskRequest(BaseModel):
    """Incoming assistant query from the frontend."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1, max_length=1000, description="The user's question")
    mode: Literal["text", "voice"] = Field(..., description="Input mode of the client")
    history: list[ChatMessage] = Field(
        default_factory=list,
        description="Previous messages, oldest first",
    )
    user_name: str | None = Field(None, alias="userName", description="Visitor's name, if known")
    options: AskOptions = Field(default_factory=AskOptions)


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ResponseMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    model: str = Field(..., description="Upstream model name or a routing tag")
    show_meeting_popup: bool | None = Field(None, alias="showMeetingPopup")
    usage: Usage = Field(default_factory=Usage)


class AssistantResponse(BaseModel):
    """Response envelope returned for every query."""

    message: str = Field(..., description="The assistant's reply")
    metadata: ResponseMetadata


class SummaryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_history: list[ChatMessage] = Field(..., alias="chatHistory")


class SummaryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    suggested_title: str = Field(..., alias="suggestedTitle")
    suggested_mode: Literal["meeting", "email"] = Field(..., alias="suggestedMode")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    service: str = "resume-assistant"
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
