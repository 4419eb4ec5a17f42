from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# --- Requests ---


class HistoryMessage(BaseModel):
    role: Literal["user", "model"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, description="Topic the user wants to learn about.")
    history: list[HistoryMessage] | None = None


# --- Responses ---


class VideoItem(BaseModel):
    title: str
    link: str
    summary: str


class ArticleItem(BaseModel):
    type: Literal["article"] = "article"
    title: str
    link: str
    summary: str
    image: str | None = None


class StructuredData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    header: str = "Recommended Resources"
    intro: str
    youtube_videos: list[VideoItem] = Field(default_factory=list, alias="youtubeVideos")
    resources: list[ArticleItem] = Field(default_factory=list)


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    structured_data: StructuredData = Field(alias="structuredData")
    citations: list[dict] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None
    details: list[dict] | None = None
