from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from studyscout.api.deps import OrchestratorFactory, get_orchestrator_factory
from studyscout.errors import StudyScoutError
from studyscout.models.resources import PipelineResult
from studyscout.models.schemas import (
    ArticleItem,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    StructuredData,
    VideoItem,
)

router = APIRouter(prefix="/api/training", tags=["training"])


def to_chat_response(result: PipelineResult) -> ChatResponse:
    bundle = result.bundle
    return ChatResponse(
        message=result.message,
        structured_data=StructuredData(
            intro=bundle.intro,
            youtube_videos=[
                VideoItem(title=v.title, link=v.link, summary=v.summary) for v in bundle.videos
            ],
            resources=[
                ArticleItem(title=a.title, link=a.link, summary=a.summary, image=a.image)
                for a in bundle.articles
            ],
        ),
        citations=[],
    )


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(
    request: ChatRequest,
    build: OrchestratorFactory = Depends(get_orchestrator_factory),
):
    """Build a bundle of videos and articles for the requested topic."""
    orchestrator = build()
    try:
        result = await orchestrator.run(request.message, history=request.history or [])
    except StudyScoutError:
        raise
    except Exception as e:
        logger.exception("Chat error")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error", message=str(e)).model_dump(exclude_none=True),
        )
    return to_chat_response(result)
