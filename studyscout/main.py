from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studyscout.api.routes import chat
from studyscout.config import settings
from studyscout.errors import ConfigurationMissing, QuerySynthesisFailed, StudyScoutError
from studyscout.models.schemas import ErrorResponse
from studyscout.services import logger as log_service

app = FastAPI(
    title="StudyScout",
    description="Curated videos and articles for any learning topic",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, **fields) -> JSONResponse:
    body = ErrorResponse(**fields).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error(400, error="Validation failed", details=jsonable_encoder(exc.errors()))


@app.exception_handler(ConfigurationMissing)
async def configuration_missing_handler(request: Request, exc: ConfigurationMissing):
    log_service.log_event("configuration_missing", exc.message, setting=exc.setting)
    return _error(500, error=exc.message)


@app.exception_handler(QuerySynthesisFailed)
async def query_synthesis_failed_handler(request: Request, exc: QuerySynthesisFailed):
    log_service.log_event("query_synthesis_failed", exc.reason)
    return _error(500, error=exc.reason, message=exc.raw_text)


@app.exception_handler(StudyScoutError)
async def studyscout_error_handler(request: Request, exc: StudyScoutError):
    return _error(500, error="Internal server error", message=exc.message)


# Routes
app.include_router(chat.router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "studyscout"}
