import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from finassist.db import async_session
from finassist.schemas.chat import ChatRequest, ChatResponse, ErrorResponse
from finassist.services.aggregator import aggregate
from finassist.services.assistant import respond
from finassist.services.store import RecordStore, SqlRecordStore

logger = logging.getLogger(__name__)

MISSING_FIELDS_ERROR = "Message and userId are required"

router = APIRouter(prefix="/api", tags=["chat"])


def get_record_store() -> RecordStore:
    return SqlRecordStore(async_session)


@router.options("/ai-chat")
async def ai_chat_preflight() -> Response:
    return Response(status_code=200)


@router.api_route("/ai-chat", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def ai_chat_method_not_allowed() -> JSONResponse:
    return JSONResponse(status_code=405, content={"error": "Method not allowed"})


@router.post(
    "/ai-chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def ai_chat(
    payload: ChatRequest,
    store: RecordStore = Depends(get_record_store),
):
    if not payload.message or not payload.message.strip() or not payload.user_id:
        return JSONResponse(status_code=400, content={"error": MISSING_FIELDS_ERROR})

    logger.info("Processing chat request: message=%r user=%s", payload.message[:50], payload.user_id)
    try:
        context = await aggregate(store, payload.user_id, datetime.now(timezone.utc))
        answer = respond(payload.message, context)
    except Exception as exc:
        logger.exception("AI chat error for user %s", payload.user_id)
        return JSONResponse(
            status_code=500,
            content={
                "error": "An error occurred while processing your request",
                "message": str(exc) or "Unknown error",
            },
        )
    return ChatResponse(response=answer)
