"""Controllers for chat endpoints.

Defines the routes for interacting with the ChatService.  Failures on
the JSON endpoints propagate to the exception handlers registered in
``main.py``; the file upload endpoint answers failures with a
``ChatResponse`` body so upload clients only ever parse one shape.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger

from ..config.rag_config import RagConfig, get_rag_config
from ..models.chat_request import FileUploadRequest, PromptRequest
from ..models.chat_response import ChatResponse
from ..models.enums import ErrorCode
from ..services.chat_service import ChatService, get_chat_service
from ..utils.error_handler import AIException
from ..utils.helpers import new_identifier

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("/prompt", response_model=ChatResponse)
def prompt_endpoint(
    request: PromptRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a text prompt with the code-assistant persona.

    ``conversationId`` is generated when omitted and returned so the
    client can continue the dialogue.
    """
    logger.info("Received chat prompt: {!r}", (request.message or "")[:80])
    return service.process_prompt(request)


@router.post("/prompt-with-file", response_model=ChatResponse)
async def prompt_with_file_endpoint(
    file: UploadFile = File(...),
    message: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None, alias="userId"),
    conversation_id: Optional[str] = Form(None, alias="conversationId"),
    user_id_param: Optional[str] = Query(None, alias="userId"),
    conversation_id_param: Optional[str] = Query(None, alias="conversationId"),
    service: ChatService = Depends(get_chat_service),
    rag_config: RagConfig = Depends(get_rag_config),
):
    """Answer a prompt using an uploaded document as context.

    Supports PDF, TXT, JSON and XML uploads.  ``userId`` and
    ``conversationId`` may be sent as form fields or query parameters.
    Processing failures return HTTP 500 with ``success`` set to false
    and the reason in ``error``.  A missing ``conversationId`` is assigned
    here, so failure bodies name the conversation the file was stored
    under.
    """
    logger.info("Received chat prompt with file: {} ({})", file.filename, file.content_type)

    # One byte past the limit is enough to detect an oversized upload
    file_bytes = await file.read(rag_config.max_file_size_bytes + 1)
    upload = FileUploadRequest(
        message=message,
        user_id=user_id or user_id_param,
        conversation_id=conversation_id or conversation_id_param or new_identifier(),
        file_bytes=file_bytes,
        file_name=file.filename,
        mime_type=file.content_type,
    )

    try:
        return await run_in_threadpool(service.process_prompt_with_file, upload)
    except AIException as exc:
        logger.error("Prompt with file failed: {} - {}", exc.code.value, exc.message)
        error = exc.message
    except Exception:
        logger.exception("Unhandled exception during prompt with file")
        error = ErrorCode.INTERNAL_ERROR.default_message

    response = ChatResponse.for_request(upload, None, success=False, error=error)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=response.model_dump(mode="json", by_alias=True),
    )


@router.post("/agent", response_model=ChatResponse)
def agent_endpoint(
    request: PromptRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Placeholder for tool-based interactions; answers as a plain prompt."""
    logger.info("Received chat agent request: {!r}", (request.message or "")[:80])
    return service.process_prompt(request)


@router.get("/health", response_class=PlainTextResponse)
def health() -> str:
    return "Chat service is healthy"
