"""Controllers for agent endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from loguru import logger

from ..models.chat_request import PromptRequest
from ..models.chat_response import ChatResponse
from ..services.agent_service import AgentService, get_agent_service

router = APIRouter(prefix="/api/agent", tags=["Agent"])


@router.post("/request", response_model=ChatResponse)
def agent_request_endpoint(
    request: PromptRequest,
    service: AgentService = Depends(get_agent_service),
) -> ChatResponse:
    """Process a request with the agent persona."""
    logger.info("Processing agent request")
    return service.process_agent_request(request)


@router.post("/plan", response_model=ChatResponse)
def plan_endpoint(
    request: PromptRequest,
    service: AgentService = Depends(get_agent_service),
) -> ChatResponse:
    """Plan a complex operation with step-by-step instructions."""
    logger.info("Planning operation")
    return service.plan_operation(request)


@router.get("/health", response_class=PlainTextResponse)
def health() -> str:
    """Health check for the agent service."""
    return "Agent service is operational"
