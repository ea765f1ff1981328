"""Chat API endpoints."""

import logging

from fastapi import APIRouter

from asana_chat.api.models import ChatRequest, ChatResponse
from asana_chat.factory import get_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest) -> ChatResponse:
    """Handle a chat message on behalf of a user.

    Args:
        request: Message text and the sending user's id

    Returns:
        Plain-text reply (always 200; failures are reported in the reply)
    """
    logger.info(f"chat called: user_id={request.user_id}")
    dispatcher = get_dispatcher()
    reply = await dispatcher.handle_message(request.message, request.user_id)
    return ChatResponse(reply=reply)
