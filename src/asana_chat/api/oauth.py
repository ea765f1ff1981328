"""Asana OAuth endpoints."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import RedirectResponse

from asana_chat.api.models import CallbackResponse
from asana_chat.factory import get_oauth_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/asana/connect")
async def connect(user_id: str) -> RedirectResponse:
    """Redirect the browser to Asana's authorization page.

    Args:
        user_id: Chat user id to bind the resulting token to
    """
    logger.info(f"connect called: user_id={user_id}")
    return RedirectResponse(get_oauth_manager().build_authorization_url(user_id))


@router.get("/asana/callback", response_model=CallbackResponse)
async def callback(code: str, state: str) -> CallbackResponse:
    """OAuth redirect target; stores the user's access token.

    Args:
        code: Authorization code issued by Asana
        state: User id passed to the authorization URL

    Raises:
        HTTPException: If the code could not be exchanged for a token
    """
    if not await get_oauth_manager().handle_callback(code, state):
        logger.error(f"OAuth callback failed for user {state}")
        raise HTTPException(status_code=400, detail="Failed to connect Asana account")
    return CallbackResponse(status="connected", user_id=state)
