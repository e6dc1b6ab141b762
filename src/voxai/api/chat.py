"""Chat API route: the keyword chatbot.

The router is mounted behind get_current_user in api/__init__.py.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from voxai.auth.dependencies import CurrentIdentity, get_current_user
from voxai.db.engine import get_db
from voxai.errors import InvalidRequest
from voxai.schemas.chat import ChatRequest, ChatResponse
from voxai.services.chat_service import ChatService
from voxai.services.credential_store import CredentialStore

router = APIRouter(prefix="/chat")


@router.post("", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    message = body.message.strip()
    if not message:
        raise InvalidRequest("Message is required")

    user = await CredentialStore(db).get(uuid.UUID(identity.user_id))
    answer = await ChatService(db).respond(message, user_name=user.name if user else None)
    return ChatResponse(reply=answer.reply, topic=answer.topic)
