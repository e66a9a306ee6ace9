import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portal.auth.sanitize import clean
from portal.chat import client as chat_client

router = APIRouter(tags=['chat'])

logger = logging.getLogger(__name__)

CHAT_FAILURE_REPLY = 'Sorry, something went wrong.'


class ChatRequest(BaseModel):
    message: str | None = ''


class ChatResponse(BaseModel):
    reply: str


@router.post('/chat', response_model=ChatResponse)
async def chat(data: ChatRequest):
    message = clean(data.message)
    try:
        reply = await chat_client.generate_reply(message)
    except Exception:
        logger.exception('Chat completion failed')
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'reply': CHAT_FAILURE_REPLY},
        )
    return ChatResponse(reply=reply)
