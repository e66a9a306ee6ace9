"""
Gemini client for the career guidance chat.

The SDK call is blocking, so it runs in a worker thread and only the
request that asked for a reply waits on the upstream service.
"""

import asyncio
import logging

import google.generativeai as genai

from portal.core import config

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert Career Development Counselor for college students. "
    "Your role is to provide personalized roadmaps, detailed guidance, necessary resources."
)


class ChatServiceError(Exception):
    """The completion service failed or returned nothing usable."""


class ChatServiceUnavailable(ChatServiceError):
    """No API key is configured."""


_model = None
_configured_key = None


def _get_model():
    """
    Lazily build and cache the GenerativeModel.
    Reconfigures only if the API key changes; returns None without a key.
    """
    global _model, _configured_key

    api_key = config.GEMINI_API_KEY
    if not api_key:
        return None

    if api_key != _configured_key:
        genai.configure(api_key=api_key)
        _configured_key = api_key
        _model = genai.GenerativeModel(
            model_name=config.GEMINI_MODEL,
            system_instruction=SYSTEM_PROMPT,
        )

    return _model


def _extract_text(response) -> str:
    try:
        text = response.text
    except (ValueError, AttributeError) as exc:
        # Blocked or empty candidates make .text raise.
        raise ChatServiceError('Completion response had no text') from exc
    if not text or not text.strip():
        raise ChatServiceError('Completion response was empty')
    return text.strip()


def _generate_sync(message: str) -> str:
    model = _get_model()
    if model is None:
        raise ChatServiceUnavailable('GEMINI_API_KEY is not set')
    response = model.generate_content(message)
    return _extract_text(response)


async def generate_reply(message: str) -> str:
    """Send one user turn to the completion service and return its reply."""
    return await asyncio.to_thread(_generate_sync, message)
