import asyncio

import pytest

from portal.chat import client as chat_client
from portal.core import config


class _FakeResponse:
    def __init__(self, text=None, error=None):
        self._text = text
        self._error = error

    @property
    def text(self):
        if self._error is not None:
            raise self._error
        return self._text


@pytest.fixture
def fake_model(monkeypatch: pytest.MonkeyPatch):
    created = {}

    class FakeGenerativeModel:
        def __init__(self, **kwargs):
            created['kwargs'] = kwargs
            created['prompts'] = []
            self.response = _FakeResponse(text='  Learn SQL next.  ')

        def generate_content(self, prompt):
            created['prompts'].append(prompt)
            return self.response

    monkeypatch.setattr(config, 'GEMINI_API_KEY', 'test-key')
    monkeypatch.setattr(chat_client, '_model', None)
    monkeypatch.setattr(chat_client, '_configured_key', None)
    monkeypatch.setattr(chat_client.genai, 'configure', lambda api_key: created.setdefault('api_key', api_key))
    monkeypatch.setattr(chat_client.genai, 'GenerativeModel', FakeGenerativeModel)
    return created


def test_get_model_returns_none_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'GEMINI_API_KEY', '')

    assert chat_client._get_model() is None


def test_generate_reply_raises_unavailable_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'GEMINI_API_KEY', '')

    with pytest.raises(chat_client.ChatServiceUnavailable):
        asyncio.run(chat_client.generate_reply('hello'))


def test_generate_reply_sends_system_instruction_and_user_turn(fake_model) -> None:
    reply = asyncio.run(chat_client.generate_reply('Which electives suit data science?'))

    assert reply == 'Learn SQL next.'
    assert fake_model['api_key'] == 'test-key'
    assert fake_model['kwargs']['system_instruction'] == chat_client.SYSTEM_PROMPT
    assert fake_model['kwargs']['model_name'] == config.GEMINI_MODEL
    assert fake_model['prompts'] == ['Which electives suit data science?']


def test_model_is_cached_until_api_key_changes(fake_model, monkeypatch: pytest.MonkeyPatch) -> None:
    first = chat_client._get_model()
    assert chat_client._get_model() is first

    monkeypatch.setattr(config, 'GEMINI_API_KEY', 'rotated-key')

    assert chat_client._get_model() is not first


def test_blocked_response_raises_service_error(fake_model) -> None:
    chat_client._get_model().response = _FakeResponse(error=ValueError('blocked by safety filter'))

    with pytest.raises(chat_client.ChatServiceError):
        asyncio.run(chat_client.generate_reply('hello'))


def test_empty_response_raises_service_error(fake_model) -> None:
    chat_client._get_model().response = _FakeResponse(text='   ')

    with pytest.raises(chat_client.ChatServiceError):
        asyncio.run(chat_client.generate_reply('hello'))
