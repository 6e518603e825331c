from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from onboarding.extraction.exceptions import ExtractionError, ExtractionNetworkError
from onboarding.extraction.openai_client_adapter import OpenAIClientAdapter


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _call(adapter: OpenAIClientAdapter, system_prompt: str = "system") -> str:
    return adapter.create_chat_completion(
        model="m",
        temperature=0.1,
        system_prompt=system_prompt,
        user_prompt="user",
        image_urls=["data:image/png;base64,AAAA", "data:image/png;base64,BBBB"],
        json_schema={"type": "object"},
    )


class TestOpenAIClientAdapter:
    def test_returns_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response('{"ok": true}')
        with patch(
            "onboarding.extraction.openai_client_adapter.openai.OpenAI",
            return_value=mock_client,
        ):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30, base_url=None)
            content = _call(adapter)
        assert content == '{"ok": true}'

    def test_sends_text_then_images_in_user_message(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("{}")
        with patch(
            "onboarding.extraction.openai_client_adapter.openai.OpenAI",
            return_value=mock_client,
        ):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            _call(adapter)

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        messages = kwargs["messages"]
        assert messages[0] == {"role": "system", "content": "system"}
        user_content = messages[1]["content"]
        assert user_content[0] == {"type": "text", "text": "user"}
        assert [part["image_url"]["url"] for part in user_content[1:]] == [
            "data:image/png;base64,AAAA",
            "data:image/png;base64,BBBB",
        ]
        assert kwargs["response_format"]["json_schema"]["name"] == "document_extraction"
        assert kwargs["response_format"]["json_schema"]["schema"] == {"type": "object"}

    def test_omits_empty_system_prompt(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("{}")
        with patch(
            "onboarding.extraction.openai_client_adapter.openai.OpenAI",
            return_value=mock_client,
        ):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            _call(adapter, system_prompt="")

        messages = mock_client.chat.completions.create.call_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["user"]

    def test_raises_error_for_empty_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(None)
        with patch(
            "onboarding.extraction.openai_client_adapter.openai.OpenAI",
            return_value=mock_client,
        ):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            with pytest.raises(ExtractionError, match="empty response"):
                _call(adapter)

    def test_raises_error_for_no_choices(self) -> None:
        mock_client = MagicMock()
        response = MagicMock()
        response.choices = []
        mock_client.chat.completions.create.return_value = response
        with patch(
            "onboarding.extraction.openai_client_adapter.openai.OpenAI",
            return_value=mock_client,
        ):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            with pytest.raises(ExtractionError, match="no choices"):
                _call(adapter)

    def test_raises_network_error_on_connection_failure(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=MagicMock()
        )
        with patch(
            "onboarding.extraction.openai_client_adapter.openai.OpenAI",
            return_value=mock_client,
        ):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            with pytest.raises(ExtractionNetworkError, match="network error"):
                _call(adapter)

    def test_raises_network_error_on_timeout(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = httpx.TimeoutException("timeout")
        with patch(
            "onboarding.extraction.openai_client_adapter.openai.OpenAI",
            return_value=mock_client,
        ):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            with pytest.raises(ExtractionNetworkError, match="network error"):
                _call(adapter)

    def test_raises_network_error_on_api_error(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIError(
            message="server error",
            request=MagicMock(),
            body=None,
        )
        with patch(
            "onboarding.extraction.openai_client_adapter.openai.OpenAI",
            return_value=mock_client,
        ):
            adapter = OpenAIClientAdapter(api_key="k", timeout_seconds=30)
            with pytest.raises(ExtractionNetworkError, match="API error"):
                _call(adapter)
