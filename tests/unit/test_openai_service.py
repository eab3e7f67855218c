"""
Unit tests for the OpenAI chat wrapper (metrics, cost and error wrapping).
"""

import pytest

from app.services.openai_service import (
    OpenAIChatService,
    OpenAIServiceError,
    calculate_openai_cost,
    split_tokens,
)


# ─────────────────────────────────────────────────────────────────────
# Cost and Token Helpers
# ─────────────────────────────────────────────────────────────────────

def test_calculate_cost_known_model():
    assert calculate_openai_cost("gpt-4o", 1000, 1000) == pytest.approx(0.02)


def test_calculate_cost_unknown_model_uses_mini_pricing():
    assert calculate_openai_cost("modelo-novo", 1000, 1000) == pytest.approx(0.00075)


def test_split_tokens_prefers_reported_values():
    assert split_tokens(1000, 600, 400) == {"prompt": 600, "completion": 400}


def test_split_tokens_estimates_when_missing():
    assert split_tokens(1000) == {"prompt": 700, "completion": 300}
    assert split_tokens(1000, 0, None) == {"prompt": 700, "completion": 300}


# ─────────────────────────────────────────────────────────────────────
# chat()
# ─────────────────────────────────────────────────────────────────────

def test_chat_returns_content_and_metrics(openai_service, openai_client, completion):
    openai_client.chat.completions.create.return_value = completion("  Olá  ", request_id="req-abc")

    result = openai_service.chat(
        model="gpt-4o-mini",
        messages=[{"role": "user", "content": "oi"}],
        max_tokens=50,
        temperature=0.2,
        top_p=0.9
    )

    assert result["content"] == "Olá"
    assert result["model"] == "gpt-4o-mini"
    assert result["tokens_used"] == 1000
    assert result["tokens_prompt"] == 800
    assert result["tokens_completion"] == 200
    assert result["cost"] == pytest.approx(0.8 * 0.00015 + 0.2 * 0.0006)
    assert result["request_id"] == "req-abc"
    assert result["max_tokens"] == 50
    assert result["temperature"] == 0.2
    assert result["response_time_ms"] >= 0

    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["top_p"] == 0.9
    assert kwargs["max_tokens"] == 50


def test_chat_handles_missing_content(openai_service, openai_client, completion):
    openai_client.chat.completions.create.return_value = completion(None)

    assert openai_service.chat("gpt-4o-mini", [], 10, 0.5)["content"] == ""


def test_chat_without_client_raises():
    service = OpenAIChatService(api_key="")

    assert service.is_configured() is False
    with pytest.raises(OpenAIServiceError):
        service.chat("gpt-4o-mini", [], 10, 0.5)
