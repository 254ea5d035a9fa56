"""Tests for the OpenAI analysis client."""

import asyncio
import json

import pytest

from macros_chef.adapters.openai_analysis_client import OpenAIAnalysisClient


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str = json.dumps({"items": []})) -> None:
        self.responses = _FakeResponses(output_text)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def _generate(client: OpenAIAnalysisClient, **overrides: object) -> dict[str, object]:
    arguments: dict[str, object] = {
        "model": "gpt-5.2",
        "reasoning_effort": "medium",
        "store": False,
        "prompt": "Identify the items",
        "schema": {"type": "object"},
        "schema_name": "grocery_items",
        "image_data_url": "data:image/jpeg;base64,ZmFrZQ==",
    }
    arguments.update(overrides)
    return asyncio.run(client.generate(**arguments))  # type: ignore[arg-type]


def test_generate_sends_image_and_schema() -> None:
    fake = _FakeOpenAI()
    client = OpenAIAnalysisClient(client=fake)  # type: ignore[arg-type]

    result = _generate(client)

    assert result == {"items": []}
    payload = fake.responses.last_payload
    assert payload is not None
    content = payload["input"][0]["content"]  # type: ignore[index]
    assert content[1]["type"] == "input_image"
    assert payload["text"]["format"]["name"] == "grocery_items"  # type: ignore[index]
    assert payload["text"]["format"]["strict"] is True  # type: ignore[index]
    assert payload["reasoning"] == {"effort": "medium"}


def test_generate_text_only_without_reasoning() -> None:
    fake = _FakeOpenAI()
    client = OpenAIAnalysisClient(client=fake)  # type: ignore[arg-type]

    _generate(client, image_data_url=None, reasoning_effort=None)

    payload = fake.responses.last_payload
    assert payload is not None
    assert len(payload["input"][0]["content"]) == 1  # type: ignore[index]
    assert "reasoning" not in payload


def test_generate_rejects_empty_output() -> None:
    fake = _FakeOpenAI(output_text="")
    client = OpenAIAnalysisClient(client=fake)  # type: ignore[arg-type]

    with pytest.raises(RuntimeError):
        _generate(client)


def test_generate_propagates_invalid_json() -> None:
    fake = _FakeOpenAI(output_text="{oops")
    client = OpenAIAnalysisClient(client=fake)  # type: ignore[arg-type]

    with pytest.raises(json.JSONDecodeError):
        _generate(client)


def test_close_closes_sdk_client() -> None:
    fake = _FakeOpenAI()

    asyncio.run(OpenAIAnalysisClient(client=fake).close())  # type: ignore[arg-type]

    assert fake.closed is True
