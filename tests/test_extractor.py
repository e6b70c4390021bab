"""Tests for the forced function-call extraction client."""

from __future__ import annotations

import json

import pytest

from conftest import connection_error, status_error, text_response, tool_call_response
from venturescope.errors import (
    ExtractionFailure,
    QuotaExhausted,
    RateLimited,
    SchemaViolation,
    TransportFailure,
)
from venturescope.services.extractor import (
    ENRICH_COMPANY_TOOL,
    SYSTEM_PROMPT,
    ExtractionClient,
    build_messages,
)


def test_extract_forces_tool_and_parses_result(make_openai, enrichment_payload) -> None:
    """The request forces ``enrich_company`` and its arguments are parsed into a result."""

    fake = make_openai(tool_call_response(json.dumps(enrichment_payload)))
    client = ExtractionClient(client=fake, model="demo-model")
    links = [f"https://acme.com/page-{index}" for index in range(40)]

    result = client.extract("corpus text", links, "https://acme.com")

    assert result.summary == enrichment_payload["summary"]
    assert result.signals[0].details == "12 open roles"
    assert result.signals[1].details is None
    assert len(fake.calls) == 1

    call = fake.calls[0]
    assert call["model"] == "demo-model"
    assert call["tools"] == [ENRICH_COMPANY_TOOL]
    assert call["tool_choice"] == {"type": "function", "function": {"name": "enrich_company"}}
    system, user = call["messages"]
    assert system == {"role": "system", "content": SYSTEM_PROMPT}
    assert "Website: https://acme.com" in user["content"]
    assert "Content:\ncorpus text" in user["content"]
    assert "https://acme.com/page-29" in user["content"]
    assert "https://acme.com/page-30" not in user["content"]


def test_tool_schema_requires_every_field() -> None:
    """The tool schema requires all result fields and forbids extra properties."""

    parameters = ENRICH_COMPANY_TOOL["function"]["parameters"]

    assert parameters["required"] == ["summary", "what_they_do", "keywords", "signals", "sources"]
    assert parameters["additionalProperties"] is False
    assert parameters["properties"]["signals"]["items"]["required"] == ["signal", "detected"]


def test_build_messages_does_not_truncate_corpus() -> None:
    """The corpus is embedded as-is; truncation happens during assembly."""

    corpus = "z" * 20_000

    messages = build_messages(corpus, [], "https://acme.com")

    assert corpus in messages[1]["content"]


def test_narrative_response_is_schema_violation(make_openai) -> None:
    """A plain text answer without a tool call is rejected."""

    client = ExtractionClient(client=make_openai(text_response("Acme is a rocket company.")))

    with pytest.raises(SchemaViolation):
        client.extract("corpus", [], "https://acme.com")


@pytest.mark.parametrize(
    "arguments",
    [
        "not json",
        json.dumps({"summary": "only a summary"}),
        json.dumps(
            {
                "summary": "s",
                "what_they_do": [],
                "keywords": [],
                "signals": [{"signal": "Blog"}],
                "sources": [],
            }
        ),
        json.dumps(
            {
                "summary": "s",
                "what_they_do": [],
                "keywords": [],
                "signals": [],
                "sources": [],
                "valuation": "huge",
            }
        ),
    ],
)
def test_invalid_tool_arguments_are_schema_violations(make_openai, arguments: str) -> None:
    """Malformed, incomplete or over-specified arguments never yield a partial result."""

    client = ExtractionClient(client=make_openai(tool_call_response(arguments)))

    with pytest.raises(SchemaViolation):
        client.extract("corpus", [], "https://acme.com")


def test_unexpected_tool_name_is_schema_violation(make_openai, enrichment_payload) -> None:
    """A call to any function other than ``enrich_company`` is rejected."""

    response = tool_call_response(json.dumps(enrichment_payload), name="something_else")
    client = ExtractionClient(client=make_openai(response))

    with pytest.raises(SchemaViolation):
        client.extract("corpus", [], "https://acme.com")


def test_empty_choices_is_schema_violation(make_openai) -> None:
    """A response without choices is rejected."""

    client = ExtractionClient(client=make_openai(type("Empty", (), {"choices": []})()))

    with pytest.raises(SchemaViolation):
        client.extract("corpus", [], "https://acme.com")


@pytest.mark.parametrize(
    ("status", "expected"),
    [(429, RateLimited), (402, QuotaExhausted), (500, ExtractionFailure), (400, ExtractionFailure)],
)
def test_status_errors_are_classified_without_retry(make_openai, status: int, expected: type) -> None:
    """Gateway status errors map onto their error kinds after a single call."""

    fake = make_openai(status_error(status))
    client = ExtractionClient(client=fake)

    with pytest.raises(expected) as excinfo:
        client.extract("corpus", [], "https://acme.com")

    assert len(fake.calls) == 1
    if expected is ExtractionFailure:
        assert excinfo.value.upstream_status == status
        assert excinfo.value.status_code == 502
    else:
        assert excinfo.value.status_code == status


def test_connection_error_is_transport_failure(make_openai) -> None:
    """An unreachable gateway is reported as a transport failure."""

    client = ExtractionClient(client=make_openai(connection_error()))

    with pytest.raises(TransportFailure):
        client.extract("corpus", [], "https://acme.com")


def test_default_client_disables_retries() -> None:
    """The OpenAI client built by default never retries on its own."""

    client = ExtractionClient("gateway-key", base_url="https://gateway.test/v1")

    assert client._client.max_retries == 0
    assert str(client._client.base_url).startswith("https://gateway.test/v1")
