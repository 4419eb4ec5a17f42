from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from studyscout.agents.query_synthesizer import QuerySynthesizer, parse_query_set
from studyscout.errors import QuerySynthesisFailed, TransientUpstreamOverload


def test_parse_query_set_reads_json_wrapped_in_prose():
    text = (
        "Sure! Here you go:\n"
        '{"youtubeQueries": ["ml basics", "intro to ml", " neural nets "],'
        ' "articleQueries": ["ml tutorial", "ml guide", "what is ml"]}\n'
        "Good luck."
    )
    queries = parse_query_set(text)

    assert queries.video_queries == ("ml basics", "intro to ml", "neural nets")
    assert queries.article_queries == ("ml tutorial", "ml guide", "what is ml")
    assert queries.raw_text == text


def test_parse_query_set_caps_each_kind_at_five():
    text = '{"youtubeQueries": ["a","b","c","d","e","f"], "articleQueries": ["x","y","z"]}'
    queries = parse_query_set(text)
    assert len(queries.video_queries) == 5


@pytest.mark.parametrize(
    "text",
    [
        "no json here",
        '{"youtubeQueries": ["a", "b"]}',
        '{"articleQueries": ["a", "b"]}',
        '{"youtubeQueries": "a", "articleQueries": ["b"]}',
        '{"youtubeQueries": [], "articleQueries": ["b"]}',
        '{"youtubeQueries": ["a"], "articleQueries": [1, 2]}',
        '{"youtubeQueries": ["a"], "articleQueries": ["b"]',
    ],
)
def test_parse_query_set_never_returns_partial_set(text):
    with pytest.raises(QuerySynthesisFailed) as exc_info:
        parse_query_set(text)
    assert exc_info.value.raw_text == text


@pytest.mark.asyncio
async def test_synthesizer_renders_message_into_prompt(fake_client):
    client = fake_client({
        "query_synthesizer": '{"youtubeQueries": ["v1"], "articleQueries": ["a1"]}',
    })
    synthesizer = QuerySynthesizer(client)

    queries = await synthesizer.synthesize("machine learning basics")

    assert queries.video_queries == ("v1",)
    call = client.calls_for("query_synthesizer")[0]
    assert call["prompt"].startswith("machine learning basics")
    assert call["search_grounding"] is False


@pytest.mark.asyncio
async def test_synthesizer_retries_overload_but_not_malformed_output(fake_client):
    client = fake_client({
        "query_synthesizer": [TransientUpstreamOverload("busy"), "not json at all"],
    })
    synthesizer = QuerySynthesizer(client, base_delay_ms=1)

    with patch("studyscout.services.backoff.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(QuerySynthesisFailed):
            await synthesizer.synthesize("topic")

    assert len(client.calls_for("query_synthesizer")) == 2
