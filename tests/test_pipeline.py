"""Tests for the scrape pipeline: modes, enrichment, assembly, orchestration.

Mocking strategy:
- ``respx`` serves page markup to ``fetch_url``.
- The LLM is never called: runner tests inject an ``annotator`` callable and
  the annotator unit tests patch ``_get_llm``.
- A ``FakeClock`` replaces wall-clock time so durations are exact.
"""

from __future__ import annotations

import sqlite3
from types import SimpleNamespace
from typing import Generator
from unittest.mock import MagicMock, patch

import httpx
import pytest
import respx

from nerdscrape.db.connection import get_connection
from nerdscrape.db.migrations import init_db
from nerdscrape.db.scrapes import get_scrape, list_scrapes
from nerdscrape.errors import BudgetExceededError, InvalidInputError
from nerdscrape.pipeline.annotator import AI_UNAVAILABLE, annotate, annotate_safely
from nerdscrape.pipeline.assembler import (
    MAX_AI_INPUT_CHARS,
    MAX_CONTENT_CHARS,
    assemble,
    assemble_failure,
)
from nerdscrape.pipeline.budget import Deadline
from nerdscrape.pipeline.models import (
    ScrapeFailure,
    ScrapeRequest,
    ScrapeSuccess,
    Stored,
    StoredLocally,
)
from nerdscrape.pipeline.modes import DEFAULT_PROMPT, decide_enrichment
from nerdscrape.pipeline.persistence import STORE_UNAVAILABLE
from nerdscrape.pipeline.runner import INVALID_URL_MESSAGE, run_scrape
from nerdscrape.scraper.models import PageExtraction, StructuredData


# ---------------------------------------------------------------------------
# Helpers / fixtures
# ---------------------------------------------------------------------------

_T0 = 1_700_000_000_000

_PAGE = "<title>Hi</title><body><p>a</p><p>b</p></body>"


class FakeClock:
    """Deterministic epoch-millisecond clock."""

    def __init__(self, start: int = _T0) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingAnnotator:
    """Annotator stub that records its inputs and can burn clock time."""

    def __init__(self, reply: str = "Looks fine.", clock: FakeClock | None = None, cost_ms: int = 0) -> None:
        self.reply = reply
        self.clock = clock
        self.cost_ms = cost_ms
        self.calls: list[tuple[str, str]] = []

    def __call__(self, content: str, prompt: str, timeout: float | None = None) -> str:
        self.calls.append((content, prompt))
        if self.clock is not None:
            self.clock.advance(self.cost_ms)
        return self.reply


def _failing_annotator(content: str, prompt: str, timeout: float | None = None) -> str:
    raise RuntimeError("model offline")


@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    connection = get_connection(db_path=":memory:")
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def page_mock() -> Generator[respx.MockRouter, None, None]:
    with respx.mock(assert_all_called=False) as router:
        router.get("https://example.com/").mock(return_value=httpx.Response(200, text=_PAGE))
        yield router


def _extraction(**overrides) -> PageExtraction:
    fields = dict(
        title="T",
        description="D",
        body_text="one two three",
        paragraphs=["one", "two"],
        headings=["h"],
        image_count=4,
        link_count=7,
    )
    fields.update(overrides)
    return PageExtraction(**fields)


# ---------------------------------------------------------------------------
# Mode selection
# ---------------------------------------------------------------------------

class TestDecideEnrichment:
    def test_basic_mode_skips_enrichment(self) -> None:
        assert decide_enrichment("basic", "ignored prompt") is None

    def test_nerd_mode_uses_default_prompt(self) -> None:
        plan = decide_enrichment("nerd")
        assert plan is not None
        assert plan.prompt == DEFAULT_PROMPT
        for topic in ("topic", "Key information", "quality", "patterns", "Sentiment"):
            assert topic in plan.prompt

    def test_nerd_mode_prefers_custom_prompt(self) -> None:
        assert decide_enrichment("nerd", "List the prices.").prompt == "List the prices."

    def test_blank_custom_prompt_counts_as_absent(self) -> None:
        assert decide_enrichment("nerd", "   ").prompt == DEFAULT_PROMPT


# ---------------------------------------------------------------------------
# Annotator
# ---------------------------------------------------------------------------

class TestAnnotator:
    def test_annotate_sends_prompt_and_content(self) -> None:
        llm = MagicMock()
        llm.invoke.return_value = SimpleNamespace(content="  Summary.  ")
        with patch("nerdscrape.pipeline.annotator._get_llm", return_value=llm) as get_llm:
            text = annotate("page body", "Describe it.", timeout=12.5)

        assert text == "Summary."
        get_llm.assert_called_once_with(12.5)
        sent = llm.invoke.call_args.args[0]
        assert sent.startswith("Describe it.")
        assert sent.endswith("page body")

    def test_annotate_safely_absorbs_failures(self) -> None:
        assert annotate_safely("x", "p", annotator=_failing_annotator) == AI_UNAVAILABLE

    def test_annotate_safely_defaults_to_annotate(self) -> None:
        with patch("nerdscrape.pipeline.annotator._get_llm", side_effect=ConnectionError("refused")):
            assert annotate_safely("x", "p") == AI_UNAVAILABLE

    def test_annotate_safely_passes_through_text(self) -> None:
        stub = RecordingAnnotator(reply="ok")
        assert annotate_safely("body", "prompt", annotator=stub) == "ok"
        assert stub.calls == [("body", "prompt")]


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

class TestAssemble:
    def test_success_counts_match_extraction(self, clock: FakeClock) -> None:
        started = clock()
        clock.advance(321)
        result = assemble("https://example.com/", _extraction(), "analysis", started, clock)

        assert isinstance(result, ScrapeSuccess)
        assert result.status == "success"
        assert result.timestamp == _T0 + 321
        assert result.metadata.word_count == 3
        assert result.metadata.paragraph_count == 2
        assert result.metadata.image_count == 4
        assert result.metadata.link_count == 7
        assert result.metadata.scrape_duration == 321
        assert "errorMessage" not in result.to_dict()

    def test_content_truncated_independently_of_word_count(self, clock: FakeClock) -> None:
        body = "word " * 3000  # 15 000 characters
        result = assemble("https://example.com/", _extraction(body_text=body), None, clock(), clock)

        assert len(result.content) == MAX_CONTENT_CHARS
        assert result.metadata.word_count == 3000

    def test_optional_fields_omitted_when_absent(self, clock: FakeClock) -> None:
        payload = assemble("https://example.com/", _extraction(), None, clock(), clock).to_dict()
        assert "extractedData" not in payload
        assert "aiAnalysis" not in payload

    def test_structured_payload_rendered(self, clock: FakeClock) -> None:
        extraction = _extraction(structured=StructuredData(headings=("h",)))
        payload = assemble("https://example.com/", extraction, "x", clock(), clock).to_dict()
        assert payload["extractedData"] == {"headings": ["h"], "links": [], "images": []}
        assert payload["aiAnalysis"] == "x"

    def test_failure_record_zeroes_counts(self, clock: FakeClock) -> None:
        started = clock()
        clock.advance(40)
        failure = assemble_failure("https://example.com/", "boom", started, clock)

        assert isinstance(failure, ScrapeFailure)
        assert failure.to_dict()["metadata"] == {
            "wordCount": 0,
            "imageCount": 0,
            "linkCount": 0,
            "paragraphCount": 0,
            "scrapeDuration": 40,
        }
        assert failure.to_dict()["errorMessage"] == "boom"
        assert "title" not in failure.to_dict()

    def test_failure_record_default_message(self, clock: FakeClock) -> None:
        assert assemble_failure("u", "", clock(), clock).error_message == "Failed to scrape website"


# ---------------------------------------------------------------------------
# Deadline
# ---------------------------------------------------------------------------

class TestDeadline:
    def test_remaining_and_clamp(self, clock: FakeClock) -> None:
        deadline = Deadline(started_at=clock(), budget=60.0, clock=clock)
        clock.advance(45_000)

        assert deadline.remaining() == pytest.approx(15.0)
        assert deadline.clamp(30.0) == pytest.approx(15.0)
        assert deadline.clamp(5.0) == 5.0
        deadline.check("fetch")

    def test_check_raises_when_spent(self, clock: FakeClock) -> None:
        deadline = Deadline(started_at=clock(), budget=1.0, clock=clock)
        clock.advance(1_000)

        assert deadline.remaining() == 0.0
        with pytest.raises(BudgetExceededError, match="enrichment"):
            deadline.check("enrichment")


# ---------------------------------------------------------------------------
# run_scrape
# ---------------------------------------------------------------------------

class TestRunScrapeValidation:
    @pytest.mark.parametrize("url", ["javascript:alert(1)", "", "ftp://example.com/"])
    def test_invalid_url_short_circuits(self, conn: sqlite3.Connection, clock: FakeClock, url: str) -> None:
        with respx.mock:  # any outbound request would fail the test
            with pytest.raises(InvalidInputError, match=INVALID_URL_MESSAGE):
                run_scrape(conn, ScrapeRequest(url=url), clock=clock)

        assert list_scrapes(conn) == []

    def test_unknown_mode_rejected(self, conn: sqlite3.Connection, clock: FakeClock) -> None:
        with pytest.raises(InvalidInputError, match="mode"):
            run_scrape(conn, ScrapeRequest(url="https://example.com/", mode="turbo"), clock=clock)

    def test_denied_host_rejected(self, conn: sqlite3.Connection, clock: FakeClock, monkeypatch) -> None:
        monkeypatch.setattr("nerdscrape.config.settings.denied_hosts", ["example.com"])
        with pytest.raises(InvalidInputError, match="not allowed"):
            run_scrape(conn, ScrapeRequest(url="https://example.com/"), clock=clock)


class TestRunScrapeSuccess:
    def test_basic_mode(self, conn, clock, page_mock) -> None:
        stub = RecordingAnnotator()
        response = run_scrape(conn, ScrapeRequest(url="https://example.com/"), clock=clock, annotator=stub)
        result = response.result

        assert response.ok and response.http_status == 200
        assert isinstance(result, ScrapeSuccess)
        assert result.title == "Hi"
        assert result.metadata.paragraph_count == 2
        assert result.extracted_data is None
        assert result.ai_analysis is None
        assert stub.calls == []

    def test_result_is_persisted_with_durable_id(self, conn, clock, page_mock) -> None:
        response = run_scrape(conn, ScrapeRequest(url="https://example.com/"), clock=clock)

        assert isinstance(response.persistence, Stored)
        assert response.result.id == response.persistence.id
        row = get_scrape(conn, response.result.id)
        assert row is not None
        assert row.as_record() == response.result.to_dict()

    def test_padded_url_is_trimmed_before_fetch(self, conn, clock, page_mock) -> None:
        response = run_scrape(conn, ScrapeRequest(url="  https://example.com/ \n"), clock=clock)

        assert response.http_status == 200
        assert response.result.url == "https://example.com/"
        assert get_scrape(conn, response.result.id).url == "https://example.com/"

    def test_nerd_mode_enriches_and_attaches_structure(self, conn, clock, page_mock) -> None:
        stub = RecordingAnnotator(reply="A tiny page.")
        response = run_scrape(
            conn, ScrapeRequest(url="https://example.com/", mode="nerd"), clock=clock, annotator=stub
        )

        assert response.result.ai_analysis == "A tiny page."
        assert response.result.extracted_data == StructuredData()
        assert stub.calls == [("a b", DEFAULT_PROMPT)]

    def test_custom_prompt_reaches_annotator(self, conn, clock, page_mock) -> None:
        stub = RecordingAnnotator()
        run_scrape(
            conn,
            ScrapeRequest(url="https://example.com/", mode="nerd", custom_prompt="Only the title?"),
            clock=clock,
            annotator=stub,
        )
        assert stub.calls[0][1] == "Only the title?"

    def test_annotator_failure_degrades(self, conn, clock, page_mock) -> None:
        response = run_scrape(
            conn,
            ScrapeRequest(url="https://example.com/", mode="nerd"),
            clock=clock,
            annotator=_failing_annotator,
        )

        assert response.http_status == 200
        assert response.result.status == "success"
        assert response.result.ai_analysis == AI_UNAVAILABLE
        assert response.result.extracted_data is not None

    def test_two_independent_truncations(self, conn, clock) -> None:
        body = "x" * 12_000
        stub = RecordingAnnotator()
        with respx.mock:
            respx.get("https://example.com/long").mock(
                return_value=httpx.Response(200, text=f"<body><p>{body}</p></body>")
            )
            response = run_scrape(
                conn, ScrapeRequest(url="https://example.com/long", mode="nerd"), clock=clock, annotator=stub
            )

        assert len(stub.calls[0][0]) == MAX_AI_INPUT_CHARS
        assert len(response.result.content) == MAX_CONTENT_CHARS

    def test_duration_includes_enrichment(self, conn, clock, page_mock) -> None:
        stub = RecordingAnnotator(clock=clock, cost_ms=250)
        response = run_scrape(
            conn, ScrapeRequest(url="https://example.com/", mode="nerd"), clock=clock, annotator=stub
        )
        assert response.result.metadata.scrape_duration == 250


class TestRunScrapeFailure:
    def test_fetch_timeout_yields_error_record(self, conn, clock) -> None:
        with respx.mock:
            respx.get("https://slow.example.com/").mock(side_effect=httpx.ReadTimeout("timed out"))
            response = run_scrape(conn, ScrapeRequest(url="https://slow.example.com/"), clock=clock)

        result = response.result
        assert response.http_status == 500
        assert isinstance(result, ScrapeFailure)
        assert result.status == "error"
        assert result.error_message
        assert result.metadata.word_count == 0

    def test_error_record_is_persisted(self, conn, clock) -> None:
        with respx.mock:
            respx.get("https://example.com/gone").mock(return_value=httpx.Response(410))
            response = run_scrape(conn, ScrapeRequest(url="https://example.com/gone"), clock=clock)

        assert isinstance(response.persistence, Stored)
        rows = list_scrapes(conn, status="error")
        assert [r.id for r in rows] == [response.result.id]
        assert "410" in rows[0].payload["errorMessage"]

    def test_extraction_failure(self, conn, clock, page_mock) -> None:
        with patch("nerdscrape.pipeline.runner.extract_content", side_effect=RuntimeError("bad tree")):
            response = run_scrape(conn, ScrapeRequest(url="https://example.com/"), clock=clock)

        assert response.http_status == 500
        assert response.result.error_message == "Failed to extract content: bad tree"

    def test_budget_exhausted_during_enrichment(self, conn, clock, page_mock, monkeypatch) -> None:
        monkeypatch.setattr("nerdscrape.config.settings.request_budget", 1.0)
        stub = RecordingAnnotator(clock=clock, cost_ms=1_500)
        response = run_scrape(
            conn, ScrapeRequest(url="https://example.com/", mode="nerd"), clock=clock, annotator=stub
        )

        assert response.http_status == 500
        assert "time budget" in response.result.error_message
        assert response.result.metadata.scrape_duration == 1_500


class TestPersistenceFallback:
    def test_store_failure_returns_local_id(self, clock, page_mock) -> None:
        broken = get_connection(db_path=":memory:")
        init_db(broken)
        broken.close()

        response = run_scrape(broken, ScrapeRequest(url="https://example.com/"), clock=clock)

        assert response.http_status == 200
        assert isinstance(response.persistence, StoredLocally)
        assert response.persistence.durable is False
        assert response.result.id == f"local-{_T0}"
        assert response.result.title == "Hi"

    def test_missing_store_returns_local_id(self, clock, page_mock) -> None:
        response = run_scrape(None, ScrapeRequest(url="https://example.com/"), clock=clock)

        assert response.http_status == 200
        assert isinstance(response.persistence, StoredLocally)
        assert response.persistence.reason == STORE_UNAVAILABLE
        assert response.result.id == f"local-{_T0}"
