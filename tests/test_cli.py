"""Tests for the ingestion CLI."""

import sys

import pytest

from event_ingest.cli import __main__ as cli
from event_ingest.errors import UpstreamError
from event_ingest.ingestion.pipeline import IngestionSummary, RunState


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


def test_no_command_exits_with_help(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["event_ingest.cli"])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 1


def test_ingest_passes_options(monkeypatch):
    captured = {}

    async def fake_run_ingest(settings, max_pages, page_size):
        captured["max_pages"] = max_pages
        captured["page_size"] = page_size
        return IngestionSummary(ingested=4, pages_processed=2, state=RunState.DONE)

    monkeypatch.setattr(cli, "run_ingest", fake_run_ingest)
    monkeypatch.setattr(sys, "argv", ["event_ingest.cli", "ingest", "--max-pages", "2", "--page-size", "200"])
    cli.main()
    assert captured == {"max_pages": 2, "page_size": 200}


def test_ingest_defaults_to_all_pages(monkeypatch):
    captured = {}

    async def fake_run_ingest(settings, max_pages, page_size):
        captured["max_pages"] = max_pages
        return IngestionSummary(state=RunState.DONE)

    monkeypatch.setattr(cli, "run_ingest", fake_run_ingest)
    monkeypatch.setattr(sys, "argv", ["event_ingest.cli", "ingest"])
    cli.main()
    assert captured["max_pages"] is None


def test_ingest_failure_exits_nonzero(monkeypatch):
    async def failing_run_ingest(settings, max_pages, page_size):
        raise UpstreamError("Ticketmaster fetch failed: 500 boom", status_code=500)

    monkeypatch.setattr(cli, "run_ingest", failing_run_ingest)
    monkeypatch.setattr(sys, "argv", ["event_ingest.cli", "ingest"])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 1


def test_ingest_rejects_non_positive_pages(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["event_ingest.cli", "ingest", "--max-pages", "0"])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 2
