"""Tests for the search filter."""
import pytest


def make_event(ticker: str, message: str, event_id: str = "x"):
    from webhook_dashboard.models import Event

    return Event(
        id=event_id, ticker=ticker, message=message,
        timenow="2026-10-18T12:00:00.000Z",
        open=0, high=0, low=0, close=0, price=0, volume=0,
        u_interval="", time="2026-10-18T12:00:00.000Z",
    )


@pytest.fixture
def events():
    return [
        make_event("AAPL", "Buy signal", "1"),
        make_event("TSLA", "Sell", "2"),
        make_event("MSFT", "buyback announced", "3"),
        make_event("BUYZ", "Hold", "4"),
    ]


def test_empty_query_returns_everything_in_order(events):
    from webhook_dashboard.core.search import filter_events

    assert filter_events(events, "") == events


def test_whitespace_query_returns_everything(events):
    from webhook_dashboard.core.search import filter_events

    assert filter_events(events, "   \t") == events


def test_matches_ticker_or_message_case_insensitive(events):
    from webhook_dashboard.core.search import filter_events

    result = filter_events(events, "BuY")

    assert [e.id for e in result] == ["1", "3", "4"]


def test_query_is_trimmed(events):
    from webhook_dashboard.core.search import filter_events

    result = filter_events(events, "  tsla  ")

    assert [e.id for e in result] == ["2"]


def test_no_match_returns_empty(events):
    from webhook_dashboard.core.search import filter_events

    assert filter_events(events, "nvda") == []


def test_filter_is_idempotent(events):
    from webhook_dashboard.core.search import filter_events

    once = filter_events(events, "sell")

    assert filter_events(once, "sell") == once


def test_input_is_not_modified(events):
    from webhook_dashboard.core.search import filter_events

    original = list(events)
    result = filter_events(events, "aapl")
    result.clear()

    assert events == original


def test_buy_scenario():
    from webhook_dashboard.core.search import filter_events

    events = [make_event("AAPL", "Buy signal", "1"), make_event("TSLA", "Sell", "2")]

    result = filter_events(events, "buy")

    assert [e.ticker for e in result] == ["AAPL"]
