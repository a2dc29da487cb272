"""Unit tests for fan-out search and the debounce utility."""

import pytest
from flask import g

from bizdesk.core.exceptions import CollaboratorError
from bizdesk.services.search import fan_out_search
from bizdesk.utils.debounce import Debouncer


@pytest.fixture()
def sources(fake_api):
    return {
        "notifications": fake_api([{"id": 1, "title": "JS Bug"}, {"id": 2, "title": "CSS Fix"}]),
        "projects": fake_api([{"id": 5, "title": "Node.js API", "description": "backend"}]),
        "services": fake_api([{"id": 9, "name": "SEO", "description": "ranking"}]),
        "users": fake_api([{"id": 3, "email": "jsmith@acme.co.tz", "firstName": "John"}]),
    }


class TestFanOutSearch:
    def test_scenario_c_notifications(self, sources):
        result = fan_out_search("js", {"notifications": sources["notifications"]})
        assert [n.title for n in result.results["notifications"]] == ["JS Bug"]
        assert result.failed == []

    def test_every_source_searched(self, sources):
        result = fan_out_search("JS", sources)
        assert set(result.results) == {"notifications", "projects", "services", "users"}
        assert [p.id for p in result.results["projects"]] == [5]
        assert [u.id for u in result.results["users"]] == [3]
        assert result.results["services"] == []
        assert result.total == 3

    def test_partial_failure(self, sources):
        sources["projects"].fail_with = CollaboratorError("Backend returned HTTP 500", 500)
        result = fan_out_search("js", sources)
        assert result.failed == ["projects"]
        assert result.results["projects"] == []
        assert len(result.results["notifications"]) == 1

    def test_blank_query_calls_nobody(self, sources):
        result = fan_out_search("   ", sources)
        assert result.results == {}
        assert all(api.calls == [] for api in sources.values())

    def test_limit_per_source(self, fake_api):
        api = fake_api([{"id": i, "title": f"js {i}"} for i in range(1, 9)])
        result = fan_out_search("js", {"notifications": api}, limit=3)
        assert [n.id for n in result.results["notifications"]] == [1, 2, 3]

    def test_sources_subset_and_unknown_ignored(self, sources):
        result = fan_out_search("js", sources, sources=("users", "invoices"))
        assert list(result.results) == ["users"]

    def test_round_trips_counted_on_request(self, app, sources):
        sources["projects"].fail_with = CollaboratorError("Backend returned HTTP 500", 500)
        with app.test_request_context("/api/v1/search?q=js"):
            fan_out_search("js", sources)
            assert g.backend_calls == 4
            assert g.backend_ms >= 0.0

    def test_to_dict_renders_records(self, sources):
        body = fan_out_search("js", sources).to_dict()
        assert body["query"] == "js"
        assert body["results"]["notifications"][0]["title"] == "JS Bug"
        assert body["results"]["notifications"][0]["createdAtDisplay"] == "N/A"


class FakeTimer:
    """Stands in for threading.Timer; fire() runs the callback synchronously."""

    created = []

    def __init__(self, interval, fn):
        self.interval = interval
        self.fn = fn
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            return self.fn()
        return None


class TestDebouncer:
    @pytest.fixture(autouse=True)
    def _reset_timers(self):
        FakeTimer.created = []

    def test_only_last_call_runs(self):
        seen = []
        debounced = Debouncer(300, seen.append, timer_factory=FakeTimer)
        first = debounced.call("j")
        second = debounced.call("js")
        assert first.cancelled and not second.cancelled
        assert second.interval == pytest.approx(0.3)
        first.fire()
        second.fire()
        assert seen == ["js"]
        assert not debounced.pending

    def test_cancel(self):
        seen = []
        debounced = Debouncer(300, seen.append, timer_factory=FakeTimer)
        handle = debounced.call("x")
        assert debounced.pending
        assert debounced.cancel() is True
        assert debounced.cancel() is False
        handle.fire()
        assert seen == []

    def test_stale_handle_does_not_fire(self):
        seen = []
        debounced = Debouncer(300, seen.append, timer_factory=FakeTimer)
        stale = debounced.call("a")
        debounced.call("ab")
        stale.fn()  # timer already elapsed when the new call came in
        assert seen == []

    def test_kwargs_passed_through(self):
        seen = {}
        debounced = Debouncer(10, lambda q, limit=5: seen.update(q=q, limit=limit),
                              timer_factory=FakeTimer)
        debounced.call("js", limit=2).fire()
        assert seen == {"q": "js", "limit": 2}
