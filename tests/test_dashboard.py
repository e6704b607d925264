"""
Dashboard endpoints: pinned metric prefs and the trend overview.
"""
import pytest

from conftest import ev, make_candidate


def _seed(client, summarizer, day, **overrides):
    summarizer.queue(make_candidate(day, [ev("Sleep", "sleep", "00:00", "08:00")], **overrides))
    r = client.post("/analyze-day", json={"date": day, "transcript": f"recap {day}"})
    assert r.status_code == 200
    return r.json()


class TestPrefs:
    def test_default_is_empty(self, client):
        r = client.get("/dashboard/prefs")
        assert r.status_code == 200
        assert r.json() == {"pinnedMetrics": []}

    def test_put_cleans_and_persists(self, client):
        r = client.put(
            "/dashboard/prefs",
            json={"pinnedMetrics": ["sleepHours", " focusBlocks ", "", "sleepHours"]},
        )
        assert r.status_code == 200
        assert r.json() == {"pinnedMetrics": ["sleepHours", "focusBlocks"]}
        assert client.get("/dashboard/prefs").json() == {"pinnedMetrics": ["sleepHours", "focusBlocks"]}

    def test_put_replaces(self, client):
        client.put("/dashboard/prefs", json={"pinnedMetrics": ["a", "b"]})
        client.put("/dashboard/prefs", json={"pinnedMetrics": ["c"]})
        assert client.get("/dashboard/prefs").json()["pinnedMetrics"] == ["c"]

    def test_too_many_keys(self, client):
        r = client.put("/dashboard/prefs", json={"pinnedMetrics": [f"k{i}" for i in range(30)]})
        assert r.status_code == 422


class TestOverview:
    def test_no_data(self, client):
        r = client.get("/dashboard/overview", params={"days": 3, "end": "2025-06-03"})
        assert r.status_code == 200
        body = r.json()
        assert body["start"] == "2025-06-01"
        assert body["daysWithData"] == 0
        assert [p["hasData"] for p in body["trend"]] == [False, False, False]
        assert body["averages"]["sleepHours"] == 0
        assert body["latest"] is None

    def test_window_defaults_to_latest_day(self, client, summarizer):
        _seed(client, summarizer, "2025-06-01")
        _seed(client, summarizer, "2025-06-03")
        client.put("/dashboard/prefs", json={"pinnedMetrics": ["sleepHours"]})

        r = client.get("/dashboard/overview", params={"days": 3})
        body = r.json()
        assert body["end"] == "2025-06-03"
        assert body["start"] == "2025-06-01"
        assert body["daysWithData"] == 2
        assert [p["date"] for p in body["trend"]] == ["2025-06-01", "2025-06-02", "2025-06-03"]
        assert [p["hasData"] for p in body["trend"]] == [True, False, True]
        assert body["totals"]["sleepHours"] == pytest.approx(16.0)
        assert body["totals"]["focusBlocks"] == 4
        assert body["averages"]["productiveHours"] == pytest.approx(4.0)
        assert body["averages"]["contextSwitches"] == 5
        assert body["latest"]["date"] == "2025-06-03"
        assert body["pinnedMetrics"] == ["sleepHours"]

    def test_days_bounds(self, client):
        assert client.get("/dashboard/overview", params={"days": 0}).status_code == 422
        assert client.get("/dashboard/overview", params={"days": 91}).status_code == 422

    def test_requires_auth(self, anon_client):
        assert anon_client.get("/dashboard/overview").status_code == 401
