"""
Tests for the holiday data sources and the JSON fetcher.
"""

import time

import httpx
import pytest

from time_workdays.core.errors import InvalidResponseShape, UpstreamUnavailable
from time_workdays.core.holiday_provider import (
    JsonFetcher,
    NateHolidaySource,
    TimorHolidaySource,
    build_sources,
)
from time_workdays.data.schemas import Provider

TIMOR_URL = "https://timor.tech/api/holiday/year/{year}"
NATE_URL = "https://raw.githubusercontent.com/NateScarlet/holiday-cn/master/{year}.json"
NATE_MIRROR_URL = "https://cdn.jsdelivr.net/gh/NateScarlet/holiday-cn@master/{year}.json"


def timor_source(network):
    fetcher = JsonFetcher("test-agent/1.0", 8000, transport=network.transport)
    return TimorHolidaySource(fetcher, TIMOR_URL)


def nate_source(network):
    fetcher = JsonFetcher("test-agent/1.0", 8000, transport=network.transport)
    return NateHolidaySource(fetcher, NATE_URL, NATE_MIRROR_URL)


def unavailable(request):
    return httpx.Response(503, text="service unavailable")


def timing_out(request):
    raise httpx.ReadTimeout("timed out", request=request)


class TrickleStream(httpx.SyncByteStream):
    """Body that arrives in small chunks with a pause before each one."""

    def __init__(self, chunks, pause):
        self.chunks = chunks
        self.pause = pause

    def __iter__(self):
        for chunk in self.chunks:
            time.sleep(self.pause)
            yield chunk


class TestJsonFetcher:
    """Tests for JsonFetcher."""

    def test_sends_user_agent_and_accept(self, make_network):
        """Requests carry the configured User-Agent."""
        network = make_network({"example.com": {"ok": True}})
        fetcher = JsonFetcher("mcp-time-workdays/1.1", 8000, transport=network.transport)

        assert fetcher.get_json("https://example.com/doc.json") == {"ok": True}
        request = network.requests[0]
        assert request.headers["User-Agent"] == "mcp-time-workdays/1.1"
        assert request.headers["Accept"] == "application/json"

    def test_non_2xx_status(self, make_network):
        """A non-2xx status is an upstream failure."""
        network = make_network({"example.com": unavailable})
        fetcher = JsonFetcher("agent", 8000, transport=network.transport)

        with pytest.raises(UpstreamUnavailable, match="HTTP 503"):
            fetcher.get_json("https://example.com/doc.json")

    def test_timeout(self, make_network):
        """A timeout is reported as an ordinary upstream failure."""
        network = make_network({"example.com": timing_out})
        fetcher = JsonFetcher("agent", 8000, transport=network.transport)

        with pytest.raises(UpstreamUnavailable, match="timeout"):
            fetcher.get_json("https://example.com/doc.json", timeout_ms=1500)

    def test_non_json_body(self, make_network):
        """A body that is not JSON is an upstream failure."""
        network = make_network({"example.com": lambda r: httpx.Response(200, text="<html>")})
        fetcher = JsonFetcher("agent", 8000, transport=network.transport)

        with pytest.raises(UpstreamUnavailable, match="not JSON"):
            fetcher.get_json("https://example.com/doc.json")

    def test_deadline_covers_whole_body(self, make_network):
        """A body trickling in past the timeout fails even though each chunk is quick."""
        chunks = [b'{"ok":', b" true", b"}", b" ", b" "]
        network = make_network({
            "example.com": lambda r: httpx.Response(200, stream=TrickleStream(chunks, 0.05)),
        })
        fetcher = JsonFetcher("agent", 8000, transport=network.transport)

        with pytest.raises(UpstreamUnavailable, match="timeout"):
            fetcher.get_json("https://example.com/doc.json", timeout_ms=120)

    def test_streamed_body_within_deadline(self, make_network):
        """A chunked body that completes in time is decoded."""
        chunks = [b'{"ok":', b" true}"]
        network = make_network({
            "example.com": lambda r: httpx.Response(200, stream=TrickleStream(chunks, 0)),
        })
        fetcher = JsonFetcher("agent", 8000, transport=network.transport)

        assert fetcher.get_json("https://example.com/doc.json") == {"ok": True}


class TestTimorHolidaySource:
    """Tests for TimorHolidaySource."""

    def test_fetch_year(self, network):
        """Holidays and 补班 entries are separated."""
        data = timor_source(network).fetch_year(2024)

        assert data.holiday_dates == {"2024-01-01", "2024-02-12"}
        assert data.makeup_dates == {"2024-02-24"}
        assert network.urls == ["https://timor.tech/api/holiday/year/2024"]

    def test_non_holiday_without_marker_is_ignored(self, make_network, timor_document):
        """A working entry whose name lacks the marker is not a makeup day."""
        timor_document["holiday"]["02-25"] = {
            "holiday": False, "name": "调休", "date": "2024-02-25"
        }
        network = make_network({"timor.tech": timor_document})

        data = timor_source(network).fetch_year(2024)

        assert "2024-02-25" not in data.makeup_dates

    def test_malformed_entries_are_skipped(self, make_network, timor_document):
        """Entries without a string date or a boolean flag are skipped."""
        timor_document["holiday"]["02-26"] = {"holiday": "yes", "date": "2024-02-26"}
        timor_document["holiday"]["02-27"] = {"holiday": True, "date": 20240227}
        timor_document["holiday"]["02-28"] = None
        network = make_network({"timor.tech": timor_document})

        data = timor_source(network).fetch_year(2024)

        assert data.holiday_dates == {"2024-01-01", "2024-02-12"}

    def test_holiday_without_string_name(self, make_network, timor_document):
        """The holiday flag alone marks a holiday; the name is not required."""
        timor_document["holiday"]["02-14"] = {"holiday": True, "name": None, "date": "2024-02-14"}
        timor_document["holiday"]["02-15"] = {"holiday": True, "date": "2024-02-15"}
        timor_document["holiday"]["02-17"] = {"holiday": False, "name": 7, "date": "2024-02-17"}
        network = make_network({"timor.tech": timor_document})

        data = timor_source(network).fetch_year(2024)

        assert {"2024-02-14", "2024-02-15"} <= data.holiday_dates
        assert "2024-02-17" not in data.makeup_dates

    @pytest.mark.parametrize(
        "payload",
        [
            {"code": 1, "holiday": {}},
            {"code": 0},
            {"code": 0, "holiday": []},
            {"holiday": {}},
            [],
        ],
    )
    def test_invalid_envelope(self, make_network, payload):
        """A failure code or a missing holiday mapping is rejected."""
        network = make_network({"timor.tech": payload})

        with pytest.raises(InvalidResponseShape, match="provider timor unavailable or invalid response"):
            timor_source(network).fetch_year(2024)

    def test_no_mirror(self, make_network):
        """timor failures are raised after a single request."""
        network = make_network({"timor.tech": unavailable})

        with pytest.raises(UpstreamUnavailable):
            timor_source(network).fetch_year(2024)

        assert len(network.requests) == 1


class TestNateHolidaySource:
    """Tests for NateHolidaySource."""

    def test_fetch_year(self, network):
        """Off days are holidays, working weekend days are makeup days."""
        data = nate_source(network).fetch_year(2024)

        assert data.holiday_dates == {"2024-01-01", "2024-02-10", "2024-02-12", "2024-02-13"}
        assert data.makeup_dates == {"2024-02-04"}
        assert network.urls == [NATE_URL.format(year=2024)]

    def test_working_weekday_is_not_makeup(self, make_network, nate_document):
        """isOffDay false on a weekday is not a makeup day."""
        nate_document["days"].append({"name": "x", "date": "2024-02-05", "isOffDay": False})
        network = make_network({"raw.githubusercontent.com": nate_document})

        data = nate_source(network).fetch_year(2024)

        assert "2024-02-05" not in data.makeup_dates

    def test_day_with_non_string_name(self, make_network, nate_document):
        """Days keep their classification whatever their name holds."""
        nate_document["days"].append({"name": 5, "date": "2024-02-15", "isOffDay": True})
        nate_document["days"].append({"name": None, "date": "2024-02-17", "isOffDay": False})
        network = make_network({"raw.githubusercontent.com": nate_document})

        data = nate_source(network).fetch_year(2024)

        assert "2024-02-15" in data.holiday_dates
        assert "2024-02-17" in data.makeup_dates

    def test_mirror_used_when_primary_fails(self, make_network, nate_document):
        """A failing primary is retried once on the mirror."""
        network = make_network({
            "raw.githubusercontent.com": unavailable,
            "cdn.jsdelivr.net": nate_document,
        })

        data = nate_source(network).fetch_year(2024)

        assert data.makeup_dates == {"2024-02-04"}
        assert network.urls == [NATE_URL.format(year=2024), NATE_MIRROR_URL.format(year=2024)]

    def test_mirror_used_after_timeout(self, make_network, nate_document):
        """A primary timeout also falls back to the mirror."""
        network = make_network({
            "raw.githubusercontent.com": timing_out,
            "cdn.jsdelivr.net": nate_document,
        })

        data = nate_source(network).fetch_year(2024)

        assert "2024-02-12" in data.holiday_dates
        assert len(network.requests) == 2

    def test_both_fail(self, make_network):
        """When the mirror fails too, the mirror's failure is raised."""
        network = make_network({
            "raw.githubusercontent.com": unavailable,
            "cdn.jsdelivr.net": unavailable,
        })

        with pytest.raises(UpstreamUnavailable, match="cdn.jsdelivr.net"):
            nate_source(network).fetch_year(2024)

        assert len(network.requests) == 2

    @pytest.mark.parametrize("payload", [{"year": 2024}, {"days": {}}, {"days": None}])
    def test_invalid_envelope(self, make_network, payload):
        """A missing or mistyped days list is rejected without using the mirror."""
        network = make_network({"raw.githubusercontent.com": payload})

        with pytest.raises(InvalidResponseShape, match="provider nate unavailable or invalid response"):
            nate_source(network).fetch_year(2024)

        assert len(network.requests) == 1


def test_build_sources(config):
    """One source per provider, using the configured URL templates."""
    sources = build_sources(JsonFetcher("agent", 8000), config)

    assert set(sources) == {Provider.TIMOR, Provider.NATE}
    assert sources[Provider.TIMOR].url_template == config.timor_url
    assert sources[Provider.NATE].mirror_url_template == config.nate_mirror_url
