"""Tests for the source adapters."""

import asyncio

from feeds import build_adapters
from feeds.news import NewsFeedAdapter, parse_feed_list
from feeds.news.rss import clean_summary
from feeds.noaa import (
    DstIndexAdapter,
    KpIndexAdapter,
    SolarFlareAdapter,
    SolarWindAdapter,
    XrayFluxAdapter,
)
from feeds.noaa.flares import split_flare_class
from swx.config import NewsFeed

from tests.fakes import RSS_SAMPLE, FakeFetcher

URL = "https://example.test/feed.json"
FALLBACK = "https://example.test/fallback.json"


def run(adapter):
    return asyncio.run(adapter.fetch_and_normalize())


class TestKpIndexAdapter:
    def test_object_shape(self):
        payload = [
            {"time_tag": "2025-08-12T00:00:00", "kp": "3.33", "estimated_kp": "3.67"},
            {"time_tag": "2025-08-12T03:00:00", "kp": 4.0, "estimated_kp": 4.33},
        ]
        result = run(KpIndexAdapter(FakeFetcher({URL: payload}), URL))
        assert not result.degraded
        assert [r.kp_value for r in result.value] == [3.33, 4.0]
        assert result.value[0].estimated_kp == 3.67

    def test_array_shape_with_header(self):
        payload = [
            ["time_tag", "Kp", "a_running", "station_count"],
            ["2025-08-12 00:00:00.000", "2.67", "12", "8"],
        ]
        result = run(KpIndexAdapter(FakeFetcher({URL: payload}), URL))
        reading = result.value[0]
        assert reading.timestamp == "2025-08-12 00:00:00.000"
        assert reading.kp_value == 2.67
        # a_running is not an estimate; fall back to the observed value
        assert reading.estimated_kp == 2.67

    def test_positional_array_shape(self):
        payload = [["t1", 5.0, 5.33, "0"], ["t2", 6.3]]
        result = run(KpIndexAdapter(FakeFetcher({URL: payload}), URL))
        assert result.value[0].estimated_kp == 5.33
        assert result.value[-1].kp_value == 6.3

    def test_keeps_last_window(self):
        payload = [{"time_tag": f"t{i}", "kp": i % 9} for i in range(40)]
        result = run(KpIndexAdapter(FakeFetcher({URL: payload}), URL, window=24))
        assert len(result.value) == 24
        assert result.value[0].timestamp == "t16"

    def test_unparsable_values_default_to_zero(self):
        payload = [{"time_tag": "t", "kp": "--", "estimated_kp": None}]
        result = run(KpIndexAdapter(FakeFetcher({URL: payload}), URL))
        assert result.value[0].kp_value == 0.0

    def test_fetch_failure_degrades(self):
        result = run(KpIndexAdapter(FakeFetcher({}), URL))
        assert result.degraded
        assert result.value == []
        assert "404" in result.error

    def test_non_json_degrades(self):
        result = run(KpIndexAdapter(FakeFetcher({URL: b"<html>oops</html>"}), URL))
        assert result.degraded
        assert result.value == []

    def test_error_object_degrades(self):
        result = run(KpIndexAdapter(FakeFetcher({URL: {"error": "rate limited"}}), URL))
        assert result.degraded
        assert result.value == []
        assert "kp" in result.error

    def test_drops_rows_without_kp(self):
        payload = [{"time_tag": "t1", "note": "maintenance"}, {"time_tag": "t2", "kp": 3.0}]
        result = run(KpIndexAdapter(FakeFetcher({URL: payload}), URL))
        assert not result.degraded
        assert [r.timestamp for r in result.value] == ["t2"]


class TestSolarWindAdapter:
    def test_array_of_arrays(self):
        payload = [
            ["time_tag", "density", "speed", "temperature"],
            ["2025-08-12 06:00:00.000", "3.2", "480.1", "95000"],
            ["2025-08-12 06:01:00.000", "4.5", "512.9", "101000"],
        ]
        reading = run(SolarWindAdapter(FakeFetcher({URL: payload}), URL)).value
        assert reading.timestamp == "2025-08-12 06:01:00.000"
        assert (reading.density, reading.speed_km_s, reading.temperature_k) == (4.5, 512.9, 101000.0)

    def test_array_of_objects(self):
        payload = [{"time_tag": "t", "density": 1.5, "speed": "390", "temperature": None}]
        reading = run(SolarWindAdapter(FakeFetcher({URL: payload}), URL)).value
        assert reading.speed_km_s == 390.0
        assert reading.temperature_k == 0.0

    def test_empty_feed_degrades_to_none(self):
        result = run(SolarWindAdapter(FakeFetcher({URL: []}), URL))
        assert result.degraded
        assert result.value is None


class TestXrayFluxAdapter:
    def test_prefers_long_channel(self):
        payload = [
            {"time_tag": "t1", "flux": 2.1e-7, "energy": "0.1-0.8nm"},
            {"time_tag": "t1", "flux": 5.0e-8, "energy": "0.05-0.4nm"},
        ]
        reading = run(XrayFluxAdapter(FakeFetcher({URL: payload}), URL)).value
        assert reading.flux_watts_per_m2 == 2.1e-7
        assert reading.energy_band == "0.1-0.8nm"

    def test_without_energy_uses_latest(self):
        payload = [{"time_tag": "t1", "flux": 1e-8}, {"time_tag": "t2", "flux": 3e-8}]
        reading = run(XrayFluxAdapter(FakeFetcher({URL: payload}), URL)).value
        assert reading.timestamp == "t2"


class TestDstIndexAdapter:
    def test_array_of_arrays(self):
        payload = [["time_tag", "dst"], ["2025-08-12 05:00:00", "-12"], ["2025-08-12 06:00:00", "-55"]]
        reading = run(DstIndexAdapter(FakeFetcher({URL: payload}), URL)).value
        assert reading.dst_nanotesla == -55.0

    def test_error_object_degrades(self):
        result = run(DstIndexAdapter(FakeFetcher({URL: {"status": 503, "message": "unavailable"}}), URL))
        assert result.degraded
        assert result.value is None

    def test_object_rows(self):
        payload = [{"time_tag": "2025-08-12 06:00:00", "dst": -101}]
        assert run(DstIndexAdapter(FakeFetcher({URL: payload}), URL)).value.dst_nanotesla == -101.0


class TestSolarFlareAdapter:
    GOES = [
        {"begin_time": "b1", "max_time": "p1", "end_time": "e1", "max_class": "C3.2"},
        {"begin_time": "b2", "max_time": "p2", "end_time": "e2", "max_class": "M1.5"},
    ]
    DONKI = [{"beginTime": "b3", "peakTime": "p3", "endTime": None, "classType": "X2.1"}]

    def test_split_flare_class(self):
        assert split_flare_class("M1.5") == ("M", 1.5)
        assert split_flare_class("x10") == ("X", 10.0)
        assert split_flare_class("") == ("", 0.0)
        assert split_flare_class("unknown") == ("", 0.0)

    def test_goes_shape(self):
        fetcher = FakeFetcher({URL: self.GOES})
        flares = run(SolarFlareAdapter(fetcher, URL, fallback_url=FALLBACK)).value
        assert [f.class_letter for f in flares] == ["C", "M"]
        assert flares[1].peak_time == "p2"
        assert fetcher.calls == [URL]

    def test_empty_primary_uses_fallback_once(self):
        fetcher = FakeFetcher({URL: [], FALLBACK: self.DONKI})
        flares = run(SolarFlareAdapter(fetcher, URL, fallback_url=FALLBACK)).value
        assert flares[0].class_type == "X2.1"
        assert flares[0].end_time == ""
        assert fetcher.calls == [URL, FALLBACK]

    def test_failed_primary_uses_fallback(self):
        fetcher = FakeFetcher({FALLBACK: self.DONKI})
        result = run(SolarFlareAdapter(fetcher, URL, fallback_url=FALLBACK))
        assert not result.degraded
        assert len(result.value) == 1

    def test_both_failing_degrades(self):
        fetcher = FakeFetcher({})
        result = run(SolarFlareAdapter(fetcher, URL, fallback_url=FALLBACK))
        assert result.degraded
        assert result.value == []
        assert fetcher.calls == [URL, FALLBACK]

    def test_unknown_primary_schema_uses_fallback(self):
        fetcher = FakeFetcher({URL: {"error": "rate limited"}, FALLBACK: self.DONKI})
        result = run(SolarFlareAdapter(fetcher, URL, fallback_url=FALLBACK))
        assert not result.degraded
        assert [f.class_type for f in result.value] == ["X2.1"]
        assert fetcher.calls == [URL, FALLBACK]

    def test_unknown_schema_without_fallback_degrades(self):
        result = run(SolarFlareAdapter(FakeFetcher({URL: [{"message": "no data"}]}), URL))
        assert result.degraded
        assert result.value == []

    def test_keeps_last_window(self):
        payload = [{"max_class": f"C{i}.0"} for i in range(1, 16)]
        flares = run(SolarFlareAdapter(FakeFetcher({URL: payload}), URL, window=10)).value
        assert len(flares) == 10
        assert flares[0].class_magnitude == 6.0


class TestNewsFeedAdapter:
    NASA = NewsFeed(name="NASA", url="https://nasa.test/rss")
    ESA = NewsFeed(name="ESA", url="https://esa.test/rss")

    def test_parse_feed_list_skips_channel_echo(self):
        entries = parse_feed_list(RSS_SAMPLE)
        assert [e.title for e in entries] == [
            "Solar Orbiter Spots Giant Prominence",
            "Parker Probe Completes Perihelion",
        ]
        assert entries[0].published_at.isoformat() == "2025-08-11T14:00:00+00:00"
        assert entries[1].published_at is None

    def test_clean_summary(self):
        assert clean_summary("<p>Hello <b>Sun</b></p>") == "Hello Sun..."
        assert clean_summary("") == ""
        assert len(clean_summary("x" * 400)) == 153

    def test_items(self):
        fetcher = FakeFetcher({self.NASA.url: RSS_SAMPLE})
        items = run(NewsFeedAdapter(fetcher, [self.NASA])).value
        assert len(items) == 2
        assert items[0].source == "NASA"
        assert items[0].summary == "The spacecraft captured an eruption on the Sun...."
        assert items[1].date == ""

    def test_one_failing_feed_does_not_degrade_others(self):
        fetcher = FakeFetcher({self.NASA.url: RSS_SAMPLE})
        result = run(NewsFeedAdapter(fetcher, [self.ESA, self.NASA]))
        assert not result.degraded
        assert {i.source for i in result.value} == {"NASA"}

    def test_all_failing_degrades(self):
        result = run(NewsFeedAdapter(FakeFetcher({}), [self.NASA, self.ESA]))
        assert result.degraded
        assert result.value == []
        assert self.NASA.url in result.error

    def test_feeds_with_the_same_name_are_kept_apart(self):
        mirror = NewsFeed(name="NASA", url="https://mirror.test/rss")
        fetcher = FakeFetcher({self.NASA.url: RSS_SAMPLE, mirror.url: RSS_SAMPLE})
        items = run(NewsFeedAdapter(fetcher, [self.NASA, mirror])).value
        assert len(items) == 4
        assert sorted(fetcher.calls) == sorted([self.NASA.url, mirror.url])


def test_build_adapters_covers_every_feed(config):
    adapters = build_adapters(config, FakeFetcher({}))
    assert [a.name for a in adapters] == [
        "kp_index", "solar_wind", "solar_flares", "xray_flux", "dst_index", "news",
    ]
    assert all(a.timeout == config.timeout_s for a in adapters)
