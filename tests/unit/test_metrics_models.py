from telemetry_client.core.serialization import to_json
from telemetry_client.models import MetricPoint, MetricSeries, MetricType


def test_point_serializes_as_pair():
    assert to_json(MetricPoint(1234, 12.34)) == "[1234,12.34]"


def test_point_value_is_always_float():
    point = MetricPoint(1234, 12)
    assert point.to_payload() == [1234, 12.0]
    assert to_json(point) == "[1234,12.0]"


def test_series_serialization():
    series = (
        MetricSeries("metric", MetricType.COUNT)
        .add_point(MetricPoint(1234, 1.234))
        .add_tag("tag")
        .set_host("host")
    )
    assert to_json(series) == (
        '{"host":"host","metric":"metric","points":[[1234,1.234]],"tags":["tag"],"type":"count"}'
    )


def test_series_empty_tags_are_kept():
    payload = MetricSeries("metric", MetricType.GAUGE).to_payload()
    assert payload["tags"] == []
    assert "host" not in payload
    assert "interval" not in payload
    assert to_json(payload) == '{"metric":"metric","points":[],"tags":[],"type":"gauge"}'


def test_series_interval():
    payload = MetricSeries("requests", MetricType.RATE).set_interval(10).to_payload()
    assert payload["interval"] == 10
    assert payload["type"] == "rate"


def test_metric_type_values():
    assert [t.value for t in MetricType] == ["count", "gauge", "rate"]


def test_incremental_build_matches_direct_construction():
    incremental = (
        MetricSeries("cpu.usage", MetricType.GAUGE)
        .set_host("raspberrypi")
        .set_interval(42)
        .set_points([])
        .add_point(MetricPoint(123456, 12.34))
        .set_tags([])
        .add_tag("whatever:tag")
    )
    direct = MetricSeries(
        metric="cpu.usage",
        type=MetricType.GAUGE,
        points=[MetricPoint(123456, 12.34)],
        tags=["whatever:tag"],
        host="raspberrypi",
        interval=42,
    )
    assert incremental == direct
    assert to_json(incremental) == to_json(direct)


def test_set_points_copies_input():
    points = [MetricPoint(1, 1.0)]
    series = MetricSeries("m", MetricType.GAUGE).set_points(points)
    series.add_point(MetricPoint(2, 2.0))
    assert len(points) == 1


def test_non_finite_values_are_sent_as_null():
    series = (
        MetricSeries("m", MetricType.GAUGE)
        .add_point(MetricPoint(1, float("nan")))
        .add_point(MetricPoint(2, float("inf")))
        .add_point(MetricPoint(3, float("-inf")))
    )
    assert to_json(series) == '{"metric":"m","points":[[1,null],[2,null],[3,null]],"tags":[],"type":"gauge"}'
