"""Unit tests for response conversion and series naming."""

from typing import Any

import pytest

from cmsource.core.convert import UNKNOWN_NAME, flatten_response, make_timeseries_name
from cmsource.core.models import HttpResponse, OutputSeries


def _time_series(metric: str | None, entity: str | None, points: list[tuple[float, str]]) -> dict[str, Any]:
    metadata: dict[str, Any] = {"unitNumerators": ["percent"]}
    if metric is not None:
        metadata["metricName"] = metric
    if entity is not None:
        metadata["entityName"] = entity
    return {
        "metadata": metadata,
        "data": [{"value": v, "timestamp": ts, "type": "SAMPLE"} for v, ts in points],
    }


@pytest.fixture
def two_item_body() -> dict[str, Any]:
    """Two items with one time series of two points each."""
    return {
        "items": [
            {
                "timeSeries": [
                    _time_series(
                        "cpu_percent",
                        "host-1",
                        [
                            (45.1234, "2015-10-02T12:58:24.009Z"),
                            (98.7654, "2015-10-02T12:59:24.009Z"),
                        ],
                    )
                ]
            },
            {
                "timeSeries": [
                    _time_series(
                        "cpu_percent",
                        "host-2",
                        [
                            (1.0, "2015-10-02T12:58:24.009Z"),
                            (2.0, "2015-10-02T12:59:24.009Z"),
                        ],
                    )
                ]
            },
        ]
    }


class TestMakeTimeseriesName:
    """Tests for series naming precedence."""

    @pytest.mark.parametrize(
        ("metadata", "expected"),
        [
            ({"metricName": "M", "entityName": "E"}, "M (E)"),
            ({"metricName": "M"}, "M"),
            ({"entityName": "E"}, "E"),
            ({}, UNKNOWN_NAME),
            ({"metricName": "", "entityName": "E"}, "E"),
            ({"metricName": "M", "entityName": ""}, "M"),
            ({"metricName": None, "entityName": None}, UNKNOWN_NAME),
            ({"other": "ignored"}, UNKNOWN_NAME),
            (None, UNKNOWN_NAME),
        ],
    )
    def test_naming_precedence(self, metadata: dict[str, Any] | None, expected: str) -> None:
        assert make_timeseries_name(metadata) == expected

    def test_unknown_name_literal(self) -> None:
        assert UNKNOWN_NAME == "UNKNOWN NAME"


class TestFlattenResponse:
    """Tests for flattening CM payloads into output series."""

    @pytest.mark.parametrize(
        "response",
        [
            None,
            {},
            {"data": {}},
            {"data": None},
            {"data": {"items": None}},
            {"data": "not json"},
            HttpResponse(status=200, data=None),
            HttpResponse(status=200, data="<html>oops</html>"),
            HttpResponse(status=200, data={"items": {"timeSeries": []}}),
        ],
    )
    def test_absent_or_malformed_is_empty(self, response: Any) -> None:
        """Missing bodies give zero series, not an error."""
        assert flatten_response(response) == []

    def test_two_items_in_document_order(self, two_item_body: dict[str, Any]) -> None:
        series = flatten_response(HttpResponse(status=200, data=two_item_body))

        assert series == [
            OutputSeries(
                target="cpu_percent (host-1)",
                datapoints=((45.1234, 1443790704009), (98.7654, 1443790764009)),
            ),
            OutputSeries(
                target="cpu_percent (host-2)",
                datapoints=((1.0, 1443790704009), (2.0, 1443790764009)),
            ),
        ]

    def test_accepts_mapping_with_data_key(self, two_item_body: dict[str, Any]) -> None:
        assert len(flatten_response({"data": two_item_body})) == 2

    def test_series_count_matches_time_series_count(self) -> None:
        """One output series per time series, even without points."""
        body = {
            "items": [
                {"timeSeries": [_time_series("a", None, []), _time_series(None, "b", [])]},
                {"timeSeries": []},
                {"timeSeries": [{"metadata": {"metricName": "c"}}]},
                {"noSeries": True},
            ]
        }
        series = flatten_response(HttpResponse(status=200, data=body))

        assert [s.target for s in series] == ["a", "b", "c"]
        assert all(s.datapoints == () for s in series)

    def test_point_order_preserved(self) -> None:
        """Datapoints are not sorted, even when timestamps go backwards."""
        body = {
            "items": [
                {
                    "timeSeries": [
                        _time_series(
                            "m",
                            None,
                            [
                                (2.0, "2015-10-02T12:59:24.009Z"),
                                (1.0, "2015-10-02T12:58:24.009Z"),
                            ],
                        )
                    ]
                }
            ]
        }
        (series,) = flatten_response(HttpResponse(status=200, data=body))

        assert [v for v, _ in series.datapoints] == [2.0, 1.0]

    def test_bad_timestamp_skips_point(self, caplog: pytest.LogCaptureFixture) -> None:
        body = {
            "items": [
                {
                    "timeSeries": [
                        _time_series(
                            "m",
                            "e",
                            [(1.0, "not a timestamp"), (2.0, "2015-10-02T12:58:24.009Z")],
                        )
                    ]
                }
            ]
        }
        (series,) = flatten_response(HttpResponse(status=200, data=body))

        assert series.datapoints == ((2.0, 1443790704009),)
        assert "bad timestamp" in caplog.text

    def test_malformed_point_skipped(self) -> None:
        body = {
            "items": [
                {
                    "timeSeries": [
                        {
                            "metadata": {"metricName": "m"},
                            "data": [{"value": 1.0}, "junk", {"value": 3.0, "timestamp": "2015-10-02T12:58:24.009Z"}],
                        }
                    ]
                }
            ]
        }
        (series,) = flatten_response(HttpResponse(status=200, data=body))

        assert series.datapoints == ((3.0, 1443790704009),)

    def test_relative_timestamp(self) -> None:
        body = {
            "items": [
                {"timeSeries": [_time_series("m", None, [(5.0, "2015-10-02T12:58:24.009Z||+1m")])]}
            ]
        }
        (series,) = flatten_response(HttpResponse(status=200, data=body))

        assert series.datapoints == ((5.0, 1443790764009),)

    def test_to_dict_shape(self, two_item_body: dict[str, Any]) -> None:
        series = flatten_response(HttpResponse(status=200, data=two_item_body))

        assert series[0].to_dict() == {
            "target": "cpu_percent (host-1)",
            "datapoints": [[45.1234, 1443790704009], [98.7654, 1443790764009]],
        }
