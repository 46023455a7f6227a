"""
Tests for encoded polyline decoding.
"""

import pytest

from app.shared.polyline import decode_polyline


def assert_points(points, expected):
    assert len(points) == len(expected)
    for point, (lat, lng) in zip(points, expected):
        assert point[0] == pytest.approx(lat)
        assert point[1] == pytest.approx(lng)


class TestDecodePolyline:

    def test_reference_example(self):
        points = decode_polyline("_p~iF~ps|U_ulLnnqC_mqNvxq`@")

        assert_points(points, [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)])

    @pytest.mark.parametrize("encoded", [None, ""])
    def test_empty(self, encoded):
        assert decode_polyline(encoded) == []

    def test_single_point(self):
        assert decode_polyline("??") == [[0.0, 0.0]]

    def test_truncated(self):
        with pytest.raises(ValueError):
            decode_polyline("_p~iF~ps|U_ulL")

    def test_precision(self):
        points = decode_polyline("_p~iF~ps|U", precision=6)

        assert_points(points, [(3.85, -12.02)])
