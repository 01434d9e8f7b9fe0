import pytest

from gpx_climbs.models import ElevationSample, GradientPoint, TrackPoint
from gpx_climbs.profile import (
    FLAT_COLOR,
    build_profile,
    calculate_gradient_points,
    gradient_color,
    group_gradient_bands,
    profile_stats,
)


def _make_samples(elevations, spacing_m=100.0):
    return [ElevationSample(distance=i * spacing_m, elevation=e) for i, e in enumerate(elevations)]


class TestBuildProfile:
    def test_cumulative_distance(self):
        points = [TrackPoint(lat=45.0 + i * 0.001, lon=6.0, elevation=100.0 + i) for i in range(5)]
        samples = build_profile(points)

        assert len(samples) == 5
        assert samples[0].distance == 0.0
        assert samples[1].distance == pytest.approx(111.1, rel=0.01)
        assert samples[4].distance == pytest.approx(4 * 111.1, rel=0.01)
        assert [s.elevation for s in samples] == [100.0, 101.0, 102.0, 103.0, 104.0]

    def test_skips_missing_elevation_but_keeps_distance(self):
        points = [
            TrackPoint(lat=45.0, lon=6.0, elevation=100.0),
            TrackPoint(lat=45.001, lon=6.0, elevation=None),
            TrackPoint(lat=45.002, lon=6.0, elevation=102.0),
        ]
        samples = build_profile(points)

        assert len(samples) == 2
        assert samples[1].distance == pytest.approx(2 * 111.1, rel=0.01)

    def test_drops_zero_distance_duplicates(self):
        points = [
            TrackPoint(lat=45.0, lon=6.0, elevation=100.0),
            TrackPoint(lat=45.0, lon=6.0, elevation=101.0),
            TrackPoint(lat=45.001, lon=6.0, elevation=102.0),
        ]
        samples = build_profile(points)

        assert [s.elevation for s in samples] == [100.0, 102.0]
        assert samples[1].distance > samples[0].distance

    def test_empty(self):
        assert build_profile([]) == []


class TestProfileStats:
    def test_gain_and_loss(self):
        stats = profile_stats(_make_samples([100.0, 110.0, 105.0, 120.0]))
        assert stats.total_distance == 300.0
        assert stats.elevation_gained == pytest.approx(25.0)
        assert stats.elevation_lost == pytest.approx(5.0)

    def test_empty(self):
        stats = profile_stats([])
        assert stats.total_distance == 0.0
        assert stats.elevation_gained == 0.0


class TestGradientColor:
    @pytest.mark.parametrize("gradient,expected", [
        (15.0, '#b33939'),
        (10.0, '#b33939'),
        (9.99, '#ff7979'),
        (6.0, '#ff7979'),
        (3.0, '#ffbe76'),
        (1.0, '#eccc68'),
        (0.99, FLAT_COLOR),
        (-8.0, FLAT_COLOR),
    ])
    def test_classes(self, gradient, expected):
        assert gradient_color(gradient) == expected


class TestGradientPoints:
    def test_gradients_toward_next_point(self):
        points = calculate_gradient_points(_make_samples([100.0, 105.0, 105.0, 95.0]))

        assert [p.gradient for p in points] == pytest.approx([5.0, 0.0, -10.0, -10.0])
        assert points[0].color == '#ffbe76'
        assert points[1].color == FLAT_COLOR

    def test_too_short(self):
        assert calculate_gradient_points(_make_samples([100.0])) == []


class TestGradientBands:
    def test_groups_consecutive_colors(self):
        colors = ['a', 'a', 'b', 'b', 'b', 'a']
        points = [GradientPoint(distance=i * 100.0, elevation=0.0, gradient=float(i), color=c)
                  for i, c in enumerate(colors)]
        bands = group_gradient_bands(points)

        assert [(b.start_index, b.end_index, b.color) for b in bands] == [(0, 1, 'a'), (2, 4, 'b'), (5, 5, 'a')]
        assert bands[1].gradient == 2.0

    def test_empty(self):
        assert group_gradient_bands([]) == []
