"""Elevation profile construction, summary stats and gradient bands."""

import logging

from geopy.distance import geodesic

from gpx_climbs.models import (
    ElevationSample,
    GradientBand,
    GradientPoint,
    ProfileStats,
    TrackPoint,
)

logger = logging.getLogger(__name__)

# Gradient color classes, steepest first (minimum gradient %, color)
GRADIENT_COLORS = [
    (10.0, '#b33939'),  # steep
    (6.0, '#ff7979'),   # hard
    (3.0, '#ffbe76'),   # moderate
    (1.0, '#eccc68'),   # easy
]
FLAT_COLOR = '#99cc99'  # below 1%, including downhill


def build_profile(points: list[TrackPoint]) -> list[ElevationSample]:
    """Convert track points into distance/elevation samples.

    Distance is the cumulative geodesic distance along the track, including
    points that lack elevation. Points without elevation are skipped, as are
    points that add no distance since the previous sample, so the returned
    distances are strictly increasing.
    """
    samples: list[ElevationSample] = []
    cum_dist = 0.0
    skipped = 0
    for i, pt in enumerate(points):
        if i > 0:
            prev = points[i - 1]
            cum_dist += geodesic((prev.lat, prev.lon), (pt.lat, pt.lon)).meters
        if pt.elevation is None:
            skipped += 1
            continue
        if samples and cum_dist <= samples[-1].distance:
            skipped += 1
            continue
        samples.append(ElevationSample(distance=cum_dist, elevation=pt.elevation))

    if skipped:
        logger.debug("Skipped %d of %d track points (no elevation or no distance)", skipped, len(points))
    return samples


def profile_stats(samples: list[ElevationSample]) -> ProfileStats:
    """Total distance and summed elevation gained/lost between consecutive samples."""
    gained = 0.0
    lost = 0.0
    for i in range(1, len(samples)):
        delta = samples[i].elevation - samples[i - 1].elevation
        if delta > 0:
            gained += delta
        else:
            lost += abs(delta)
    total_distance = samples[-1].distance - samples[0].distance if samples else 0.0
    return ProfileStats(total_distance=total_distance, elevation_gained=gained, elevation_lost=lost)


def gradient_color(gradient: float) -> str:
    """Map a gradient percentage to its display color."""
    for min_gradient, color in GRADIENT_COLORS:
        if gradient >= min_gradient:
            return color
    return FLAT_COLOR


def calculate_gradient_points(samples: list[ElevationSample]) -> list[GradientPoint]:
    """Attach the gradient toward the next sample, and its color, to each sample.

    The last sample repeats the previous gradient. Zero-length steps get 0%.
    """
    if len(samples) < 2:
        return []

    result: list[GradientPoint] = []
    for i, s in enumerate(samples):
        if i < len(samples) - 1:
            nxt = samples[i + 1]
            dist = nxt.distance - s.distance
            gradient = (nxt.elevation - s.elevation) / dist * 100 if dist > 0 else 0.0
        else:
            gradient = result[-1].gradient
        result.append(GradientPoint(
            distance=s.distance,
            elevation=s.elevation,
            gradient=gradient,
            color=gradient_color(gradient),
        ))
    return result


def group_gradient_bands(points: list[GradientPoint]) -> list[GradientBand]:
    """Group consecutive points sharing a gradient color into bands."""
    if not points:
        return []

    bands = []
    start = 0
    for i in range(1, len(points)):
        if points[i].color != points[start].color:
            bands.append(GradientBand(start, i - 1, points[start].color, points[start].gradient))
            start = i
    bands.append(GradientBand(start, len(points) - 1, points[start].color, points[start].gradient))
    return bands
