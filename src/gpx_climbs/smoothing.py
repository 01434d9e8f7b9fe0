import math

from gpx_climbs.errors import InvalidInputError
from gpx_climbs.models import ElevationSample


def smooth_elevations(data: list[ElevationSample], window_size: int = 20) -> list[ElevationSample]:
    """Smooth elevation values with a centered moving average.

    For point i, averages elevations over the index range
    [max(0, i - window_size // 2), min(n, i + window_size // 2 + 1)).
    The window narrows at the ends of the profile; there is no padding.
    Distances are copied unchanged, so the output has the input's length
    and positions.

    Returns new ElevationSample instances; the input is not modified.
    """
    n = len(data)
    half = window_size // 2
    if n == 0:
        return []
    if window_size <= 1:
        return [ElevationSample(distance=p.distance, elevation=p.elevation) for p in data]

    # Prefix sums keep each window average O(1)
    prefix = [0.0]
    for p in data:
        prefix.append(prefix[-1] + p.elevation)

    smoothed = []
    for i, p in enumerate(data):
        lo = max(0, i - half)
        hi = min(n, i + half + 1)
        smoothed.append(ElevationSample(distance=p.distance, elevation=(prefix[hi] - prefix[lo]) / (hi - lo)))
    return smoothed


def calculate_gradient(p1: ElevationSample, p2: ElevationSample) -> float:
    """Percent grade from p1 to p2.

    Raises ZeroDivisionError when both points share a distance; callers pass
    strictly increasing distances (see validate_samples).
    """
    return (p2.elevation - p1.elevation) / (p2.distance - p1.distance) * 100


def validate_samples(data: list[ElevationSample]) -> None:
    """Check that samples are finite and strictly increasing in distance.

    Raises:
        InvalidInputError: Naming the first offending index.
    """
    for i, p in enumerate(data):
        if not math.isfinite(p.distance) or not math.isfinite(p.elevation):
            raise InvalidInputError(
                f"Sample {i} has a non-finite value (distance={p.distance}, elevation={p.elevation})"
            )
        if i > 0 and p.distance <= data[i - 1].distance:
            raise InvalidInputError(
                f"Sample {i} distance {p.distance} does not increase past {data[i - 1].distance}"
            )
