import pytest

from gpx_climbs.config import ClimbConfig
from gpx_climbs.models import ElevationSample


@pytest.fixture
def unsmoothed_config():
    """Default thresholds with smoothing disabled, so stage outputs are exact."""
    return ClimbConfig(smoothing_window=1)


@pytest.fixture
def flat_samples():
    """Constant 100m elevation over 5000m at 100m spacing."""
    return [ElevationSample(distance=i * 100.0, elevation=100.0) for i in range(51)]


@pytest.fixture
def single_climb_samples():
    """1000m flat, a 2000m climb gaining 100m (5%), then 2000m flat at the top."""
    elevations = [100.0] * 11 + [100.0 + 5 * i for i in range(1, 21)] + [200.0] * 20
    return [ElevationSample(distance=i * 100.0, elevation=e) for i, e in enumerate(elevations)]
