from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TrackPoint:
    lat: float
    lon: float
    elevation: float | None  # meters


@dataclass(frozen=True)
class ElevationSample:
    distance: float  # meters from route start
    elevation: float  # meters


# Smoothed points share the sample shape; only the elevation is averaged.
SmoothedPoint = ElevationSample


class ClimbCategory(str, Enum):
    HC = "HC"
    CAT1 = "CAT1"
    CAT2 = "CAT2"
    CAT3 = "CAT3"
    CAT4 = "CAT4"

    @property
    def rank(self) -> int:
        """0 for HC through 4 for CAT4."""
        return list(ClimbCategory).index(self)


@dataclass
class SteepSection:
    start_idx: int  # index into the smoothed profile
    points: list[ElevationSample]
    gradients: list[float]  # percent, one per step between points


@dataclass
class ClimbPoint:
    distance: float  # meters
    elevation: float  # meters
    gradient: float  # percent (the climb's average gradient)


@dataclass
class Climb:
    start_point: ClimbPoint
    end_point: ClimbPoint
    total_distance: float  # meters
    elevation_gain: float  # meters
    average_gradient: float  # percent
    fiets_score: float
    category: ClimbCategory
    color: str  # hex with alpha suffix

    @property
    def label(self) -> str:
        return f"{self.total_distance / 1000:.1f}km @ {self.average_gradient:.1f}%"

    def to_dict(self) -> dict:
        """Serialize using the camelCase keys expected by chart/overlay consumers."""
        return {
            "startPoint": {
                "distance": self.start_point.distance,
                "elevation": self.start_point.elevation,
                "gradient": self.start_point.gradient,
            },
            "endPoint": {
                "distance": self.end_point.distance,
                "elevation": self.end_point.elevation,
                "gradient": self.end_point.gradient,
            },
            "totalDistance": self.total_distance,
            "elevationGain": self.elevation_gain,
            "averageGradient": self.average_gradient,
            "fietsScore": self.fiets_score,
            "category": self.category.value,
            "color": self.color,
        }


@dataclass
class ProfileStats:
    total_distance: float  # meters
    elevation_gained: float  # meters
    elevation_lost: float  # meters


@dataclass
class GradientPoint:
    distance: float
    elevation: float
    gradient: float  # percent, toward the next point
    color: str


@dataclass
class GradientBand:
    start_index: int
    end_index: int  # inclusive
    color: str
    gradient: float  # gradient at start_index


@dataclass
class CategorizedPoint:
    distance: float
    elevation: float
    climb_category: int  # ClimbCategory.rank, or -1 outside any climb
    climb_color: str
