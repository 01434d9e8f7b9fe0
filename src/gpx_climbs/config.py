"""Climb detection thresholds and config file loading."""

from dataclasses import dataclass, fields, replace
import json
import logging
from pathlib import Path

from gpx_climbs.errors import ConfigError
from gpx_climbs.models import ClimbCategory

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "gpx-climbs"
CONFIG_PATH = CONFIG_DIR / "gpx-climbs.json"
LOCAL_CONFIG_PATH = Path("gpx-climbs.json")


@dataclass(frozen=True)
class CategoryThreshold:
    category: ClimbCategory
    min_fiets: float
    color: str  # hex with ~60% alpha suffix


DEFAULT_CATEGORIES = (
    CategoryThreshold(ClimbCategory.HC, 8.0, "#8B000099"),    # dark red
    CategoryThreshold(ClimbCategory.CAT1, 6.0, "#FF000099"),  # red
    CategoryThreshold(ClimbCategory.CAT2, 4.5, "#fa823199"),  # orange
    CategoryThreshold(ClimbCategory.CAT3, 3.0, "#f7b73199"),  # yellow
    CategoryThreshold(ClimbCategory.CAT4, 0.0, "#228B2299"),  # forest green, fallback
)


@dataclass(frozen=True)
class ClimbConfig:
    min_gradient: float = 2.0  # percent; a step at or above this is "steep"
    min_length: float = 1200.0  # meters; shorter steep runs are discarded
    smoothing_window: int = 20  # samples in the moving-average window
    merge_gap: float = 10000.0  # meters; max gap between sections to attempt a merge
    min_downhill_gradient: float = -1.0  # percent; a step at or below this is downhill
    min_downhill_length: float = 600.0  # meters; downhill run that blocks a merge
    lookahead_distance: float = 5000.0  # meters searched past a climb top for a higher point
    final_min_gradient: float = 1.5  # percent; climbs below this are dropped
    remove_overlaps: bool = False
    categories: tuple[CategoryThreshold, ...] = DEFAULT_CATEGORIES

    def __post_init__(self):
        if self.smoothing_window < 1:
            raise ConfigError(f"smoothing_window must be >= 1, got {self.smoothing_window}")
        for name in ("min_length", "merge_gap", "lookahead_distance"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.min_downhill_length <= 0:
            raise ConfigError(f"min_downhill_length must be > 0, got {self.min_downhill_length}")
        if not self.categories:
            raise ConfigError("At least one category threshold is required")
        # Category matching walks thresholds hardest-first
        object.__setattr__(self, "categories", tuple(sorted(self.categories, key=lambda t: t.min_fiets, reverse=True)))

    @classmethod
    def from_dict(cls, values: dict, base: "ClimbConfig | None" = None) -> "ClimbConfig":
        """Build a config from a dict of field values, ignoring unknown keys.

        Values override ``base`` (the defaults when omitted).

        Raises:
            ConfigError: If a value has the wrong type.
        """
        base = base if base is not None else cls()
        overrides = {}
        for f in fields(cls):
            if f.name not in values:
                continue
            value = values[f.name]
            if f.name == "categories":
                overrides[f.name] = _parse_categories(value)
            elif f.name == "remove_overlaps":
                if not isinstance(value, bool):
                    raise ConfigError(f"remove_overlaps must be true or false, got {value!r}")
                overrides[f.name] = value
            elif f.name == "smoothing_window":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError(f"smoothing_window must be an integer, got {value!r}")
                overrides[f.name] = value
            else:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigError(f"{f.name} must be a number, got {value!r}")
                overrides[f.name] = float(value)
        return replace(base, **overrides)


DEFAULT_CONFIG = ClimbConfig()


def _parse_categories(value) -> tuple[CategoryThreshold, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"categories must be a list, got {value!r}")
    thresholds = []
    for entry in value:
        try:
            thresholds.append(CategoryThreshold(
                category=ClimbCategory(entry["category"]),
                min_fiets=float(entry["min_fiets"]),
                color=str(entry["color"]),
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid category entry {entry!r}: {e}") from e
    return tuple(thresholds)


def load_config() -> dict:
    """Load configuration from config files.

    Merges config from global and local files:
    1. ~/.config/gpx-climbs/gpx-climbs.json (global, loaded first)
    2. ./gpx-climbs.json (local, overrides global)

    Returns:
        Dict with merged config values, empty dict if no files exist.
    """
    config = {}
    for config_path in [CONFIG_PATH, LOCAL_CONFIG_PATH]:
        if config_path.exists():
            try:
                with config_path.open() as f:
                    config.update(json.load(f))
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Skipping unreadable config file %s: %s", config_path, e)
                continue
    return config
