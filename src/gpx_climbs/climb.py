"""Climb detection and categorization for route elevation profiles.

Detects significant climbs in a distance/elevation profile:

1. Smooth elevations with a centered moving average
2. Scan for steep sections (every step at or above the minimum gradient),
   keeping only sections at least the minimum length
3. Merge neighbouring sections unless a sustained downhill separates them
4. Extend each climb to a higher point found shortly past its top
5. Score each climb with the FIETS formula and assign a category
6. Drop climbs whose average gradient is below the final floor
"""

from bisect import bisect_left
from functools import cmp_to_key
import logging

from gpx_climbs.config import DEFAULT_CONFIG, CategoryThreshold, ClimbConfig
from gpx_climbs.models import (
    CategorizedPoint,
    Climb,
    ClimbPoint,
    ElevationSample,
    SteepSection,
)
from gpx_climbs.smoothing import calculate_gradient, smooth_elevations, validate_samples

logger = logging.getLogger(__name__)


def fiets_score(elevation_gain: float, distance_km: float) -> float:
    """FIETS climb difficulty: (dh/1000) * (dh / (distance_km * 10))^2."""
    return (elevation_gain / 1000) * (elevation_gain / (distance_km * 10)) ** 2


def categorize(score: float, config: ClimbConfig = DEFAULT_CONFIG) -> CategoryThreshold:
    """Return the hardest category whose minimum FIETS score is reached.

    The last configured category is the fallback for scores below every threshold.
    """
    for threshold in config.categories:
        if score >= threshold.min_fiets:
            return threshold
    return config.categories[-1]


def scan_steep_sections(smoothed: list[ElevationSample], config: ClimbConfig = DEFAULT_CONFIG) -> list[SteepSection]:
    """Find runs of consecutive steps whose gradient meets config.min_gradient.

    A run opens at the first steep step and closes at the first step below the
    threshold. Closed runs spanning less than config.min_length are dropped.
    """
    sections = []
    current: SteepSection | None = None

    def close(last_idx: int) -> None:
        span = smoothed[last_idx].distance - smoothed[current.start_idx].distance
        if span >= config.min_length:
            sections.append(current)

    for i in range(1, len(smoothed)):
        gradient = calculate_gradient(smoothed[i - 1], smoothed[i])
        if gradient >= config.min_gradient:
            if current is None:
                current = SteepSection(
                    start_idx=i - 1,
                    points=[smoothed[i - 1], smoothed[i]],
                    gradients=[gradient],
                )
            else:
                current.points.append(smoothed[i])
                current.gradients.append(gradient)
        elif current is not None:
            close(i - 1)
            current = None

    if current is not None:
        close(len(smoothed) - 1)

    return sections


def _has_significant_downhill(points: list[ElevationSample], config: ClimbConfig) -> bool:
    """Check for a continuous downhill run of at least config.min_downhill_length."""
    downhill_length = 0.0
    for j in range(1, len(points)):
        if calculate_gradient(points[j - 1], points[j]) <= config.min_downhill_gradient:
            downhill_length += points[j].distance - points[j - 1].distance
            if downhill_length >= config.min_downhill_length:
                return True
        else:
            downhill_length = 0.0
    return False


def merge_sections(
    sections: list[SteepSection],
    smoothed: list[ElevationSample],
    config: ClimbConfig = DEFAULT_CONFIG,
) -> list[SteepSection]:
    """Merge steep sections that belong to the same climb.

    A section joins the previous (possibly already merged) one when the gap
    between them is at most config.merge_gap and the points in between
    contain no significant downhill. Merged sections include the in-between
    points. Input sections are left unchanged.
    """
    distances = [p.distance for p in smoothed]
    merged: list[SteepSection] = []

    for section in sections:
        if not merged:
            merged.append(section)
            continue

        prev = merged[-1]
        last_prev = prev.points[-1]
        first_current = section.points[0]
        gap = first_current.distance - last_prev.distance

        if gap <= config.merge_gap:
            between_start = bisect_left(distances, last_prev.distance)
            between_end = bisect_left(distances, first_current.distance)
            if between_start < between_end:
                between = smoothed[between_start:between_end + 1]
                if not _has_significant_downhill(between, config):
                    between_gradients = [
                        calculate_gradient(between[j - 1], between[j]) for j in range(1, len(between))
                    ]
                    merged[-1] = SteepSection(
                        start_idx=prev.start_idx,
                        points=prev.points + between[1:] + section.points[1:],
                        gradients=prev.gradients + between_gradients + section.gradients,
                    )
                    logger.debug(
                        "Merged steep section at %.0fm into section starting at %.0fm (gap %.0fm)",
                        first_current.distance, prev.points[0].distance, gap,
                    )
                    continue
                logger.debug("Skipped merge at %.0fm due to significant downhill", first_current.distance)

        merged.append(section)

    return merged


def _index_at_or_after(distances: list[float], distance: float) -> int:
    """First index with distance >= target, or the last index if none."""
    return min(bisect_left(distances, distance), len(distances) - 1)


def finalize_climbs(
    merged: list[SteepSection],
    smoothed: list[ElevationSample],
    original: list[ElevationSample],
    config: ClimbConfig = DEFAULT_CONFIG,
) -> list[Climb]:
    """Turn merged sections into scored, categorized climbs.

    Each climb's top is moved to the highest smoothed point within
    config.lookahead_distance past the section end, if that point is higher.
    Gain, distance and gradient come from the smoothed profile; the reported
    start and end points are looked up in the original samples so they show
    true elevations. Both endpoint gradients carry the climb's average
    gradient.
    """
    distances = [p.distance for p in smoothed]
    original_distances = [p.distance for p in original]
    climbs = []

    for section in merged:
        start = section.points[0]
        end = section.points[-1]

        # Lookahead for a higher top, tracking the running maximum
        limit = end.distance + config.lookahead_distance
        idx = bisect_left(distances, end.distance) + 1
        while idx < len(smoothed) and smoothed[idx].distance <= limit:
            if smoothed[idx].elevation > end.elevation:
                end = smoothed[idx]
            idx += 1

        elevation_gain = end.elevation - start.elevation
        total_distance = end.distance - start.distance
        average_gradient = elevation_gain / total_distance * 100
        score = fiets_score(elevation_gain, total_distance / 1000)
        threshold = categorize(score, config)

        orig_start = original[_index_at_or_after(original_distances, start.distance)]
        orig_end = original[_index_at_or_after(original_distances, end.distance)]

        climb = Climb(
            start_point=ClimbPoint(orig_start.distance, orig_start.elevation, average_gradient),
            end_point=ClimbPoint(orig_end.distance, orig_end.elevation, average_gradient),
            total_distance=total_distance,
            elevation_gain=elevation_gain,
            average_gradient=average_gradient,
            fiets_score=score,
            category=threshold.category,
            color=threshold.color,
        )

        if average_gradient < config.final_min_gradient:
            logger.debug("Dropped %s: below %.1f%% average", climb.label, config.final_min_gradient)
            continue

        logger.debug("Found climb: %s (%s)", climb.label, climb.category.value)
        climbs.append(climb)

    return climbs


def _compare_priority(a: Climb, b: Climb) -> int:
    # FIETS score decides unless the scores are within 0.1, then length does
    if abs(b.fiets_score - a.fiets_score) > 0.1:
        return -1 if a.fiets_score > b.fiets_score else 1
    if a.total_distance == b.total_distance:
        return 0
    return -1 if a.total_distance > b.total_distance else 1


def _overlaps(a: Climb, b: Climb) -> bool:
    return a.start_point.distance < b.end_point.distance and b.start_point.distance < a.end_point.distance


def remove_overlapping_climbs(climbs: list[Climb]) -> list[Climb]:
    """Drop climbs that overlap a more significant climb.

    Climbs are considered in order of FIETS score (length breaks near-ties);
    each is kept only if it overlaps none of the climbs already kept.
    The result is returned in route order.
    """
    if len(climbs) <= 1:
        return list(climbs)

    kept: list[Climb] = []
    for climb in sorted(climbs, key=cmp_to_key(_compare_priority)):
        if not any(_overlaps(climb, other) for other in kept):
            kept.append(climb)

    return sorted(kept, key=lambda c: c.start_point.distance)


def detect_climbs(data: list[ElevationSample], config: ClimbConfig = DEFAULT_CONFIG) -> list[Climb]:
    """Detect and categorize climbs in an elevation profile.

    Args:
        data: Samples ordered by strictly increasing distance (meters)
        config: Detection thresholds

    Returns:
        Climbs in route order. Empty for fewer than 2 samples or a route
        without qualifying climbs.

    Raises:
        InvalidInputError: If distances repeat or decrease, or a value is not finite.
    """
    if len(data) < 2:
        return []

    validate_samples(data)
    logger.debug("Starting climb detection with %d samples", len(data))

    smoothed = smooth_elevations(data, config.smoothing_window)
    sections = scan_steep_sections(smoothed, config)
    logger.debug("Found %d steep sections", len(sections))

    merged = merge_sections(sections, smoothed, config)
    climbs = finalize_climbs(merged, smoothed, data, config)

    if config.remove_overlaps:
        climbs = remove_overlapping_climbs(climbs)

    return climbs


def assign_climb_categories(samples: list[ElevationSample], climbs: list[Climb]) -> list[CategorizedPoint]:
    """Tag each profile sample with the category of the climb covering it.

    Samples outside every climb get category -1 and a transparent color.
    Where climbs overlap, the later climb wins.
    """
    categorized = [
        CategorizedPoint(distance=s.distance, elevation=s.elevation, climb_category=-1, climb_color="transparent")
        for s in samples
    ]
    for climb in climbs:
        for point in categorized:
            if climb.start_point.distance <= point.distance <= climb.end_point.distance:
                point.climb_category = climb.category.rank
                point.climb_color = climb.color
    return categorized
