"""Formatting utilities for display."""

from gpx_climbs.models import Climb


def format_distance(meters: float) -> str:
    """Format meters as 'X m' below 1 km, otherwise 'X.X km'."""
    if meters < 1000:
        return f"{meters:.0f} m"
    return f"{meters / 1000:.1f} km"


def format_climb_row(index: int, climb: Climb) -> str:
    """Format one climb as a fixed-width table row."""
    return (
        f"{index:>2}  {climb.category.value:<4}  "
        f"{climb.start_point.distance / 1000:>7.1f}  {climb.end_point.distance / 1000:>7.1f}  "
        f"{format_distance(climb.total_distance):>9}  {climb.elevation_gain:>6.0f} m  "
        f"{climb.average_gradient:>5.1f}%  {climb.fiets_score:>6.2f}"
    )


def format_climb_table(climbs: list[Climb]) -> str:
    """Format detected climbs as a table, or a notice when there are none."""
    if not climbs:
        return "No climbs detected."
    header = (
        f"{'#':>2}  {'Cat':<4}  {'From km':>7}  {'To km':>7}  "
        f"{'Length':>9}  {'Gain':>8}  {'Grade':>6}  {'FIETS':>6}"
    )
    lines = [header, "-" * len(header)]
    lines.extend(format_climb_row(i, climb) for i, climb in enumerate(climbs, start=1))
    return "\n".join(lines)
