"""Elevation profile chart generation."""

import io

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.collections import PolyCollection

from gpx_climbs.models import Climb, ElevationSample
from gpx_climbs.profile import calculate_gradient_points


def set_fixed_margins(fig, fig_width: float, fig_height: float) -> None:
    """Set fixed margins in inches so the plot area is predictable."""
    left_margin_in = 0.7
    right_margin_in = 0.3
    bottom_margin_in = 0.55
    top_margin_in = 0.35

    fig.subplots_adjust(
        left=left_margin_in / fig_width,
        right=1 - right_margin_in / fig_width,
        bottom=bottom_margin_in / fig_height,
        top=1 - top_margin_in / fig_height,
    )


def _elevation_limits(elevations: list[float]) -> tuple[float, float]:
    """Y-axis range: from sea level (or the lowest point below it) to 15% headroom over the top."""
    if not elevations:
        return 0.0, 100.0
    bottom = min(0.0, min(elevations))
    span = max(elevations) - bottom
    if span <= 0:
        span = 100.0
    return bottom, max(elevations) + span * 0.15


def generate_climb_profile(
    samples: list[ElevationSample],
    climbs: list[Climb],
    aspect_ratio: float = 3.5,
) -> bytes:
    """Generate an elevation profile with gradient coloring and climb highlighting.

    Args:
        samples: Distance/elevation samples for the route
        climbs: Detected climbs, drawn as bands in their category color
        aspect_ratio: Width/height ratio (3.5 = wide default)

    Returns:
        PNG image bytes
    """
    fig_height = 4
    fig_width = fig_height * aspect_ratio
    fig, ax = plt.subplots(figsize=(fig_width, fig_height), facecolor='white')

    distances_km = [s.distance / 1000 for s in samples]
    elevations = [s.elevation for s in samples]
    gradient_points = calculate_gradient_points(samples)
    y_min, y_max = _elevation_limits(elevations)

    # Build all polygons and colors at once for efficient rendering
    polygons = []
    colors = []
    for i in range(len(samples) - 1):
        d0, d1 = distances_km[i], distances_km[i + 1]
        e0, e1 = elevations[i], elevations[i + 1]
        polygons.append([(d0, y_min), (d1, y_min), (d1, e1), (d0, e0)])
        colors.append(gradient_points[i].color)

    coll = PolyCollection(polygons, facecolors=colors, edgecolors='none', linewidths=0)
    ax.add_collection(coll)

    ax.plot(distances_km, elevations, color='#333333', linewidth=0.5)

    for i, climb in enumerate(climbs):
        start_km = climb.start_point.distance / 1000
        end_km = climb.end_point.distance / 1000
        ax.axvspan(start_km, end_km, color=climb.color, zorder=0.5)
        # Stagger labels so neighbouring climbs stay readable
        label_y = y_min + (y_max - y_min) * (0.94 if i % 2 == 0 else 0.86)
        ax.text((start_km + end_km) / 2, label_y, f"{climb.category.value}\n{climb.label}",
                fontsize=8, ha='center', va='center',
                bbox=dict(boxstyle='round,pad=0.2', facecolor='white', edgecolor=climb.color, linewidth=1))

    ax.set_xlim(0, distances_km[-1] if distances_km else 1)
    ax.set_ylim(y_min, y_max)
    ax.set_xlabel('Distance (km)', fontsize=10)
    ax.set_ylabel('Elevation (m)', fontsize=10)
    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)
    ax.grid(axis='y', alpha=0.3, linestyle='-', linewidth=0.5)

    set_fixed_margins(fig, fig_width, fig_height)

    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=100, facecolor='white', edgecolor='none')
    plt.close(fig)
    buf.seek(0)
    return buf.getvalue()
