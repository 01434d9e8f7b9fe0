import gpxpy

from gpx_climbs.models import TrackPoint


def parse_gpx(filepath: str) -> list[TrackPoint]:
    """Parse a GPX file and return a list of TrackPoints.

    Track points are used when present; otherwise route points.
    """
    with open(filepath, "r") as f:
        gpx = gpxpy.parse(f)

    points: list[TrackPoint] = []
    for track in gpx.tracks:
        for segment in track.segments:
            for pt in segment.points:
                points.append(TrackPoint(lat=pt.latitude, lon=pt.longitude, elevation=pt.elevation))

    if not points:
        for route in gpx.routes:
            for pt in route.points:
                points.append(TrackPoint(lat=pt.latitude, lon=pt.longitude, elevation=pt.elevation))
    return points
