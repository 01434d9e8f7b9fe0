"""GPX Climbs - climb detection and FIETS categorization for route elevation profiles."""

__version__ = "0.1.0"
