"""Channelarr - deterministic virtual TV channels from a media library."""

__version__ = "0.1.0"
