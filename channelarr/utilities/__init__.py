"""Utilities - time conversions, XMLTV, logging."""

from channelarr.utilities.logging import setup_logging
from channelarr.utilities.xmltv import programmes_to_xmltv

__all__ = [
    "programmes_to_xmltv",
    "setup_logging",
]
