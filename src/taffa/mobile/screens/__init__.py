"""Screen modules for the TÄFFÄ mobile UI."""

from .info_screen import InfoScreen

__all__ = ["InfoScreen"]
