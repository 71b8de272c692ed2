"""
TÄFFÄ Mobile - Cross-platform Kivy UI for the waiting time monitor.

This module provides a Kivy-based user interface that works on:
- Desktop (Windows, macOS, Linux)
- Mobile (Android, iOS)
"""

from .app import TaffaApp

__all__ = ["TaffaApp"]
