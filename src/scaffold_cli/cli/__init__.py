"""CLI helpers exposed for other modules."""

from .app import create_app
from .ui import StepTracker

__all__ = ["StepTracker", "create_app"]
