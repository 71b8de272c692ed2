"""
Data structures passed between the poller and the display surfaces.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

LOADING_TEXT = "Loading..."
NO_PREDICTION_TEXT = "--"


class PollerState(Enum):
    """Lifecycle state of the polling loop."""

    IDLE = "IDLE"
    FETCHING = "FETCHING"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of one visitor count request.

    Attributes:
        body: Response body text when the request succeeded
        error: Display string such as "Error: HTTP 500" when it did not
    """

    body: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Publication:
    """
    Snapshot of what the display shows for one poll cycle.

    Attributes:
        count_text: Visitor count, or the fetch error string
        prediction_text: Waiting time in minutes with one decimal place
        visitor_count: Parsed count, None when the fetch failed
        prediction_minutes: Raw model output, None until a prediction exists
        error: Fetch error string, None on success
        published_at: When the snapshot was created
    """

    count_text: str = LOADING_TEXT
    prediction_text: str = NO_PREDICTION_TEXT
    visitor_count: int | None = None
    prediction_minutes: float | None = None
    error: str | None = None
    published_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "count_text": self.count_text,
            "prediction_text": self.prediction_text,
            "visitor_count": self.visitor_count,
            "prediction_minutes": (
                None if self.prediction_minutes is None else round(self.prediction_minutes, 3)
            ),
            "error": self.error,
            "published_at": self.published_at.isoformat(),
        }

    @property
    def has_prediction(self) -> bool:
        return self.prediction_minutes is not None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def format_prediction(minutes: float) -> str:
    """Format a predicted waiting time with one decimal place, e.g. "4.3"."""
    if not math.isfinite(minutes):
        return NO_PREDICTION_TEXT
    return f"{minutes:.1f}"


def visitors_line(count_text: str, capacity: int) -> str:
    return f"Number of visitors: {count_text} / {capacity}"


def waiting_time_line(prediction_text: str) -> str:
    return f"Estimated waiting time: {prediction_text} mins"
