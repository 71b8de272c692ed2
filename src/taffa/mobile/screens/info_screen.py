"""
Info screen for the TÄFFÄ mobile app.

Single screen showing the venue title, the current visitor count and the
predicted waiting time.
"""

import logging

from kivy.metrics import sp
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label
from kivy.uix.widget import Widget

from ...core.result import Publication, visitors_line, waiting_time_line

logger = logging.getLogger(__name__)

TITLE_COLOR = (0.0, 0.0, 1.0, 1.0)  # Blue
TEXT_COLOR = (0.0, 0.0, 0.0, 1.0)  # Black


class InfoScreen(BoxLayout):
    """
    Visitor count and waiting time display.

    Layout:
    ┌─────────────────────────────────────┐
    │               TÄFFÄ                 │
    │                                     │
    │                                     │
    │   Number of visitors: 37 / 200      │
    │   Estimated waiting time: 4.3 mins  │
    │                                     │
    └─────────────────────────────────────┘
    """

    def __init__(self, title: str = "TÄFFÄ", capacity: int = 200, **kwargs):
        """
        Initialize the info screen.

        Args:
            title: Heading shown at the top.
            capacity: Venue capacity shown after the visitor count.
        """
        kwargs.setdefault("orientation", "vertical")
        kwargs.setdefault("padding", [16, 50, 16, sp(72)])
        super().__init__(**kwargs)

        self.capacity = capacity

        self._title_label = Label(
            text=title,
            font_size="32sp",
            bold=True,
            color=TITLE_COLOR,
            halign="center",
            size_hint_y=None,
            height=sp(48),
        )
        self.add_widget(self._title_label)

        # Pushes the two info lines to the bottom
        self.add_widget(Widget(size_hint_y=1))

        initial = Publication()
        self._visitors_label = self._info_label(visitors_line(initial.count_text, capacity))
        self._waiting_label = self._info_label(waiting_time_line(initial.prediction_text))
        self.add_widget(self._visitors_label)
        self.add_widget(self._waiting_label)

    def _info_label(self, text: str) -> Label:
        label = Label(
            text=text,
            font_size="22sp",
            color=TEXT_COLOR,
            halign="center",
            valign="middle",
            size_hint_y=None,
            height=sp(40),
        )
        label.bind(size=label.setter("text_size"))
        return label

    def update(self, publication: Publication) -> None:
        """
        Show a new publication. Must be called on the UI thread.

        Args:
            publication: Latest snapshot from the poller.
        """
        self._visitors_label.text = visitors_line(publication.count_text, self.capacity)
        self._waiting_label.text = waiting_time_line(publication.prediction_text)
