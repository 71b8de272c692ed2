"""
TÄFFÄ Kivy Application - visitor count and waiting time monitor.

Main entry point for the Kivy-based mobile/desktop application.
"""

import logging
import os

# Prevent Kivy from consuming command-line arguments
os.environ["KIVY_NO_ARGS"] = "1"

from kivy.app import App
from kivy.clock import Clock
from kivy.core.window import Window
from kivy.logger import Logger

from ..core.config import Config
from ..core.poller import Poller
from ..core.predictor import load_predictor
from ..core.result import Publication
from ..core.state import PublishedState
from .screens.info_screen import InfoScreen

logger = logging.getLogger(__name__)


class TaffaApp(App):
    """
    Main TÄFFÄ Kivy application.

    Coordinates:
    - Model loading (via load_predictor)
    - Visitor count polling and inference (via Poller)
    - UI updates (via InfoScreen)
    """

    def __init__(self, app_config: Config | None = None, **kwargs):
        """
        Initialize the TÄFFÄ app.

        Args:
            app_config: Optional Config object. If not provided, loads from default location.
        """
        super().__init__(**kwargs)

        # app_config avoids clashing with Kivy's own App.config
        if app_config is None:
            app_config = Config()
        self.app_config = app_config

        # Components (initialized in build())
        self.state = PublishedState()
        self.predictor = None
        self.poller = None
        self.info_screen = None
        self._unsubscribe = None

    def build(self):
        """Build the application UI."""
        Window.clearcolor = (1, 1, 1, 1)
        self.title = self.app_config.get("display.title", "TÄFFÄ")

        self.predictor = load_predictor(self.app_config.get("model.path", "assets/model.tflite"))
        if self.predictor is None:
            Logger.error("TAFFA: TensorFlow Lite model failed to load, showing counts only")
        else:
            Logger.info("TAFFA: TensorFlow Lite model loaded")

        self.poller = Poller(
            url=self.app_config.get("server.url", ""),
            predictor=self.predictor,
            state=self.state,
            timeout=self.app_config.get("server.timeout"),
        )

        self.info_screen = InfoScreen(
            title=self.app_config.get("display.title", "TÄFFÄ"),
            capacity=self.app_config.get("display.capacity", 200),
        )
        return self.info_screen

    def on_start(self):
        """Called when the application starts."""
        Logger.info("TAFFA: Application starting")
        self._unsubscribe = self.state.subscribe(self._on_publication)
        self.poller.start()

    def on_stop(self):
        """Called when the application stops."""
        Logger.info("TAFFA: Application stopping")

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        if self.poller:
            self.poller.stop()

        Logger.info("TAFFA: Application stopped")

    def _on_publication(self, publication: Publication):
        """Handle a publication from the poller thread."""
        # Widgets may only be touched on the main thread
        Clock.schedule_once(lambda dt: self._update_ui(publication), 0)

    def _update_ui(self, publication: Publication):
        if self.info_screen:
            self.info_screen.update(publication)


def run_mobile_app(config: Config | None = None):
    """
    Run the TÄFFÄ mobile/desktop Kivy application.

    Args:
        config: Optional Config object.
    """
    app = TaffaApp(app_config=config)
    app.run()
