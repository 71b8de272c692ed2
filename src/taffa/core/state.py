"""
Published display state.

Holds the latest Publication. The poller is the only writer; any number of
readers may poll `current` or subscribe to be told about replacements.
"""

import logging
import threading
from typing import Callable

from .result import Publication

logger = logging.getLogger(__name__)

Observer = Callable[[Publication], None]


class PublishedState:
    """Atomically replaced count/prediction snapshot."""

    def __init__(self, initial: Publication | None = None):
        self._lock = threading.Lock()
        self._current = initial if initial is not None else Publication()
        self._observers: list[Observer] = []

    @property
    def current(self) -> Publication:
        """The most recent publication."""
        with self._lock:
            return self._current

    def publish(self, publication: Publication) -> None:
        """
        Replace the current publication and notify observers.

        Observers run on the publishing thread after the swap. An observer
        that raises is logged and does not stop the others.
        """
        with self._lock:
            self._current = publication
            observers = list(self._observers)

        for observer in observers:
            try:
                observer(publication)
            except Exception:
                logger.exception("Publication observer failed")

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer.

        Returns:
            Function that removes the observer again.
        """
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe
