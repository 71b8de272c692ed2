"""
Periodic prediction pipeline.

Runs fetch -> parse -> predict -> publish in a background thread so the
display surface never blocks on the network, then waits a fixed delay
before the next cycle.
"""

import logging
import threading
from typing import Callable

import requests

from .errors import PredictionError
from .fetcher import fetch_visitor_count, parse_visitor_count
from .predictor import Predictor
from .result import FetchResult, PollerState, Publication, format_prediction
from .state import PublishedState

logger = logging.getLogger(__name__)

# Delay between the end of one cycle and the start of the next.
POLL_INTERVAL_S = 15.0


class Poller:
    """
    Background worker driving the visitor count / prediction cycle.

    Cycle:
    - IDLE -> FETCHING: request the visitor count
    - parse the body, run the predictor if one is loaded
    - publish the (count, prediction) pair
    - FETCHING -> IDLE, wait POLL_INTERVAL_S, repeat
    """

    def __init__(
        self,
        url: str,
        predictor: Predictor | None,
        state: PublishedState | None = None,
        timeout: float | None = None,
        interval: float = POLL_INTERVAL_S,
        fetch: Callable[[], FetchResult] | None = None,
    ):
        """
        Initialize the poller.

        Args:
            url: Visitor count endpoint.
            predictor: Loaded Predictor, or None to publish counts only.
            state: Where publications go. A fresh PublishedState if None.
            timeout: HTTP timeout in seconds, None for the client default.
            interval: Seconds between publication and the next fetch.
            fetch: Replacement for the HTTP request, returning a FetchResult.
        """
        self.url = url
        self.predictor = predictor
        self.state = state if state is not None else PublishedState()
        self.timeout = timeout
        self.interval = interval

        self._session: requests.Session | None = None
        if fetch is None:
            self._session = requests.Session()
            fetch = self._fetch_from_server
        self._fetch = fetch

        self._stop_event = threading.Event()
        self._worker_thread: threading.Thread | None = None
        self._running = False
        self._pipeline_state = PollerState.IDLE

        # Statistics
        self.cycles_completed = 0
        self.fetch_errors = 0

    def _fetch_from_server(self) -> FetchResult:
        return fetch_visitor_count(self.url, session=self._session, timeout=self.timeout)

    def start(self) -> None:
        """
        Start polling. The first cycle runs immediately.

        If a previous run is still finishing a fetch, the new run waits for
        it before fetching, so at most one request is ever in flight.
        """
        if self._running:
            logger.warning("Poller already running")
            return

        if not self.url:
            logger.warning("No server URL configured; every fetch will fail")

        previous = self._worker_thread
        if previous is not None and not previous.is_alive():
            previous = None

        # Each run gets its own event so a restart cannot revive an old loop
        self._running = True
        self._stop_event = threading.Event()
        self._worker_thread = threading.Thread(
            target=self._worker_loop,
            args=(self._stop_event, previous),
            name="Poller",
            daemon=True,
        )
        self._worker_thread.start()
        logger.info(f"Poller started: url={self.url!r}, interval={self.interval}s")

    def stop(self, timeout: float = 5.0) -> None:
        """
        Stop polling.

        Interrupts the delay between cycles. A fetch already in flight is left
        to the HTTP client's own timeout; in that case the thread and session
        are kept until it completes. Safe to call more than once.
        """
        if not self._running:
            return

        self._running = False
        self._stop_event.set()

        thread = self._worker_thread
        if thread is not None:
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning(f"Poller thread still finishing a fetch after {timeout}s")
            else:
                self._worker_thread = None
                self.close()

        logger.info(
            f"Poller stopped: "
            f"cycles={self.cycles_completed}, "
            f"fetch_errors={self.fetch_errors}"
        )

    def close(self) -> None:
        """Release the HTTP session. Used directly when polling was never started."""
        if self._session is not None:
            self._session.close()

    def run_cycle(self) -> Publication:
        """
        Run one fetch/predict/publish cycle on the calling thread.

        Returns:
            The publication that was just made current.
        """
        self._pipeline_state = PollerState.FETCHING
        try:
            result = self._fetch()
            publication = self._build_publication(result)
            self.state.publish(publication)
            self.cycles_completed += 1
            return publication
        finally:
            self._pipeline_state = PollerState.IDLE

    def _build_publication(self, result: FetchResult) -> Publication:
        previous = self.state.current

        if not result.ok:
            self.fetch_errors += 1
            return Publication(
                count_text=result.error,
                prediction_text=previous.prediction_text,
                prediction_minutes=previous.prediction_minutes,
                error=result.error,
            )

        count = parse_visitor_count(result.body)
        prediction_text = previous.prediction_text
        minutes = previous.prediction_minutes

        if self.predictor is not None:
            try:
                minutes = self.predictor.predict(float(count))
                prediction_text = format_prediction(minutes)
            except PredictionError as e:
                logger.warning(f"Prediction skipped: {e}")

        return Publication(
            count_text=str(count),
            prediction_text=prediction_text,
            visitor_count=count,
            prediction_minutes=minutes,
        )

    def _worker_loop(
        self,
        stop_event: threading.Event,
        previous: threading.Thread | None = None,
    ) -> None:
        """Main loop: cycle, then wait for the interval or a stop request."""
        if previous is not None:
            logger.debug("Waiting for the previous poll run to finish its fetch")
            previous.join()

        logger.debug("Poller loop started")

        while not stop_event.is_set():
            try:
                publication = self.run_cycle()
                logger.debug(
                    f"Published count={publication.count_text!r} "
                    f"prediction={publication.prediction_text!r}"
                )
            except Exception as e:
                logger.error(f"Poll cycle error: {e}")

            if stop_event.wait(self.interval):
                break

        logger.debug("Poller loop exited")

    @property
    def is_running(self) -> bool:
        """Check if the poller thread is running."""
        return self._running

    @property
    def pipeline_state(self) -> PollerState:
        """Whether a cycle is currently in progress."""
        return self._pipeline_state
