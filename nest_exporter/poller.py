"""
 Poller - fetch the Nest device list on a fixed interval and publish it

 Fetch errors (network, HTTP status, undecodable response) are logged and
 the cycle is skipped; the metrics published by the last good poll stay
 visible until the next successful one. There is no retry beyond the next
 tick.
"""
import logging
import threading
from typing import Optional

from nest_exporter.exceptions import NestAPIError

log = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = 120  # seconds


class Poller:
    def __init__(self, client, metrics, interval: Optional[float] = DEFAULT_REFRESH_INTERVAL):
        self.client = client
        self.metrics = metrics
        if not interval or interval <= 0:
            interval = DEFAULT_REFRESH_INTERVAL
        self.interval = interval
        self.polls = 0
        self.errors = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def poll_once(self) -> bool:
        """Fetch and publish one snapshot. Returns False if the fetch failed."""
        try:
            thermostats = self.client.get_thermostats()
        except NestAPIError as exc:
            self.errors += 1
            log.error(f"Unable to fetch Nest devices: {exc}")
            return False
        self.metrics.update(thermostats)
        self.polls += 1
        log.debug(f"Poll {self.polls}: {len(thermostats)} thermostat(s) updated")
        return True

    def run(self):
        """Poll immediately, then every interval seconds until stop() is called"""
        log.info(f"Polling Nest API every {self.interval}s")
        while not self._stop.is_set():
            self.poll_once()
            # Wait until the next tick
            self._stop.wait(self.interval)

    def start(self):
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="nest-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
