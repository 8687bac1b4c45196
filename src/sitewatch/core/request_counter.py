import logging
import threading
from typing import Dict

logger = logging.getLogger(__name__)


class RequestCounter:
    """
    Thread-safe count of API hits per route.
    """

    def __init__(self):
        self._counts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, route: str, amount: int = 1) -> int:
        """
        Add ``amount`` hits to ``route``, creating the entry on first use.

        Returns:
            int: The route's new count.
        """
        if amount < 0:
            raise ValueError("request counts never decrease")
        with self._lock:
            count = self._counts.get(route, 0) + amount
            self._counts[route] = count
        logger.debug(f"Route {route} hit count is now {count}")
        return count

    def get(self, route: str) -> int:
        with self._lock:
            return self._counts.get(route, 0)

    def snapshot(self) -> Dict[str, int]:
        """
        Return an independent copy of every route's count.
        """
        with self._lock:
            return dict(self._counts)
