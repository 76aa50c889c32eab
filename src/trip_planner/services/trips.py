from __future__ import annotations

import itertools
import logging
import threading
from collections import OrderedDict
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

PlanT = TypeVar("PlanT")

DEFAULT_MAX_CLIENTS = 1000


class TripRegistry(Generic[PlanT]):
    """Current plan per client, where the most recently started request wins.

    ``begin`` hands out a token before the route is fetched. A result published
    with a token that is no longer the client's latest is dropped. At most
    ``max_clients`` clients are tracked; the least recently active one is
    forgotten first.
    """

    def __init__(self, max_clients: int = DEFAULT_MAX_CLIENTS) -> None:
        self.max_clients = max(1, max_clients)
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._latest: OrderedDict[str, int] = OrderedDict()
        self._plans: dict[str, PlanT] = {}

    def begin(self, client_id: str) -> int:
        with self._lock:
            token = next(self._counter)
            self._latest[client_id] = token
            self._latest.move_to_end(client_id)
            while len(self._latest) > self.max_clients:
                evicted, _ = self._latest.popitem(last=False)
                self._plans.pop(evicted, None)
                logger.debug("Evicted trip state for client %s", evicted)
            return token

    def publish(self, client_id: str, token: int, plan: PlanT) -> bool:
        with self._lock:
            if self._latest.get(client_id) != token:
                logger.info("Discarding superseded plan for client %s", client_id)
                return False
            self._plans[client_id] = plan
            return True

    def current(self, client_id: str) -> PlanT | None:
        with self._lock:
            return self._plans.get(client_id)

    def clear(self, client_id: str) -> bool:
        with self._lock:
            self._latest.pop(client_id, None)
            return self._plans.pop(client_id, None) is not None
