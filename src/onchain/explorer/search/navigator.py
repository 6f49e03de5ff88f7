"""Explorer navigation.

Builds canonical explorer paths for transactions and addresses and navigates only when the
router is not already on the target path.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Callable, Dict, List, Optional

from onchain.explorer.resolve.classify import InputKind

logger = logging.getLogger(__name__)

RouteListener = Callable[[str, str], None]

PATH_SEGMENTS: Dict[InputKind, str] = {
    InputKind.transaction_hash: "tx/",
    InputKind.address: "address/",
}


class NavigationOutcome(IntEnum):
    navigated = 1
    already_at_target = 2


class Router(ABC):
    """
    Route state consumed by the navigator.

    navigate_to is fire and forget: completion is only observable through the
    listeners registered with subscribe, which receive the new path and query.
    """

    @property
    @abstractmethod
    def current_path(self) -> str:
        pass

    @property
    @abstractmethod
    def current_query(self) -> str:
        pass

    @abstractmethod
    def navigate_to(self, path: str) -> None:
        pass

    @abstractmethod
    def subscribe(self, listener: RouteListener) -> Callable[[], None]:
        """Register a path-changed listener, returning a function that removes it."""
        pass


class MemoryRouter(Router):
    """In-process router that keeps its history in memory.

    Listeners are notified on the next event loop iteration, mirroring how a browser
    router reports a completed route change after the push.
    """

    def __init__(self, current_path: str = "/", current_query: str = ""):
        self._path = current_path
        self._query = current_query
        self._listeners: List[RouteListener] = []
        self.history: List[str] = []

    @property
    def current_path(self) -> str:
        return self._path

    @property
    def current_query(self) -> str:
        return self._query

    def navigate_to(self, path: str) -> None:
        path, _, query = path.partition("?")
        self._path = path
        self._query = query
        self.history.append(path)
        loop = asyncio.get_running_loop()
        for listener in list(self._listeners):
            loop.call_soon(listener, path, query)

    def subscribe(self, listener: RouteListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


def normalize_base_path(base_path: str) -> str:
    """Return base_path with exactly one leading and one trailing slash."""
    return "/" + base_path.strip("/") + "/" if base_path.strip("/") else "/"


class Navigator:
    """Navigate to canonical explorer pages below a fixed base path."""

    def __init__(self, router: Router, base_path: str = "/explorer/"):
        self.router = router
        self.base_path = normalize_base_path(base_path)

    def target_path(self, kind: InputKind, identifier: str) -> str:
        """Build the canonical path for a transaction hash or address.

        Raises:
            ValueError: If kind has no explorer page
        """
        segment = PATH_SEGMENTS.get(kind)
        if segment is None:
            raise ValueError(f"No explorer page for input kind {kind.name}")
        return f"{self.base_path}{segment}{identifier}"

    def navigate(self, kind: InputKind, identifier: str) -> NavigationOutcome:
        """Navigate to the canonical page unless the router is already there.

        Paths are compared case-insensitively, so a checksummed and a lower case
        address lead to the same page.
        """
        target = self.target_path(kind, identifier)
        if target.lower() == self.router.current_path.lower():
            logger.debug("Already at %s", target)
            return NavigationOutcome.already_at_target
        logger.debug("Navigating to %s", target)
        self.router.navigate_to(target)
        return NavigationOutcome.navigated


def identifier_from_path(path: str, base_path: str = "/explorer/") -> Optional[str]:
    """Extract the identifier a route already encodes.

    /explorer/address/0xabc and /explorer/tx/0xabc yield 0xabc; a single segment below
    the base path is returned as is.
    """
    base_path = normalize_base_path(base_path)
    if not path.lower().startswith(base_path.lower()):
        return None
    segments = [segment for segment in path[len(base_path):].split("/") if segment]
    if len(segments) == 0:
        return None
    if len(segments) > 1:
        return segments[1]
    return segments[0]


def external_explorer_url(
    path: str, identifier: str, explorer_base: str = "https://etherscan.io"
) -> str:
    """Link the current search on an external block explorer."""
    section = "address" if "/address/" in path else "tx"
    return f"{explorer_base.rstrip('/')}/{section}/{identifier}"
