"""
Shared test configuration and fixtures for explorer search tests.

Provides an in-memory name service with controllable lookup timing, and the
router, navigator and session fixtures used across the search test files.
"""

import asyncio
from typing import Dict, List, Optional, Tuple, Union
import pytest
import pytest_asyncio

from onchain.explorer.resolve.names import NameService
from onchain.explorer.search.navigator import MemoryRouter, Navigator
from onchain.explorer.search.session import SearchSession

VITALIK_ADDRESS = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
OTHER_ADDRESS = "0x1111111111111111111111111111111111111111"
TX_HASH = "0x" + "ab" * 32
VITALIK_AVATAR = "https://euc.li/vitalik.eth"


class FakeNameService(NameService):
    """In-memory name service.

    A stored Exception is raised instead of returned.
    Lookups for a key listed in gates wait until that event is set. Cancelled
    waits are recorded in cancelled; with ignore_cancel the wait carries on after
    a cancellation, like a lookup that cannot be aborted.
    """

    def __init__(
        self,
        names: Optional[Dict[str, Union[str, Exception]]] = None,
        addresses: Optional[Dict[str, Union[str, Exception, None]]] = None,
        avatars: Optional[Dict[str, Union[str, Exception]]] = None,
    ):
        self.names = names or {}
        self.addresses = addresses or {}
        self.avatars = avatars or {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.ignore_cancel = False
        self.calls: List[Tuple[str, str]] = []
        self.cancelled: List[str] = []

    def gate(self, key: str) -> asyncio.Event:
        self.gates[key] = asyncio.Event()
        return self.gates[key]

    async def _wait(self, key: str) -> None:
        gate = self.gates.get(key)
        if gate is None:
            return
        while True:
            try:
                await gate.wait()
                return
            except asyncio.CancelledError:
                self.cancelled.append(key)
                if not self.ignore_cancel:
                    raise

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return value

    async def reverse_resolve(self, address: str) -> Optional[str]:
        self.calls.append(("reverse", address))
        await self._wait(address)
        return self._answer(self.names.get(address))

    async def forward_resolve(self, name: str) -> Optional[str]:
        self.calls.append(("forward", name))
        await self._wait(name)
        return self._answer(self.addresses.get(name))

    async def resolve_avatar(self, name: str) -> Optional[str]:
        self.calls.append(("avatar", name))
        await self._wait(f"avatar:{name}")
        return self._answer(self.avatars.get(name))

    def calls_of(self, kind: str) -> List[str]:
        return [value for call_kind, value in self.calls if call_kind == kind]


async def drain(iterations: int = 5) -> None:
    """Let scheduled callbacks and tasks run."""
    for _ in range(iterations):
        await asyncio.sleep(0)


@pytest.fixture
def name_service():
    return FakeNameService(
        names={VITALIK_ADDRESS: "vitalik.eth"},
        addresses={"vitalik.eth": VITALIK_ADDRESS},
        avatars={"vitalik.eth": VITALIK_AVATAR},
    )


@pytest.fixture
def router():
    return MemoryRouter("/explorer/")


@pytest.fixture
def navigator(router):
    return Navigator(router, "/explorer/")


@pytest_asyncio.fixture
async def session(name_service, navigator):
    search_session = SearchSession(name_service, navigator, noop_navigation_delay=0)
    yield search_session
    await search_session.close()
