"""Explorer search session.

A SearchSession owns one user's search bar state: the raw input, its classification, the
resolved identity and the loading/invalid status. All of it lives in a single immutable
SessionState that is only replaced through SearchSession._update.

Each submitted search starts a new cycle with a higher cycle number. Starting a cycle
cancels the previous cycle's tasks, and any late result tagged with an older cycle number
is discarded, so the state always reflects the latest search.
"""

import asyncio
import logging
from enum import IntEnum
from typing import Any, Coroutine, Optional, Set
from pydantic import BaseModel, ConfigDict, Field

from onchain.explorer.resolve.classify import ClassifiedInput, InputKind, classify
from onchain.explorer.resolve.errors import InvalidReason, ResolutionFailure
from onchain.explorer.resolve.identity import (
    IdentityResult,
    lookup_address,
    lookup_avatar,
    lookup_name,
)
from onchain.explorer.resolve.names import NameService
from onchain.explorer.search.navigator import (
    NavigationOutcome,
    Navigator,
    external_explorer_url,
    identifier_from_path,
)

logger = logging.getLogger(__name__)


class SearchPhase(IntEnum):
    """Search cycle phase.

    idle -> searching -> navigating -> idle
                      -> settling (already at target) -> idle
                      -> idle (invalid input)
    """

    idle = 1
    searching = 2
    navigating = 3
    settling = 4


class SessionState(BaseModel):
    """Snapshot of a search session."""

    model_config = ConfigDict(frozen=True)

    cycle: int = 0
    phase: SearchPhase = SearchPhase.idle
    raw_input: str = ""
    classified: Optional[ClassifiedInput] = None
    identity: IdentityResult = Field(default_factory=IdentityResult)
    outcome: Optional[NavigationOutcome] = None
    target_path: Optional[str] = None
    invalid_reason: Optional[InvalidReason] = None

    @property
    def is_loading(self) -> bool:
        return self.phase != SearchPhase.idle

    @property
    def is_invalid(self) -> bool:
        return self.invalid_reason is not None

    @property
    def classified_kind(self) -> Optional[InputKind]:
        if self.classified is None:
            return None
        return self.classified.kind

    @property
    def show_address_book(self) -> bool:
        return self.classified_kind == InputKind.address


class SearchSession:
    """
    Search bar state machine for one interactive session.

    The session subscribes to the navigator's router: any route change ends loading,
    whichever cycle caused it. Call close() to cancel pending lookups and unsubscribe.
    """

    def __init__(
        self,
        name_service: NameService,
        navigator: Navigator,
        noop_navigation_delay: float = 0.3,
        external_explorer_base: str = "https://etherscan.io",
        raw_input: str = "",
    ):
        self._name_service = name_service
        self._navigator = navigator
        self._noop_navigation_delay = noop_navigation_delay
        self._external_explorer_base = external_explorer_base
        self._state = SessionState(raw_input=raw_input)
        self._tasks: Set[asyncio.Task] = set()
        self._unsubscribe = navigator.router.subscribe(self.route_changed)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def raw_input(self) -> str:
        return self._state.raw_input

    @property
    def classified_kind(self) -> Optional[InputKind]:
        return self._state.classified_kind

    @property
    def identity_result(self) -> IdentityResult:
        return self._state.identity

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_invalid(self) -> bool:
        return self._state.is_invalid

    @property
    def invalid_reason(self) -> Optional[InvalidReason]:
        return self._state.invalid_reason

    @property
    def external_url(self) -> str:
        return external_explorer_url(
            self._navigator.router.current_path,
            self._state.identity.resolved_address or self._state.raw_input,
            self._external_explorer_base,
        )

    def _update(self, expected_cycle: int, **changes: Any) -> bool:
        if expected_cycle != self._state.cycle:
            logger.debug(
                "Discarding result of search cycle %d, current cycle is %d",
                expected_cycle,
                self._state.cycle,
            )
            return False
        self._state = self._state.model_copy(update=changes)
        return True

    def _update_identity(self, expected_cycle: int, **fields: Any) -> bool:
        return self._update(expected_cycle, identity=self._state.identity.model_copy(update=fields))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()

    def edit_input(self, raw: str) -> None:
        """Replace the raw input without starting a search.

        Editing clears the invalid flag and any address resolved for the previous input.
        """
        self._update(
            self._state.cycle,
            raw_input=raw,
            invalid_reason=None,
            identity=self._state.identity.model_copy(update={"resolved_address": None}),
        )

    async def paste(self, raw: str) -> SessionState:
        """Replace the raw input and search for it immediately."""
        self.edit_input(raw)
        return await self.submit_search(raw)

    async def load_from_route(self) -> SessionState:
        """Search for the identifier the current route encodes, if any."""
        identifier = identifier_from_path(
            self._navigator.router.current_path, self._navigator.base_path
        )
        if identifier is None:
            return self._state
        return await self.submit_search(identifier)

    async def submit_search(self, raw: Optional[str] = None) -> SessionState:
        """Run one search cycle for raw, or for the current raw input.

        Returns once the cycle's lookups have finished, or as soon as a newer search
        supersedes it. Loading may outlive the call: it ends on the route change that
        follows a navigation, or after the settle delay when already at the target.

        Returns:
            The session state at the end of the call
        """
        self._cancel_pending()

        raw = self._state.raw_input if raw is None else raw
        classified = classify(raw)
        cycle = self._state.cycle + 1
        self._update(
            self._state.cycle,
            cycle=cycle,
            phase=SearchPhase.searching,
            raw_input=raw,
            classified=classified,
            identity=IdentityResult(),
            outcome=None,
            target_path=None,
            invalid_reason=None,
        )
        logger.debug("Search cycle %d: %s %r", cycle, classified.kind.name, classified.value)

        task = self._spawn(self._run_cycle(cycle, classified))
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.debug("Search cycle %d superseded", cycle)
        return self._state

    async def _run_cycle(self, cycle: int, classified: ClassifiedInput) -> None:
        if classified.kind == InputKind.invalid:
            self._update(cycle, phase=SearchPhase.idle, invalid_reason=InvalidReason.empty_input)
            return

        if classified.kind == InputKind.transaction_hash:
            self._navigate(cycle, InputKind.transaction_hash, classified.value)
            return

        if classified.kind == InputKind.address:
            self._navigate(cycle, InputKind.address, classified.value)
            name = await lookup_name(self._name_service, classified.value)
            if name is None or not self._update_identity(cycle, resolved_name=name):
                return
            await self._resolve_avatar(cycle, name)
            return

        try:
            address = await lookup_address(self._name_service, classified.value)
        except ResolutionFailure as e:
            logger.info("Search input %r is invalid: %s", classified.value, e)
            self._update(cycle, phase=SearchPhase.idle, invalid_reason=e.reason)
            return

        if not self._update_identity(
            cycle, resolved_address=address, resolved_name=classified.value
        ):
            return
        self._navigate(cycle, InputKind.address, address)
        await self._resolve_avatar(cycle, classified.value)

    def _navigate(self, cycle: int, kind: InputKind, identifier: str) -> None:
        outcome = self._navigator.navigate(kind, identifier)
        target = self._navigator.target_path(kind, identifier)
        if outcome == NavigationOutcome.navigated:
            self._update(cycle, phase=SearchPhase.navigating, outcome=outcome, target_path=target)
            return
        if self._noop_navigation_delay <= 0:
            self._update(cycle, phase=SearchPhase.idle, outcome=outcome, target_path=target)
            return
        self._update(cycle, phase=SearchPhase.settling, outcome=outcome, target_path=target)
        self._spawn(self._settle(cycle))

    async def _settle(self, cycle: int) -> None:
        # Keeps the loading affordance visible for searches that need no navigation.
        await asyncio.sleep(self._noop_navigation_delay)
        if self._state.phase == SearchPhase.settling:
            self._update(cycle, phase=SearchPhase.idle)

    async def _resolve_avatar(self, cycle: int, name: str) -> None:
        avatar = await lookup_avatar(self._name_service, name)
        if avatar is not None:
            self._update_identity(cycle, resolved_avatar=avatar)

    def route_changed(self, path: str, query: str = "") -> None:
        """Route change notification: the page has loaded, so loading is over."""
        logger.debug("Route changed to %s", path)
        self._update(self._state.cycle, phase=SearchPhase.idle)

    async def close(self) -> None:
        self._cancel_pending()
        self._unsubscribe()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
