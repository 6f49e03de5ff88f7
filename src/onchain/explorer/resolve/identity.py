"""On-chain identity resolution on top of a name service.

Addresses resolve to a primary ENS name, ENS names resolve to an address, and any known
name resolves to an avatar. Forward resolution failures are reported as ResolutionFailure;
reverse and avatar lookups are best effort.
"""

import logging
from typing import Optional
from pydantic import BaseModel, ConfigDict
import sentry_sdk

from onchain.explorer.resolve.classify import ClassifiedInput, InputKind
from onchain.explorer.resolve.errors import ResolutionFailure
from onchain.explorer.resolve.names import NameService

logger = logging.getLogger(__name__)


def sliced_text(text: str, head: int = 6, tail: int = 4) -> str:
    """Shorten a long identifier for display, e.g. 0xd8dA...6045."""
    if text is None or len(text) <= head + tail + 3:
        return text
    return f"{text[:head]}...{text[-tail:]}"


class IdentityResult(BaseModel):
    """Resolved on-chain identity for a search.

    The resolved address is the primary identity when known, otherwise the resolved
    name is. The avatar always belongs to the resolved name.
    """

    model_config = ConfigDict(frozen=True)

    resolved_address: Optional[str] = None
    resolved_name: Optional[str] = None
    resolved_avatar: Optional[str] = None

    @property
    def primary(self) -> Optional[str]:
        if self.resolved_address:
            return self.resolved_address
        return self.resolved_name

    @property
    def display_label(self) -> Optional[str]:
        if self.resolved_address:
            return sliced_text(self.resolved_address)
        return self.resolved_name

    @property
    def is_empty(self) -> bool:
        return self.primary is None


async def lookup_name(name_service: NameService, address: str) -> Optional[str]:
    """Reverse-resolve an address to its primary ENS name.

    Args:
        name_service: Name service to query
        address: Address to resolve

    Returns:
        ENS name if the address has a primary name, None otherwise
    """
    try:
        name = await name_service.reverse_resolve(address)
    except Exception as e:
        logger.warning("Reverse lookup failed for %s: %s", address, e)
        sentry_sdk.capture_exception(e)
        return None
    if not name:
        logger.debug("No primary name for %s", address)
        return None
    return name


async def lookup_address(name_service: NameService, name: str) -> str:
    """Forward-resolve an ENS name to an address.

    An empty answer and a raised error are both failures, but are reported with
    different reasons.

    Args:
        name_service: Name service to query
        name: ENS name to resolve

    Returns:
        The resolved address

    Raises:
        ResolutionFailure: If the name has no address or the lookup raised
    """
    try:
        address = await name_service.forward_resolve(name)
    except ResolutionFailure:
        raise
    except Exception as e:
        logger.warning("Forward lookup failed for %s: %s", name, e)
        sentry_sdk.capture_exception(e)
        raise ResolutionFailure.lookup_failed(name, str(e)) from e
    if not address:
        raise ResolutionFailure.name_not_found(name)
    return address


async def lookup_avatar(name_service: NameService, name: Optional[str]) -> Optional[str]:
    """Resolve the avatar URI of an ENS name.

    Args:
        name_service: Name service to query
        name: ENS name, lookups are skipped when empty

    Returns:
        Avatar URI if the name has one, None otherwise
    """
    if not name:
        return None
    try:
        avatar = await name_service.resolve_avatar(name)
    except Exception as e:
        logger.warning("Avatar lookup failed for %s: %s", name, e)
        sentry_sdk.capture_exception(e)
        return None
    return avatar or None


async def resolve_identity(
    name_service: NameService, classified: ClassifiedInput
) -> IdentityResult:
    """Resolve classified input to a complete identity.

    Runs the same lookups as a search session, in order, without navigation.

    Args:
        name_service: Name service to query
        classified: Classified search input

    Returns:
        IdentityResult, empty for transaction hashes and unnamed addresses

    Raises:
        ResolutionFailure: If the input is invalid or an ENS name does not resolve
    """
    if classified.kind == InputKind.invalid:
        raise ResolutionFailure.empty_input()

    if classified.kind == InputKind.transaction_hash:
        return IdentityResult()

    if classified.kind == InputKind.address:
        name = await lookup_name(name_service, classified.value)
        return IdentityResult(
            resolved_name=name,
            resolved_avatar=await lookup_avatar(name_service, name),
        )

    address = await lookup_address(name_service, classified.value)
    return IdentityResult(
        resolved_address=address,
        resolved_name=classified.value,
        resolved_avatar=await lookup_avatar(name_service, classified.value),
    )
