"""ENS name service clients.

Provides the NameService interface consumed by identity resolution and an aiohttp based
implementation backed by an ensdata style HTTP API, where GET {api_base}/{name or address}
returns a JSON record with address, primary name and avatar fields.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import quote
from aiohttp import ClientSession
import sentry_sdk
from web3 import Web3

from onchain.explorer.resolve.classify import is_address
from onchain.explorer.resolve.errors import ResolutionFailure

logger = logging.getLogger(__name__)


class NameService(ABC):
    """
    Abstract ENS name service.

    Reverse and avatar lookups are best effort: they return None when there is no
    record and must not raise for "not found". Forward lookups may either return None
    or raise; callers treat both as a failed resolution.
    """

    @abstractmethod
    async def reverse_resolve(self, address: str) -> Optional[str]:
        """Look up the primary ENS name of an address."""
        pass

    @abstractmethod
    async def forward_resolve(self, name: str) -> Optional[str]:
        """Look up the address an ENS name points to."""
        pass

    @abstractmethod
    async def resolve_avatar(self, name: str) -> Optional[str]:
        """Look up the avatar URI of an ENS name."""
        pass


def text_field(record: Optional[Dict[str, Any]], *keys: str) -> Optional[str]:
    """Return the first non-empty string value among keys in a lookup record.

    Args:
        record: Decoded JSON record, may be None
        keys: Candidate field names in order of preference

    Returns:
        The first non-empty string value, None if there is none
    """
    if record is None:
        return None
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and len(value) > 0:
            return value
    return None


class EnsDataNameService(NameService):
    """Name service backed by an ensdata compatible HTTP API."""

    def __init__(self, session: ClientSession, api_base: str = "https://api.ensdata.net"):
        self._session = session
        self._api_base = api_base.rstrip("/")

    async def lookup(self, identifier: str) -> Optional[Dict[str, Any]]:
        """Fetch the lookup record for an address or ENS name.

        Args:
            identifier: Address or ENS name

        Returns:
            Decoded JSON record, None if the service has no record

        Raises:
            ResolutionFailure: If the service answers with an unexpected status
        """
        url = f"{self._api_base}/{quote(identifier, safe='')}"
        async with self._session.get(url) as resp:
            if resp.status == 404:
                return None
            if resp.status != 200:
                raise ResolutionFailure.lookup_failed(
                    identifier, f"unexpected status {resp.status}"
                )
            body = await resp.json()
            if not isinstance(body, dict):
                return None
            return body

    async def reverse_resolve(self, address: str) -> Optional[str]:
        try:
            record = await self.lookup(address)
        except Exception as e:
            logger.warning("Reverse lookup failed for %s: %s", address, e)
            sentry_sdk.capture_exception(e)
            return None
        return text_field(record, "ens_primary", "ens")

    async def forward_resolve(self, name: str) -> Optional[str]:
        record = await self.lookup(name)
        address = text_field(record, "address")
        if address is None or not is_address(address):
            return None
        return Web3.to_checksum_address(address)

    async def resolve_avatar(self, name: str) -> Optional[str]:
        try:
            record = await self.lookup(name)
        except Exception as e:
            logger.warning("Avatar lookup failed for %s: %s", name, e)
            sentry_sdk.capture_exception(e)
            return None
        return text_field(record, "avatar_url", "avatar")
