"""
Configuration Module for the Explorer Search Service

This module defines the configuration system for the explorer search service, using
Pydantic for settings validation and dependency injection through AppKeys.

The Settings class serves as the central configuration point, loaded from environment
variables with defaults suitable for development environments. Request handlers access
settings and shared resources through typed AppKeys.

Key configuration areas include:
- Service networking
- Explorer routing
- Name service access
- Error reporting
"""

from typing import Final, Optional
import logging
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from aiohttp import web
from aiohttp import ClientSession

from onchain.explorer.resolve.names import NameService
from onchain.explorer.search.navigator import normalize_base_path


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings for the explorer search service.

    Environment variables are automatically mapped to settings fields. For example,
    the name service endpoint can be set with the ENS_API_BASE environment variable.
    """

    debug: bool = False
    """
    Enable debug mode for verbose logging and detailed error responses.
    Set with DEBUG=true environment variable.
    """

    http_port: int = Field(alias="port", default=5100)
    """
    HTTP port for the service to listen on.
    Set with PORT environment variable.
    """

    explorer_base_path: str = "/explorer/"
    """
    Route prefix of all explorer pages. Transactions live below {base}tx/ and
    addresses below {base}address/.
    Set with EXPLORER_BASE_PATH environment variable.
    """

    ens_api_base: str = "https://api.ensdata.net"
    """
    Base URL of the ENS lookup API used for reverse, forward and avatar lookups.
    Set with ENS_API_BASE environment variable.
    """

    external_explorer_base: str = "https://etherscan.io"
    """
    Base URL of the external block explorer linked from search results.
    Set with EXTERNAL_EXPLORER_BASE environment variable.
    """

    noop_navigation_delay: float = 0.3
    """
    Seconds to keep a search loading when it needs no navigation. 0 disables the delay.
    Set with NOOP_NAVIGATION_DELAY environment variable.
    """

    lookup_timeout: float = 10.0
    """
    Total timeout in seconds for each name service request.
    Set with LOOKUP_TIMEOUT environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    @field_validator("explorer_base_path", mode="before")
    @classmethod
    def decode_explorer_base_path(cls, v) -> str:
        """
        Normalize the explorer base path to a single leading and trailing slash.

        Raises:
            ValueError: If the input is not a string
        """
        if isinstance(v, str):
            return normalize_base_path(v)
        raise ValueError("explorer_base_path must be a string")


# Application context keys for dependency injection
SettingsAppKey: Final = web.AppKey("settings", Settings)
"""AppKey for accessing the application settings"""

SessionAppKey: Final = web.AppKey("http_session", ClientSession)
"""AppKey for accessing the shared aiohttp client session"""

NameServiceAppKey: Final = web.AppKey("name_service", NameService)
"""AppKey for accessing the ENS name service"""
