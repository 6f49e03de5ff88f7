import logging
from typing import (
    Optional,
)
from aiohttp import web
import aiohttp
import sentry_sdk
from sentry_sdk.integrations.aiohttp import AioHttpIntegration

from onchain.explorer.app.config import (
    NameServiceAppKey,
    SessionAppKey,
    Settings,
    SettingsAppKey,
)
from onchain.explorer.app.handlers.search import (
    handle_internal_alive,
    handle_resolve,
    handle_search,
)
from onchain.explorer.resolve.names import EnsDataNameService, NameService

logger = logging.getLogger(__name__)


async def background_tasks(app):
    logger.info("Starting up")
    settings: Settings = app[SettingsAppKey]

    trace_config = aiohttp.TraceConfig()

    if settings.debug:

        async def on_request_start(
            session, trace_config_ctx, params: aiohttp.TraceRequestStartParams
        ):
            logging.info("Starting request: %s", params)

        async def on_request_end(session, trace_config_ctx, params):
            logging.info("Ending request: %s", params)

        trace_config.on_request_start.append(on_request_start)
        trace_config.on_request_end.append(on_request_end)

    app[SessionAppKey] = aiohttp.ClientSession(
        trace_configs=[trace_config],
        timeout=aiohttp.ClientTimeout(total=settings.lookup_timeout),
    )

    if NameServiceAppKey not in app:
        app[NameServiceAppKey] = EnsDataNameService(
            app[SessionAppKey], settings.ens_api_base
        )

    logger.info("Startup complete")

    yield

    logger.info("Shutting down")

    await app[SessionAppKey].close()


@web.middleware
async def sentry_middleware(request: web.Request, handler):
    try:
        response = await handler(request)
        return response
    except web.HTTPException:
        raise
    except Exception as e:
        sentry_sdk.capture_exception(e)
        raise e


async def start_web_server(
    settings: Optional[Settings] = None, name_service: Optional[NameService] = None
):

    if settings is None:
        settings = Settings()  # type: ignore
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            send_default_pii=True,
            integrations=[AioHttpIntegration()]
        )
    app = web.Application(middlewares=[sentry_middleware])

    app[SettingsAppKey] = settings
    if name_service is not None:
        app[NameServiceAppKey] = name_service

    app.add_routes(
        [
            web.get("/internal/alive", handle_internal_alive),
            web.get("/api/search", handle_search),
            web.get("/api/resolve", handle_resolve),
        ]
    )

    app.cleanup_ctx.append(background_tasks)

    return app
