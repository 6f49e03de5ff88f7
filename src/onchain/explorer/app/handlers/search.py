import json
import logging
import traceback
from aiohttp import web
import sentry_sdk

from onchain.explorer.app.config import NameServiceAppKey, SettingsAppKey
from onchain.explorer.resolve.classify import InputKind, classify
from onchain.explorer.resolve.errors import ResolutionFailure
from onchain.explorer.resolve.identity import resolve_identity
from onchain.explorer.search.navigator import MemoryRouter, Navigator
from onchain.explorer.search.session import SearchSession

logger = logging.getLogger(__name__)


async def handle_internal_alive(request: web.Request):
    return web.Response(status=200)


async def handle_search(request: web.Request):
    """Run one search cycle for ?q= starting from the page given by ?from=."""
    settings = request.app[SettingsAppKey]
    raw = request.query.get("q", "")
    current_path = request.query.get("from", settings.explorer_base_path)

    navigator = Navigator(MemoryRouter(current_path), settings.explorer_base_path)
    session = SearchSession(
        request.app[NameServiceAppKey],
        navigator,
        noop_navigation_delay=0,
        external_explorer_base=settings.external_explorer_base,
    )
    try:
        state = await session.submit_search(raw)
        external_url = session.external_url
    except Exception as e:
        logger.error(
            f"Unexpected error in handle_search: {type(e).__name__}: {str(e)}\n"
            f"Traceback:\n{traceback.format_exc()}"
        )
        sentry_sdk.capture_exception(e)

        response_body = {"error": "Internal Server Error", "error_type": type(e).__name__}
        if settings.debug:
            response_body["error_message"] = str(e)
            response_body["traceback"] = traceback.format_exc()

        raise web.HTTPInternalServerError(
            body=json.dumps(response_body),
            content_type="application/json",
        )
    finally:
        await session.close()

    if state.invalid_reason is not None:
        return web.json_response(
            {"error": "Invalid search input", "reason": state.invalid_reason.name},
            status=422,
        )

    return web.json_response(
        {
            "kind": state.classified_kind.name,
            "outcome": state.outcome.name,
            "path": state.target_path,
            "identity": state.identity.model_dump(),
            "display_label": state.identity.display_label,
            "external_url": external_url,
            "show_address_book": state.show_address_book,
        }
    )


async def handle_resolve(request: web.Request):
    subjects = request.query.getall("subject", [])
    if len(subjects) == 0:
        return web.json_response([])

    settings = request.app[SettingsAppKey]
    name_service = request.app[NameServiceAppKey]
    navigator = Navigator(MemoryRouter(settings.explorer_base_path), settings.explorer_base_path)

    results = []
    for subject in subjects:
        classified = classify(subject)
        try:
            identity = await resolve_identity(name_service, classified)
        except ResolutionFailure as e:
            logger.info("Skipping unresolvable subject %r: %s", subject, e)
            continue

        if classified.kind == InputKind.transaction_hash:
            path = navigator.target_path(InputKind.transaction_hash, classified.value)
        else:
            path = navigator.target_path(InputKind.address, identity.resolved_address or classified.value)

        results.append(
            {
                "subject": classified.value,
                "kind": classified.kind.name,
                "path": path,
                **identity.model_dump(),
            }
        )
    return web.json_response(results)
