from typing import List
import argparse
import aiohttp
import asyncio
import logging

logger = logging.getLogger(__name__)

from onchain.explorer.resolve.names import EnsDataNameService
from onchain.explorer.search.navigator import MemoryRouter, Navigator
from onchain.explorer.search.session import SearchSession


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="resolve", description="Resolve explorer search input"
    )
    parser.add_argument("subject", nargs="+", help="The input(s) to search for.")
    parser.add_argument(
        "--ens-api",
        default="https://api.ensdata.net",
        help="The ENS lookup API to use for name resolution.",
    )
    parser.add_argument(
        "--current-path",
        default="/explorer/",
        help="The explorer path the search starts from.",
    )

    args = vars(parser.parse_args())

    subjects: List[str] = args.get("subject", [])

    async with aiohttp.ClientSession() as session:
        name_service = EnsDataNameService(session, args.get("ens_api"))
        router = MemoryRouter(args.get("current_path"))
        search_session = SearchSession(
            name_service, Navigator(router), noop_navigation_delay=0
        )
        for subject in subjects:
            try:
                state = await search_session.submit_search(subject)
                if state.is_invalid:
                    print(f"invalid {subject} {state.invalid_reason.name}")
                    continue
                print(
                    f"{state.outcome.name} {state.target_path} {state.identity.model_dump()}"
                )
            except Exception:
                logging.exception("Exception searching for %s", subject)
        await search_session.close()


def main() -> None:
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
