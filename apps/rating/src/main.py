"""Rating CLI entry point

Ports & Adapters: CLI -> Driving Adapter -> Application Service
"""

import asyncio
import inspect

import fire

from apps.rating.src.lifespan import startup, shutdown, get_injector
from apps.rating.src.adapters.driving.cli.rating_controller import RatingController


def main() -> None:
    """Synchronous entry point; async commands run on a fresh event loop"""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    try:
        startup()
        controller = RatingController(get_injector())
        result = fire.Fire(controller)

        if inspect.iscoroutine(result):
            loop.run_until_complete(result)
    finally:
        shutdown()
        loop.close()


if __name__ == "__main__":
    main()
