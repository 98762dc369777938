"""Rating App lifecycle

App-level DI configuration composing the rating lib
"""

import logging

from injector import Injector

from libs.rating.src.lifespan import configure as configure_rating


_injector: Injector | None = None


def startup() -> Injector:
    """Start the DI container"""
    global _injector
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    _injector = Injector([configure_rating])
    return _injector


def shutdown() -> None:
    global _injector
    _injector = None


def get_injector() -> Injector:
    """Return the DI container, starting it on first use"""
    global _injector
    if _injector is None:
        startup()
    return _injector
