"""Application entry point: builds a configured App for request handlers."""

from magicauth.app import App
from magicauth.config import Config
from magicauth.core.db import create_mongo_client
from magicauth.logging import setup_logging


def create_app(config: Config | None = None) -> App:
    """Load config, set up logging and wire the process-wide MongoDB client into an App.

    Run the returned App inside `App.lifespan()`, which closes the client on shutdown.
    """
    if config is None:
        config = Config()
    setup_logging(config.debug)
    return App(config, create_mongo_client(config))
