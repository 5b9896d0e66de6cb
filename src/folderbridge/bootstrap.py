"""Bootstrap - initialize the folderbridge environment.

Creates the state directory that holds the capability database and the
folder metadata file.
"""

import structlog

from folderbridge.config import Settings, settings as default_settings

logger = structlog.get_logger()


def bootstrap(settings: Settings | None = None) -> Settings:
    """Initialize the folderbridge environment.

    This should be called once at application startup.
    It's safe to call multiple times (idempotent).
    """
    settings = settings or default_settings
    settings.setup_logging()
    logger.info("bootstrapping_folderbridge", state_root=str(settings.state_root))

    settings.ensure_directories()

    logger.info("bootstrap_complete")
    return settings


if __name__ == "__main__":
    bootstrap()
