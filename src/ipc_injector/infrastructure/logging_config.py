import logging
from typing import Optional

from ipc_injector.infrastructure.settings import InjectorSettings

ROOT_LOGGER_NAME = "ipc_injector"

_HANDLER_MARKER = "_ipc_injector_handler"


def configure_logging(settings: Optional[InjectorSettings] = None) -> logging.Logger:
    """Attach a stream handler to the package logger and set its level.

    Development logs (provider loading, route registration) are DEBUG records
    and are dropped when ``APP_LOGGER`` is enabled. Calling this more than
    once only updates the level and format.

    Args:
        settings: Settings to read from. Loaded from the environment when omitted.

    Returns:
        The package logger.
    """
    settings = settings if settings is not None else InjectorSettings()
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(logging.INFO if settings.APP_LOGGER else logging.DEBUG)

    handler = next((h for h in package_logger.handlers if getattr(h, _HANDLER_MARKER, False)), None)
    if handler is None:
        handler = logging.StreamHandler()
        setattr(handler, _HANDLER_MARKER, True)
        package_logger.addHandler(handler)
    handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))

    return package_logger
