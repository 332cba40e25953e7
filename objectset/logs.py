"""
Logging setup for interactive use of the objectset package.

The package itself only emits records through module loggers and never
installs handlers on import.
"""
import logging

PACKAGE_LOGGER = "objectset"


def configure_logging(level: int = logging.DEBUG,
                      name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Attaches a single message-only StreamHandler to the named logger
    and stops propagation to the root logger.
    Calling it again only updates the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    handler = next((h for h in logger.handlers
                    if isinstance(h, logging.StreamHandler)), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    handler.setLevel(level)
    logger.propagate = False
    return logger
