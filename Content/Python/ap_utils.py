import logging

LOGGER_NAME = "arranging_prefab"
_TAG = "[ArrangingPrefab]"

logger = logging.getLogger(LOGGER_NAME)


def configure_logging(level: str = "INFO"):
    """Attach a stderr handler once and set the tool's log level."""
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))


def _debug(msg: str):
    logger.debug(f"{_TAG} {msg}")


def _log(msg: str):
    logger.info(f"{_TAG} {msg}")


def _warn(msg: str):
    logger.warning(f"{_TAG} {msg}")


def _err(msg: str):
    logger.error(f"{_TAG} {msg}")
