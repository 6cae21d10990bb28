import logging

from ielts_api.core.config import Settings


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    # httpx logs every request line at INFO; keep it to warnings.
    logging.getLogger("httpx").setLevel(logging.WARNING)
