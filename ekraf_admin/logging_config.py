"""Console logging setup shared by the CLI and the sandbox server."""
import logging

from ekraf_admin.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def configure_logging(verbose: bool = False) -> None:
    """Configure the root logger; ``verbose`` forces DEBUG."""
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, force=True)
    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
