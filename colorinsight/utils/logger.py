import logging
import sys
from colorinsight.utils.config import config

LOGGER_NAME = 'colorinsight'


def configure_logger(level=config.log_level, log_format=config.log_format):
    """
    Attach a single stdout handler to the 'colorinsight' logger.

    Safe to call again (for instance after changing LOG_LEVEL); earlier
    handlers are replaced, never stacked.
    """
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(level)

    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(log_format))
    app_logger.addHandler(handler)

    # Wizard output is printed by rich; keep our records off the root handler
    app_logger.propagate = False
    return app_logger


# google-genai, httpx and PyMuPDF only report errors unless LOG_LEVEL says otherwise
logging.basicConfig(level=logging.ERROR, format=config.log_format, stream=sys.stdout)
configure_logger()

logger = logging.getLogger(__name__)
