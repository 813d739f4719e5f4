# todoapp/logging_setup.py

import logging
import sys

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a single console handler.

    Safe to call more than once; existing handlers installed by a previous
    call are replaced instead of duplicated.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, "_todoapp_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._todoapp_handler = True
    root.addHandler(handler)

    # uvicorn access logs are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
