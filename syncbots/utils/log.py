"""Logging setup shared by both bots."""

import logging
import os

from syncbots.config import DATA_DIR


def setup_logging(filename):
    os.makedirs(DATA_DIR, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(os.path.join(DATA_DIR, filename)),  # Log to file
            logging.StreamHandler(),  # Log to console
        ],
    )


def log_unhandled_exceptions(loop):
    """Log exceptions from tasks nobody awaited instead of dropping them."""

    def handler(loop, context):
        logging.error(
            f"Unhandled exception: {context.get('message')}",
            exc_info=context.get("exception"),
        )

    loop.set_exception_handler(handler)
