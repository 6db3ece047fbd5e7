import logging
import os

from rich.logging import RichHandler


class CenteredFormatter(logging.Formatter):
    longest_name_length = 12  # grows with the longest logger name seen

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=12):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.longest_name_length = initial_width

    def format(self, record):
        CenteredFormatter.longest_name_length = max(
            CenteredFormatter.longest_name_length, len(record.name)
        )

        width = CenteredFormatter.longest_name_length
        record.name = record.name.center(width)
        return super().format(record)


def get_logger(name=None) -> logging.Logger:
    """
    Returns a logger that writes through RichHandler.

    Level is DEBUG when the DEBUG env var is set, INFO otherwise.
    """
    if name is None:
        name = "biocat"
    logger = logging.getLogger(name)
    log_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        formatter = CenteredFormatter("[%(name)s]  %(message)s")

        console_handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        console_handler.setFormatter(formatter)
        console_handler.setLevel(log_level)
        logger.addHandler(console_handler)

        logger.propagate = False
        logger.debug(f"Logger '{name}' ready.")

    return logger
