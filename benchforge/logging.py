import datetime
import logging
import os


def __getattr__(name):
    if name == "logger":
        return logging.getLogger("benchforge")
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


class LogFormatter(logging.Formatter):
    filename_width = 32

    def format(self, record: logging.LogRecord) -> str:
        # Ignores the format string given at construction
        location = f"{record.filename + ':' + str(record.lineno):<{self.filename_width}}"
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{self.formatTime(record)} | {record.name} | {record.levelname:<8} | {location} | {message}"


def setup_logging(verbose: bool = False):
    """
    Configure the "benchforge" logger.

    Logging stays disabled unless `verbose` is set or the BENCHFORGE_DEBUG environment
    variable is non-empty. If BENCHFORGE_DEBUG contains "file", records are also written
    to a timestamped debug log in the current directory.
    """
    debug = str.lower(os.environ.get("BENCHFORGE_DEBUG", ""))
    logger = logging.getLogger("benchforge")

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if not debug and not verbose:
        logger.disabled = True
        return

    logger.disabled = False
    logger.setLevel(logging.DEBUG)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    stream_handler.setFormatter(LogFormatter())
    logger.addHandler(stream_handler)

    if "file" in debug:
        iso_datetime = datetime.datetime.now().isoformat(timespec="seconds")
        file_handler = logging.FileHandler(f"benchforge_debug_{iso_datetime}.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(LogFormatter())
        logger.addHandler(file_handler)

    logger.debug("Debug logging enabled")
