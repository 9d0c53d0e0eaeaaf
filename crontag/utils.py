import logging
import time
from contextlib import ContextDecorator, contextmanager

from crontag.errors import EncodingError


class cmtimer(ContextDecorator):
    """Log the time spent in a block at debug level

    The message is formatted lazily with args, like a logging call.
    """

    def __init__(self, msg, *args, logger=None):
        self.msg = msg
        self.args = args
        self.logger = logger or logging.getLogger(__name__)
        self.elapsed = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, type, value, traceback):
        self.elapsed = time.perf_counter() - self.start
        if value is None:
            self.logger.debug(f"{self.msg} took %.3f seconds", *self.args, self.elapsed)


@contextmanager
def utf8_input(filename: str):
    """Report input that is not UTF-8 as an EncodingError for filename"""
    try:
        yield
    except UnicodeDecodeError as exc:
        raise EncodingError(f"Invalid UTF-8: {exc.reason}", filename=filename) from exc
