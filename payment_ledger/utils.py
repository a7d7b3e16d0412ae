import logging
import time
from functools import wraps

logger = logging.getLogger(__name__)


# timing decorator
def timing(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed_time = time.perf_counter() - start_time
        logger.info("%s executed in %.2f milliseconds", func.__name__, 1000 * elapsed_time)
        return result

    return wrapper
