import os
import functools
import hashlib
from datetime import datetime

CACHE_DIR = "cache"


def cache_daily(marker_file, key=None, output=None):
    """
    Decorator that runs a function at most once per calendar day.
    The marker_file parameter names the file in CACHE_DIR holding the date of the last run.
    key, if given, is called with the function's arguments and its result is hashed
    into the marker name, so different arguments are tracked separately.
    output, if given, is called the same way and returns a path; the function runs
    again whenever that path is missing.
    Pass force=True to the decorated function to run it regardless.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, force=False, **kwargs):
            name = marker_file
            if key is not None:
                digest = hashlib.sha1(key(*args, **kwargs).encode("utf-8")).hexdigest()[:12]
                name = f"{marker_file}.{digest}"
            marker_path = os.path.join(CACHE_DIR, name)
            os.makedirs(CACHE_DIR, exist_ok=True)
            today = datetime.now().strftime('%Y-%m-%d')

            output_missing = output is not None and not os.path.exists(output(*args, **kwargs))
            if not force and not output_missing and os.path.exists(marker_path):
                with open(marker_path, 'r') as f:
                    if f.read().strip() == today:
                        print(f"Using cached data for {func.__name__}")
                        return None

            result = func(*args, **kwargs)
            with open(marker_path, 'w') as f:
                f.write(today)
            return result

        return wrapper
    return decorator
