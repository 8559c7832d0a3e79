"""Report identifiers: 24 hex digits, sortable by creation time"""

import itertools
import random
import re
import time

REPORT_ID_PATTERN = re.compile(r"^[0-9a-f]{24}$")

_COUNTER_SPACE = 16**12
_counter = itertools.count(random.randrange(_COUNTER_SPACE))


def new_report_id() -> str:
    """
    Generate a new report identifier.

    The first 12 hex digits hold the creation time in milliseconds, the last
    12 a per-process counter, so ids created later always sort higher.
    """
    millis = int(time.time() * 1000)
    return f"{millis:012x}{next(_counter) % _COUNTER_SPACE:012x}"


def is_valid_report_id(value: str) -> bool:
    return bool(REPORT_ID_PATTERN.match(value))
