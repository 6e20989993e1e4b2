from datetime import datetime
from typing import Optional

import pytz

UTC = pytz.UTC


def from_unix(ts) -> Optional[str]:
    """
    Convert a Telegram unix `date` into an ISO-8601 UTC string.

    Returns None when the value is missing or not a number, so records
    built from odd updates still get written.
    """
    if ts is None or isinstance(ts, bool):
        return None
    try:
        return datetime.fromtimestamp(int(ts), UTC).isoformat()
    except (TypeError, ValueError, OverflowError, OSError):
        return None
