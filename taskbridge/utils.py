# taskbridge/utils.py

import re
from datetime import date, datetime, timezone

from tqdm import tqdm

_OFFSET_WITHOUT_COLON = re.compile(r"([+-]\d{2})(\d{2})$")


def parse_timestamp(value):
    """
    Parse an ISO 8601 timestamp as returned by Jira or Linear.

    Accepts a trailing "Z" and offsets written without a colon
    ("+0000"). Date-only values become midnight UTC. Naive results are
    assumed to be UTC. Empty or unparseable input returns None.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        text = _OFFSET_WITHOUT_COLON.sub(r"\1:\2", text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(value):
    """Render a due date as YYYY-MM-DD, the form both platforms accept."""
    if value is None:
        return None
    return value.date().isoformat() if isinstance(value, datetime) else str(value)


def progress_bar(iterable=None, desc=None, total=None, **kwargs):
    """
    Create a progress bar for an iterable or manual updates.

    :param iterable: Iterable to wrap with progress bar
    :param desc: Description for the progress bar
    :param total: Total number of items (required if iterable is None)
    :param kwargs: Additional keyword arguments for tqdm
    :return: tqdm instance
    """
    return tqdm(
        iterable=iterable,
        desc=desc,
        total=total,
        ncols=100,
        unit="item",
        bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]",
        **kwargs,
    )


def parse_timeout(config):
    """
    Read the optional "timeout" setting (seconds) from a platform config.

    :raises ValueError: if present but not a positive number
    """
    timeout = config.get("timeout")
    if timeout is None:
        return None
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float, str)):
        raise ValueError("timeout must be a positive number of seconds")
    try:
        timeout = float(timeout)
    except ValueError:
        raise ValueError("timeout must be a positive number of seconds") from None
    if timeout <= 0:
        raise ValueError("timeout must be a positive number of seconds")
    return timeout
