r"""Retry-After header parsing utilities.

This module turns the Retry-After header of an HTTP response into a
delay override that can be passed to ``Retrier.failed`` or used as the
``delay_override`` hook of ``Retrier.run``.
It requires the ``http`` extra (``pip install aretrier[http]``).
"""

from __future__ import annotations

__all__ = ["parse_retry_after", "retry_after_delay"]

import logging
import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx

logger: logging.Logger = logging.getLogger(__name__)


def parse_retry_after(retry_after_header: str | None) -> float | None:
    """Parse the Retry-After header value of an HTTP response.

    The header is either a number of seconds (e.g. ``"120"``) or an
    HTTP-date (e.g. ``"Wed, 21 Oct 2015 07:28:00 GMT"``) according to
    RFC 7231.

    Args:
        retry_after_header: The value of the Retry-After header, or
            ``None`` if the header is absent.

    Returns:
        The number of seconds to wait, or ``None`` if the header is absent
        or is neither a finite number nor a date. Negative values and
        dates in the past are clamped to 0.0.

    Example:
        ```pycon
        >>> from aretrier.utils import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> parse_retry_after(None) is None
        True
        >>> parse_retry_after("invalid") is None
        True

        ```
    """
    if retry_after_header is None:
        return None
    value = retry_after_header.strip()
    try:
        seconds = float(value)
    except ValueError:
        seconds = _seconds_until(value)
    if seconds is None or not math.isfinite(seconds):
        logger.debug(f"Ignoring Retry-After header: {retry_after_header!r}")
        return None
    return max(0.0, seconds)


def _seconds_until(http_date: str) -> float | None:
    try:
        retry_date = parsedate_to_datetime(http_date)
    except (ValueError, TypeError, OverflowError):
        return None
    if retry_date.tzinfo is None:
        retry_date = retry_date.replace(tzinfo=timezone.utc)
    return (retry_date - datetime.now(timezone.utc)).total_seconds()


def retry_after_delay(source: object) -> float | None:
    """Return the Retry-After delay of a response, in milliseconds.

    Args:
        source: An ``httpx.Response`` or an ``httpx.HTTPStatusError``
            carrying one. Any other value yields ``None``, so the function
            can be used directly as the ``delay_override`` hook of
            ``Retrier.run``.

    Returns:
        The delay in milliseconds, or ``None`` if no usable Retry-After
        header is available.

    Example:
        ```pycon
        >>> import httpx
        >>> from aretrier.utils import retry_after_delay
        >>> retry_after_delay(httpx.Response(503, headers={"Retry-After": "2"}))
        2000.0
        >>> retry_after_delay(ValueError("boom")) is None
        True

        ```
    """
    if isinstance(source, httpx.HTTPStatusError):
        source = source.response
    if not isinstance(source, httpx.Response):
        return None
    seconds = parse_retry_after(source.headers.get("Retry-After"))
    if seconds is None:
        return None
    return seconds * 1000.0
