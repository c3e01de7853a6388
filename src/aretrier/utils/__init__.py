r"""Utility functions for the aretrier package."""

from __future__ import annotations

__all__ = ["parse_retry_after", "retry_after_delay"]

from aretrier.utils.retry_after import parse_retry_after, retry_after_delay
