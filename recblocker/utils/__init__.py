"""Utility modules for throttling, cookie handling and URL parsing."""

from .rate_limiter import IntervalThrottle
from .parsers import parse_uid_from_url, normalize_url, extract_uids, parse_cookie_header

__all__ = [
    "IntervalThrottle",
    "parse_uid_from_url",
    "normalize_url",
    "extract_uids",
    "parse_cookie_header"
]
