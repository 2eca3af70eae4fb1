"""
URL and cookie parsing utilities.
"""

import re
from typing import Optional, List, Dict, Iterable
from urllib.parse import urlparse, urljoin
from loguru import logger


UID_PATTERN = r'space\.bilibili\.com/(\d+)'


def parse_uid_from_url(url: str, pattern: str = UID_PATTERN) -> Optional[str]:
    """
    Extract the creator UID from a profile URL.

    Args:
        url: Profile URL
        pattern: Regex whose first group captures the UID

    Returns:
        UID string or None if the URL carries no UID

    Examples:
        "https://space.bilibili.com/123456?from=rec" -> "123456"
        "//space.bilibili.com/42/video" -> "42"
        "https://www.bilibili.com/video/BV1xx" -> None
    """
    if not url or not isinstance(url, str):
        return None

    match = re.search(pattern, url)
    return match.group(1) if match else None


def normalize_url(url: str, base_url: Optional[str] = None) -> Optional[str]:
    """
    Normalize and validate URL.

    Args:
        url: URL to normalize
        base_url: Base URL for relative and protocol-relative URLs

    Returns:
        Normalized URL or None if invalid
    """
    if not url or not isinstance(url, str):
        return None

    url = url.strip()

    # Relative and protocol-relative hrefs resolve like the browser does
    if base_url and not url.startswith(('http://', 'https://')):
        try:
            url = urljoin(base_url, url)
        except ValueError as e:
            logger.warning(f"Error joining URLs {base_url} + {url}: {e}")
            return None

    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return url


def unique_in_order(items: Iterable[Optional[str]]) -> List[str]:
    """Drop empty values and duplicates, keeping first-seen order."""
    seen = set()
    unique = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def extract_uids(hrefs: Iterable[str], base_url: Optional[str] = None, pattern: str = UID_PATTERN) -> List[str]:
    """
    Resolve link hrefs and collect unique creator UIDs in document order.

    Args:
        hrefs: Raw href attribute values
        base_url: URL of the page the links came from
        pattern: UID regex

    Returns:
        Unique UIDs
    """
    return unique_in_order(
        parse_uid_from_url(normalize_url(href, base_url) or href, pattern)
        for href in hrefs
    )


def parse_cookie_header(header: str) -> Dict[str, str]:
    """
    Parse a raw ``Cookie:`` header value into a dict.

    Args:
        header: e.g. "SESSDATA=abc; bili_jct=def"

    Returns:
        Cookie name to value mapping
    """
    if not header or not isinstance(header, str):
        return {}

    # Accept values pasted together with the header name
    if header.lower().startswith('cookie:'):
        header = header[len('cookie:'):]

    cookies = {}
    for part in header.split(';'):
        name, sep, value = part.strip().partition('=')
        if sep and name:
            cookies[name.strip()] = value.strip()
    return cookies
