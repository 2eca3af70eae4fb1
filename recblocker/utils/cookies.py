"""
Session credential loading from the browser cookie jar.
"""

from typing import Dict, Any, List

from playwright.async_api import BrowserContext
from loguru import logger

from ..models.schemas import SessionContext
from .parsers import parse_cookie_header


BILIBILI_DOMAIN = 'bilibili.com'
CSRF_COOKIE = 'bili_jct'


def session_from_cookies(cookies: Dict[str, str], csrf_cookie: str = CSRF_COOKIE) -> SessionContext:
    """Build the session context from a name/value cookie mapping."""
    token = cookies.get(csrf_cookie) or None
    if token:
        logger.info("Session credential found")
    else:
        logger.warning(f"Cookie {csrf_cookie} not found, blocking is disabled for this session")
    return SessionContext(csrf_token=token, cookies=dict(cookies))


def _bilibili_cookies(cookies: List[Dict[str, Any]]) -> Dict[str, str]:
    jar = {}
    for cookie in cookies:
        domain = (cookie.get('domain') or '').lstrip('.')
        if domain == BILIBILI_DOMAIN or domain.endswith('.' + BILIBILI_DOMAIN):
            jar[cookie['name']] = cookie['value']
    return jar


def header_to_playwright_cookies(header: str) -> List[Dict[str, Any]]:
    """Turn a raw Cookie header into cookies addable to a browser context."""
    return [
        {'name': name, 'value': value, 'domain': '.' + BILIBILI_DOMAIN, 'path': '/'}
        for name, value in parse_cookie_header(header).items()
    ]


async def session_from_context(context: BrowserContext, csrf_cookie: str = CSRF_COOKIE) -> SessionContext:
    """
    Read the session credential once from the browser context.

    Args:
        context: Browser context holding the logged-in session

    Returns:
        SessionContext (unauthenticated when the CSRF cookie is missing)
    """
    try:
        cookies = await context.cookies()
    except Exception as e:
        logger.error(f"Error reading browser cookies: {e}")
        cookies = []
    return session_from_cookies(_bilibili_cookies(cookies), csrf_cookie)
