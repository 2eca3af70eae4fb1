"""
Relation API client that adds creators to the user's block list.
"""

from typing import Optional, Dict, Any, Tuple

import httpx
from loguru import logger

from ..models.schemas import BlockerConfig, BlockResult, FailureKind, SessionContext


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class RelationBlocker:
    """Issues one relation-modify request per creator."""

    def __init__(
        self,
        session: SessionContext,
        config: Optional[BlockerConfig] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize blocker.

        Args:
            session: Logged-in session holding the CSRF token and cookies
            config: Endpoint and action settings
            client: HTTP client to reuse (one is created on first use otherwise)
        """
        self.session = session
        self.config = config or BlockerConfig()
        self.client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                cookies=self.session.cookies,
                headers=self._headers(),
                proxy=self.config.proxy_url
            )
        return self.client

    def _headers(self) -> Dict[str, str]:
        return {
            'User-Agent': self.config.user_agent or DEFAULT_USER_AGENT,
            'Referer': 'https://www.bilibili.com/',
            'Origin': 'https://www.bilibili.com'
        }

    def _form(self, uid: str) -> Dict[str, Any]:
        return {
            'fid': uid,
            'act': self.config.block_action,
            're_src': self.config.source_tag,
            'jsonp': 'jsonp',
            'csrf': self.session.csrf_token
        }

    async def block_user(self, uid: str) -> BlockResult:
        """
        Block a single creator.

        Args:
            uid: Creator UID

        Returns:
            BlockResult describing the outcome
        """
        if not self.session.authenticated:
            return BlockResult(
                success=False,
                uid=uid,
                message="Not Logged In",
                failure=FailureKind.UNAUTHENTICATED
            )

        try:
            # data= sends application/x-www-form-urlencoded
            response = await self._get_client().post(self.config.endpoint, data=self._form(uid))
            response.raise_for_status()
            code, message = self._parse_body(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Network error blocking UID {uid}: {e}")
            return BlockResult(
                success=False,
                uid=uid,
                message="Network Error",
                failure=FailureKind.NETWORK_ERROR
            )

        if code == 0:
            logger.info(f"Blocked UID: {uid}")
            return BlockResult(success=True, uid=uid, code=code)

        logger.warning(f"Failed to block UID {uid}: {message}")
        return BlockResult(
            success=False,
            uid=uid,
            message=message,
            failure=FailureKind.PROVIDER_REJECTED,
            code=code
        )

    @staticmethod
    def _parse_body(data: Any) -> Tuple[int, Optional[str]]:
        """Read ``code`` and ``message`` from a relation API body."""
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected response body: {data!r}")

        code = data.get('code')
        # bool is an int subclass, {"code": false} is not a valid code
        if not isinstance(code, int) or isinstance(code, bool):
            raise ValueError(f"Unexpected response code: {code!r}")

        message = data.get('message')
        if message is not None and not isinstance(message, str):
            message = str(message)
        return code, message

    async def close(self):
        """Close the HTTP client if this blocker created it."""
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
