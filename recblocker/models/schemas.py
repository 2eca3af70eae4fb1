"""
Pydantic models for block results, session state and runtime configuration.
"""

import re
from enum import Enum
from typing import List, Optional, Dict

from pydantic import BaseModel, Field, field_validator


class FailureKind(str, Enum):
    """Why a block attempt or a run did not go through."""

    UNAUTHENTICATED = "unauthenticated"
    CONTAINER_NOT_FOUND = "container_not_found"
    EMPTY_RESULT = "empty_result"
    PROVIDER_REJECTED = "provider_rejected"
    NETWORK_ERROR = "network_error"


class RunState(str, Enum):
    """Orchestrator states."""

    IDLE = "idle"
    CONFIRMING = "confirming"
    RUNNING = "running"
    DONE = "done"


class ExpandMode(str, Enum):
    """When to click the "load more" footer before extraction."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class BlockResult(BaseModel):
    """Result of a single block request."""

    success: bool
    uid: str
    message: Optional[str] = None
    failure: Optional[FailureKind] = None
    code: Optional[int] = None


class ExtractionResult(BaseModel):
    """Creator UIDs scraped from the recommendation container."""

    container_found: bool
    uids: List[str] = Field(default_factory=list)

    @field_validator('uids')
    @classmethod
    def validate_uids(cls, v):
        """UIDs are numeric strings."""
        for uid in v:
            if not re.match(r'^\d+$', uid):
                raise ValueError(f'Invalid creator UID: {uid!r}')
        return v


class SessionContext(BaseModel):
    """Credential and cookies of the logged-in browser session."""

    csrf_token: Optional[str] = None
    cookies: Dict[str, str] = Field(default_factory=dict)

    @property
    def authenticated(self) -> bool:
        return bool(self.csrf_token)


class BatchReport(BaseModel):
    """Outcome of one orchestrated run."""

    state: RunState = RunState.IDLE
    failure: Optional[FailureKind] = None
    total: int = 0
    success_count: int = 0
    cancelled: bool = False
    results: List[BlockResult] = Field(default_factory=list)

    @property
    def processed(self) -> List[str]:
        return [result.uid for result in self.results]


class BlockerConfig(BaseModel):
    """Configuration for scraping and blocking."""

    container_selector: str = '.recommend-list-v1'
    expand_selector: str = '.recommend-list-v1 .rec-footer'
    link_selector: str = '.video-page-card-small .upname a'
    uid_pattern: str = r'space\.bilibili\.com/(\d+)'

    endpoint: str = 'https://api.bilibili.com/x/relation/modify'
    block_action: int = 5  # 5 = block
    source_tag: int = 11
    csrf_cookie: str = 'bili_jct'

    block_interval: float = 0.3
    expand_wait: float = 1.5
    expand_mode: ExpandMode = ExpandMode.AUTO
    mount_delay: float = 2.0
    button_id: str = 'batch-block-btn'

    proxy_url: Optional[str] = None
    user_agent: Optional[str] = None

    @field_validator('block_interval', 'expand_wait', 'mount_delay')
    @classmethod
    def validate_delay(cls, v):
        """Validate delay is not negative."""
        if v < 0:
            raise ValueError('Delay must not be negative')
        return v

    @field_validator('uid_pattern')
    @classmethod
    def validate_uid_pattern(cls, v):
        """Pattern must compile and capture the UID."""
        if re.compile(v).groups < 1:
            raise ValueError('UID pattern must have a capturing group')
        return v
