"""
Tests for CLI helpers.
"""

import argparse
import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from recblocker.cli import ButtonTrigger, build_config, dry_run_html, resolve_cookie_header, resolve_storage_state
from recblocker.models.schemas import BlockResult, BlockerConfig, ExpandMode, ExtractionResult, RunState, SessionContext
from recblocker.run_blocker import BatchBlockOrchestrator


SNAPSHOT = """
<div class="recommend-list-v1">
    <div class="video-page-card-small"><div class="upname"><a href="//space.bilibili.com/8/">a</a></div></div>
    <div class="video-page-card-small"><div class="upname"><a href="//space.bilibili.com/9/">b</a></div></div>
    <div class="video-page-card-small"><div class="upname"><a href="//space.bilibili.com/8/">a</a></div></div>
</div>
"""


def make_args(**overrides) -> argparse.Namespace:
    values = dict(
        interval=0.3, expand='auto', proxy=None, user_agent=None,
        cookie=None, storage_state=None
    )
    values.update(overrides)
    return argparse.Namespace(**values)


class TestCli:
    """Test argument handling and the dry run."""

    def test_build_config(self):
        """Test flags map onto the configuration."""
        config = build_config(make_args(interval=1.0, expand='never'))

        assert config.block_interval == 1.0
        assert config.expand_mode == ExpandMode.NEVER

    def test_build_config_rejects_negative_interval(self):
        """Test validation errors surface as ValueError."""
        with pytest.raises(ValueError, match="Delay must not be negative"):
            build_config(make_args(interval=-1))

    def test_build_config_accepts_zero_interval(self):
        """Test a zero interval means no wait between requests."""
        assert build_config(make_args(interval=0)).block_interval == 0

    def test_cookie_from_env(self):
        """Test BILIBILI_COOKIE is used when no flag is given."""
        with patch.dict('os.environ', {'BILIBILI_COOKIE': 'bili_jct=env'}):
            assert resolve_cookie_header(make_args()) == 'bili_jct=env'
            assert resolve_cookie_header(make_args(cookie='bili_jct=flag')) == 'bili_jct=flag'

    def test_missing_storage_state(self, tmp_path):
        """Test a missing storage state file is ignored."""
        with patch.dict('os.environ', {}, clear=True):
            assert resolve_storage_state(make_args(storage_state=str(tmp_path / 'nope.json'))) is None

        state = tmp_path / 'state.json'
        state.write_text('{"cookies": [], "origins": []}', encoding='utf-8')
        assert resolve_storage_state(make_args(storage_state=str(state))) == str(state)

    @pytest.mark.asyncio
    async def test_dry_run_html(self, tmp_path):
        """Test UIDs listed from a saved page."""
        path = tmp_path / 'page.html'
        path.write_text(SNAPSHOT, encoding='utf-8')

        uids = await dry_run_html(str(path), BlockerConfig(), 'https://www.bilibili.com/video/BV1')

        assert uids == ['8', '9']


class TestButtonTrigger:
    """Test the injected button wiring used when serving a page."""

    def setup_method(self):
        """Setup mocked page, button interface and a gated orchestrator."""
        self.page = MagicMock()
        self.page.wait_for_timeout = AsyncMock()
        self.ui = AsyncMock()
        self.config = BlockerConfig(mount_delay=2.0, block_interval=0)

        self.extractor = AsyncMock()
        self.extractor.extract.return_value = ExtractionResult(container_found=True, uids=["1"])
        self.blocker = AsyncMock()
        self.blocker.block_user.return_value = BlockResult(success=True, uid="1")
        self.dialogs = AsyncMock()
        self.dialogs.confirm.return_value = True
        self.orchestrator = BatchBlockOrchestrator(
            SessionContext(csrf_token="csrf"),
            self.extractor,
            self.blocker,
            self.dialogs,
            self.config,
            sleep=AsyncMock()
        )
        self.trigger = ButtonTrigger(self.page, self.ui, self.orchestrator, self.config)

    @pytest.mark.asyncio
    async def test_click_runs_orchestrator(self):
        """Test a click schedules one full run in the background."""
        await self.trigger.on_click()
        await asyncio.gather(*list(self.trigger.runs))

        self.blocker.block_user.assert_awaited_once_with("1")
        assert self.orchestrator.history[-2:] == [RunState.DONE, RunState.IDLE]

    @pytest.mark.asyncio
    async def test_second_click_while_running_is_ignored(self):
        """Test clicking again during a run neither extracts nor blocks twice."""
        gate = asyncio.Event()

        async def held_expand():
            await gate.wait()
            return False

        self.extractor.expand_list_if_needed.side_effect = held_expand

        await self.trigger.on_click()
        await asyncio.sleep(0)
        assert self.orchestrator.state == RunState.CONFIRMING

        await self.trigger.on_click()
        await asyncio.sleep(0)

        gate.set()
        await asyncio.gather(*list(self.trigger.runs))
        await asyncio.sleep(0)

        assert self.extractor.expand_list_if_needed.await_count == 1
        self.extractor.extract.assert_awaited_once()
        self.blocker.block_user.assert_awaited_once_with("1")
        assert self.orchestrator.state == RunState.IDLE
        assert self.trigger.runs == set()

    @pytest.mark.asyncio
    async def test_failed_run_is_contained(self):
        """Test an exception inside a run does not escape the task."""
        orchestrator = AsyncMock()
        orchestrator.run.side_effect = Exception("Target page closed")
        trigger = ButtonTrigger(self.page, self.ui, orchestrator, self.config)

        await trigger.on_click()
        results = await asyncio.gather(*list(trigger.runs))

        assert results == [None]
        orchestrator.run.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_mount_waits_then_mounts(self):
        """Test the button is injected after the mount delay."""
        await self.trigger.mount()

        self.page.wait_for_timeout.assert_awaited_once_with(2000.0)
        self.ui.mount_trigger.assert_awaited_once_with(self.trigger.on_click)

    @pytest.mark.asyncio
    async def test_attach_remounts_on_load(self):
        """Test the button is mounted at once and again after each load."""
        await self.trigger.attach()

        self.page.on.assert_called_once_with('load', self.trigger.mount)
        assert self.ui.mount_trigger.await_count == 1

        on_load = self.page.on.call_args.args[1]
        await on_load(self.page)

        assert self.ui.mount_trigger.await_count == 2
