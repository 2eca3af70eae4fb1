"""
Command-line interface for the recommendation batch blocker.
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from playwright.async_api import async_playwright
from loguru import logger

from .models.schemas import BlockerConfig, ExpandMode
from .run_blocker import BatchBlockOrchestrator
from .sources.recommendations import HtmlRecommendationExtractor, PageRecommendationExtractor
from .sources.relation import RelationBlocker
from .ui.interface import ConsoleInterface, PageInterface
from .utils.cookies import header_to_playwright_cookies, session_from_context


def setup_logging(log_level: str = "INFO"):
    """Setup logging configuration."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )


def build_config(args: argparse.Namespace) -> BlockerConfig:
    """Create the runtime configuration from parsed arguments."""
    return BlockerConfig(
        block_interval=args.interval,
        expand_mode=ExpandMode(args.expand),
        proxy_url=args.proxy,
        user_agent=args.user_agent
    )


def resolve_cookie_header(args: argparse.Namespace) -> Optional[str]:
    return args.cookie or os.getenv('BILIBILI_COOKIE')


def resolve_storage_state(args: argparse.Namespace) -> Optional[str]:
    path = args.storage_state or os.getenv('BILIBILI_STORAGE_STATE')
    if path and not os.path.exists(path):
        logger.warning(f"Storage state file not found: {path}")
        return None
    return path


async def dry_run_html(html_path: str, config: BlockerConfig, base_url: str) -> List[str]:
    """
    Extract UIDs from a saved page without sending any request.

    Args:
        html_path: Saved HTML of a video page
        config: Selectors
        base_url: URL the snapshot was taken from

    Returns:
        Unique UIDs, empty when the container is missing
    """
    with open(html_path, 'r', encoding='utf-8') as file:
        html = file.read()

    extractor = HtmlRecommendationExtractor(html, base_url=base_url, config=config)
    extraction = await extractor.extract()
    if not extraction.container_found:
        logger.error(f"Recommendation container not found in {html_path}")
    return extraction.uids


async def _guarded_run(orchestrator: BatchBlockOrchestrator):
    try:
        await orchestrator.run()
    except Exception as e:
        logger.error(f"Batch block run aborted: {e}")


class ButtonTrigger:
    """Keeps the Block All button on the page and runs the orchestrator per click."""

    def __init__(self, page, ui: PageInterface, orchestrator: BatchBlockOrchestrator, config: BlockerConfig):
        self.page = page
        self.ui = ui
        self.orchestrator = orchestrator
        self.config = config
        self.runs = set()

    async def on_click(self):
        # Runs in the background so the page callback returns at once
        task = asyncio.create_task(_guarded_run(self.orchestrator))
        self.runs.add(task)
        task.add_done_callback(self.runs.discard)

    async def mount(self, _=None):
        await self.page.wait_for_timeout(self.config.mount_delay * 1000)
        await self.ui.mount_trigger(self.on_click)

    async def attach(self):
        """Mount now and again after every page load."""
        self.page.on('load', self.mount)
        await self.mount()


async def serve(
    video_url: str,
    config: BlockerConfig,
    cookie_header: Optional[str] = None,
    storage_state: Optional[str] = None,
    headless: bool = False,
    run_now: bool = False,
    assume_yes: bool = False
) -> int:
    """
    Open the video page and block recommended creators.

    With ``run_now`` a single run is made using console prompts; otherwise the
    trigger button is mounted and clicks are served until the page closes.

    Returns:
        Process exit code
    """
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=headless,
            args=['--disable-blink-features=AutomationControlled']
        )
        try:
            context = await browser.new_context(
                storage_state=storage_state,
                user_agent=config.user_agent,
                viewport={'width': 1920, 'height': 1080}
            )
            if cookie_header:
                await context.add_cookies(header_to_playwright_cookies(cookie_header))

            # Credential is read once per session
            session = await session_from_context(context, config.csrf_cookie)

            page = await context.new_page()
            await page.goto(video_url, wait_until='load')

            extractor = PageRecommendationExtractor(page, config)
            blocker = RelationBlocker(session, config)
            try:
                if run_now:
                    orchestrator = BatchBlockOrchestrator(
                        session, extractor, blocker, ConsoleInterface(assume_yes), config
                    )
                    report = await orchestrator.run()
                    return 0 if report.failure is None else 1

                ui = PageInterface(page, config)
                orchestrator = BatchBlockOrchestrator(session, extractor, blocker, ui, config)
                closed = asyncio.Event()
                page.on('close', lambda _: closed.set())

                await ButtonTrigger(page, ui, orchestrator, config).attach()
                logger.info("Waiting for clicks on the Block All button, close the page to exit")
                await closed.wait()
                return 0

            finally:
                await blocker.close()

        finally:
            await browser.close()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Batch-block the creators in a Bilibili video's recommendation sidebar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Open a video with a saved login and click the injected button
  recblocker https://www.bilibili.com/video/BV1xx411c7mD --storage-state state.json

  # Block immediately, confirming in the terminal
  recblocker https://www.bilibili.com/video/BV1xx411c7mD --cookie "SESSDATA=...; bili_jct=..." --run-now

  # List the creators found in a saved page
  recblocker --html page.html
        """
    )

    parser.add_argument('video_url', nargs='?', help='Bilibili video page URL')
    parser.add_argument('--cookie', help='Raw Cookie header of a logged-in session (env: BILIBILI_COOKIE)')
    parser.add_argument('--storage-state', help='Playwright storage state file (env: BILIBILI_STORAGE_STATE)')
    parser.add_argument('--run-now', action='store_true', help='Run once immediately with terminal prompts')
    parser.add_argument('--yes', action='store_true', help='Skip the confirmation prompt with --run-now')
    parser.add_argument('--html', help='Dry run: list creators found in a saved HTML page')
    parser.add_argument(
        '--base-url',
        default='https://www.bilibili.com/',
        help='URL the --html snapshot was saved from (default: https://www.bilibili.com/)'
    )
    parser.add_argument(
        '--interval',
        type=float,
        default=0.3,
        help='Seconds to wait between block requests (default: 0.3)'
    )
    parser.add_argument(
        '--expand',
        choices=[mode.value for mode in ExpandMode],
        default=ExpandMode.AUTO.value,
        help='Click the "Expand" footer before scraping: auto = only when visible (default: auto)'
    )
    parser.add_argument('--proxy', help='Proxy URL for API requests')
    parser.add_argument('--user-agent', help='User agent for the browser and API requests')
    parser.add_argument('--headless', action='store_true', help='Run the browser headless (use with --run-now)')
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )

    args = parser.parse_args()

    setup_logging(args.log_level)

    try:
        config = build_config(args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    if args.html:
        if not os.path.exists(args.html):
            logger.error(f"Input file not found: {args.html}")
            sys.exit(1)

        uids = asyncio.run(dry_run_html(args.html, config, args.base_url))
        for uid in uids:
            print(uid)
        sys.exit(0 if uids else 1)

    if not args.video_url:
        logger.error("Either a video URL or --html must be specified")
        sys.exit(1)

    if args.headless and not args.run_now:
        logger.error("--headless needs --run-now, the Block All button cannot be clicked without a window")
        sys.exit(1)

    try:
        code = asyncio.run(serve(
            args.video_url,
            config,
            cookie_header=resolve_cookie_header(args),
            storage_state=resolve_storage_state(args),
            headless=args.headless,
            run_now=args.run_now,
            assume_yes=args.yes
        ))
    except Exception as e:
        logger.error(f"Error during batch block: {e}")
        sys.exit(1)

    sys.exit(code)


if __name__ == '__main__':
    main()
