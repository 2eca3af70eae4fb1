"""
User-facing surfaces: injected page controls and a console fallback.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from playwright.async_api import Page
from loguru import logger

from ..models.schemas import BlockerConfig


TRIGGER_BINDING = '__recblockerStart'
OVERLAY_ID = 'batch-block-status'
MODAL_ID = 'batch-block-modal'

MOUNT_BUTTON_JS = """
([buttonId, binding]) => {
    if (document.getElementById(buttonId)) return false;

    const btn = document.createElement('button');
    btn.id = buttonId;
    btn.textContent = '🚫 Block All';
    Object.assign(btn.style, {
        position: 'fixed',
        top: '150px',
        right: '0px',
        padding: '8px 12px',
        backgroundColor: '#FF6699',
        color: 'white',
        border: 'none',
        borderTopLeftRadius: '6px',
        borderBottomLeftRadius: '6px',
        cursor: 'pointer',
        zIndex: 99999,
        fontSize: '13px',
        fontWeight: 'bold',
        boxShadow: '-2px 2px 5px rgba(0,0,0,0.2)'
    });
    btn.onmouseover = () => btn.style.backgroundColor = '#ff4d85';
    btn.onmouseout = () => btn.style.backgroundColor = '#FF6699';
    btn.onclick = () => window[binding]();
    document.body.appendChild(btn);
    return true;
}
"""

SHOW_PROGRESS_JS = """
([overlayId, text]) => {
    let div = document.getElementById(overlayId);
    if (!div) {
        div = document.createElement('div');
        div.id = overlayId;
        Object.assign(div.style, {
            position: 'fixed',
            top: '50%',
            left: '50%',
            transform: 'translate(-50%, -50%)',
            padding: '20px',
            background: 'rgba(0, 0, 0, 0.85)',
            color: '#fff',
            borderRadius: '8px',
            zIndex: 100001,
            textAlign: 'center',
            fontSize: '16px',
            whiteSpace: 'pre-line',
            boxShadow: '0 4px 15px rgba(0,0,0,0.5)'
        });
        document.body.appendChild(div);
    }
    div.innerText = text;
}
"""

REMOVE_ELEMENT_JS = """
(elementId) => {
    const el = document.getElementById(elementId);
    if (el) el.remove();
}
"""

# Resolves with true on OK, false on Cancel
MODAL_JS = """
([modalId, message, withCancel]) => new Promise(resolve => {
    const old = document.getElementById(modalId);
    if (old) old.remove();

    const box = document.createElement('div');
    box.id = modalId;
    Object.assign(box.style, {
        position: 'fixed',
        top: '50%',
        left: '50%',
        transform: 'translate(-50%, -50%)',
        padding: '20px 24px',
        background: '#fff',
        color: '#18191c',
        borderRadius: '8px',
        zIndex: 100002,
        fontSize: '14px',
        whiteSpace: 'pre-line',
        boxShadow: '0 4px 15px rgba(0,0,0,0.5)'
    });

    const text = document.createElement('p');
    text.innerText = message;
    box.appendChild(text);

    const done = value => { box.remove(); resolve(value); };
    const addButton = (label, value) => {
        const b = document.createElement('button');
        b.textContent = label;
        b.style.margin = '12px 6px 0 0';
        b.onclick = () => done(value);
        box.appendChild(b);
    };
    addButton('OK', true);
    if (withCancel) addButton('Cancel', false);

    document.body.appendChild(box);
})
"""


class UserInterface:
    """Dialogs and progress reporting used by the orchestrator."""

    async def alert(self, message: str) -> None:
        raise NotImplementedError

    async def confirm(self, message: str) -> bool:
        raise NotImplementedError

    async def show_progress(self, index: int, total: int, uid: str) -> None:
        raise NotImplementedError

    async def remove_progress(self) -> None:
        raise NotImplementedError


def progress_text(index: int, total: int, uid: str) -> str:
    """Overlay text for the item at 1-based ``index``."""
    return f"Blocking: {index}/{total}\nUID: {uid}"


class PageInterface(UserInterface):
    """Controls injected into the video page."""

    def __init__(self, page: Page, config: Optional[BlockerConfig] = None):
        """
        Initialize page interface.

        Args:
            page: Video page to decorate
            config: Provides the trigger button id
        """
        self.page = page
        self.config = config or BlockerConfig()
        self._binding_exposed = False

    async def mount_trigger(self, on_click: Callable[[], Awaitable[None]]) -> bool:
        """
        Inject the trigger button unless it is already on the page.

        Args:
            on_click: Coroutine function run when the button is clicked

        Returns:
            True if a new button was added
        """
        try:
            if not self._binding_exposed:
                await self.page.expose_function(TRIGGER_BINDING, on_click)
                self._binding_exposed = True

            mounted = await self.page.evaluate(MOUNT_BUTTON_JS, [self.config.button_id, TRIGGER_BINDING])
            if mounted:
                logger.info("Trigger button mounted")
            else:
                logger.debug("Trigger button already present")
            return bool(mounted)

        except Exception as e:
            logger.error(f"Error mounting trigger button: {e}")
            return False

    async def alert(self, message: str) -> None:
        logger.info(message)
        await self.page.evaluate(MODAL_JS, [MODAL_ID, message, False])

    async def confirm(self, message: str) -> bool:
        answer = await self.page.evaluate(MODAL_JS, [MODAL_ID, message, True])
        return bool(answer)

    async def show_progress(self, index: int, total: int, uid: str) -> None:
        await self.page.evaluate(SHOW_PROGRESS_JS, [OVERLAY_ID, progress_text(index, total, uid)])

    async def remove_progress(self) -> None:
        await self.page.evaluate(REMOVE_ELEMENT_JS, OVERLAY_ID)


class ConsoleInterface(UserInterface):
    """Terminal prompts for one-shot runs."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    async def alert(self, message: str) -> None:
        logger.info(message)
        print(message)

    async def confirm(self, message: str) -> bool:
        if self.assume_yes:
            logger.info("Confirmation skipped (--yes)")
            return True
        answer = await asyncio.to_thread(input, f"{message}\n[y/N] ")
        return answer.strip().lower() in ('y', 'yes')

    async def show_progress(self, index: int, total: int, uid: str) -> None:
        logger.info(progress_text(index, total, uid).replace('\n', ' '))

    async def remove_progress(self) -> None:
        pass
