"""
Headless Chromium embedding host for the frame probe.

A blank harness page holds a single iframe. Loading the target means
pointing that iframe at it and waiting (in page JavaScript) for its load or
error event; the access check then tries to read ``contentWindow.length``
from the harness side.

Requirements:
    pip install playwright
    playwright install chromium
"""

from typing import Optional

from playwright.async_api import Browser, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from framecheck.core.config import Config
from framecheck.core.probe import FrameHost

FRAME_ID = "probe-frame"

_HARNESS = f"""<!DOCTYPE html>
<html><head><title>framecheck harness</title></head>
<body style="margin:0">
<iframe id="{FRAME_ID}" title="Test Frame" width="1024" height="768"
        style="border:0;opacity:0.4"></iframe>
</body></html>
"""

# Resolves "load" or "error" once the iframe settles on the new src.
_LOAD_JS = """(url) => new Promise((resolve) => {
    const frame = document.getElementById("%s");
    if (!frame) { resolve("error"); return; }
    frame.onload = () => resolve("load");
    frame.onerror = () => resolve("error");
    frame.src = url;
})""" % FRAME_ID

_ACCESS_JS = """() => {
    try {
        const w = document.getElementById("%s").contentWindow;
        return !!w && w.length !== undefined;
    } catch (e) {
        return false;
    }
}""" % FRAME_ID


class PlaywrightFrameHost(FrameHost):
    """
    FrameHost backed by a Playwright Chromium page.

    Usage:
        async with PlaywrightFrameHost(config) as host:
            outcome = await FrameProbe(host).probe(url)
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self._pw = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    async def start(self):
        self._pw = await async_playwright().start()
        launch_args = {"headless": self.config.headless}
        if self.config.proxy:
            launch_args["proxy"] = {"server": self.config.proxy}
        try:
            self._browser = await self._pw.chromium.launch(**launch_args)
            context = await self._browser.new_context(
                user_agent=self.config.user_agent, ignore_https_errors=True)
            self._page = await context.new_page()
        except Exception:
            await self.stop()
            raise

    async def stop(self):
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._pw:
            await self._pw.stop()
            self._pw = None
        self._page = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, *exc):
        await self.stop()

    # ── FrameHost ───────────────────────────────────────────────

    async def reset(self) -> None:
        await self._require_page().set_content(_HARNESS)

    async def load(self, url: str) -> bool:
        state = await self._require_page().evaluate(_LOAD_JS, url)
        return state == "load"

    async def can_access(self) -> bool:
        try:
            return bool(await self._require_page().evaluate(_ACCESS_JS))
        except PlaywrightError:
            return False

    def _require_page(self) -> Page:
        if self._page is None:
            raise RuntimeError("PlaywrightFrameHost used before start()")
        return self._page
