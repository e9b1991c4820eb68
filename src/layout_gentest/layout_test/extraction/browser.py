"""Playwright session used to run wrapped fixtures and capture their console output.

One ``BrowserSession`` is acquired per extraction batch and released when the
batch ends; fixtures are loaded one page at a time inside it.
"""

import logging
from pathlib import Path

from playwright.sync_api import Browser, Error as PlaywrightError, Playwright, sync_playwright

from layout_gentest.layout_test.config import BrowserConfig
from layout_gentest.layout_test.errors import ExtractionError

logger = logging.getLogger(__name__)


class BrowserSession:
    """Scoped Playwright browser; use as a context manager."""

    def __init__(self, config: BrowserConfig | None = None):
        self.config = config or BrowserConfig()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    def __enter__(self) -> "BrowserSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        if self._browser is not None:
            return
        self._playwright = sync_playwright().start()
        launcher = getattr(self._playwright, self.config.browser_type)
        try:
            self._browser = launcher.launch(headless=self.config.headless)
        except PlaywrightError:
            self._playwright.stop()
            self._playwright = None
            raise
        logger.info("Launched %s (headless=%s)", self.config.browser_type, self.config.headless)

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
            logger.info("Browser session closed")

    def extract(self, page_path: Path) -> list[str]:
        """Load a wrapped fixture page and return the texts of its console log messages."""
        if self._browser is None:
            raise ExtractionError("browser session is not open")

        context = self._browser.new_context(
            viewport={"width": self.config.window_width, "height": self.config.window_height},
            device_scale_factor=self.config.device_scale_factor,
        )
        messages: list[str] = []
        try:
            page = context.new_page()
            page.on("console", lambda msg: messages.append(msg.text) if msg.type == "log" else None)
            page.goto(Path(page_path).resolve().as_uri(), timeout=self.config.page_timeout_ms)
            page.wait_for_load_state("load")
        except PlaywrightError as e:
            raise ExtractionError(f"Failed to load {page_path}: {e}") from e
        finally:
            context.close()

        logger.debug("Captured %d console message(s) from %s", len(messages), page_path)
        return messages
