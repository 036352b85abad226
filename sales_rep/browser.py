from contextlib import contextmanager
from typing import Iterator

# Cloud-friendly launch args for containerized environments
LAUNCH_ARGS = [
	"--no-sandbox",
	"--disable-setuid-sandbox",
	"--disable-dev-shm-usage",
	"--disable-accelerated-2d-canvas",
	"--no-first-run",
	"--no-zygote",
	"--disable-gpu",
]


@contextmanager
def launch_browser() -> Iterator:
	"""Launch headless Chromium and close it on every exit path.

	Requires browser binaries: playwright install chromium --with-deps
	"""
	from playwright.sync_api import sync_playwright

	with sync_playwright() as p:
		browser = p.chromium.launch(headless=True, args=LAUNCH_ARGS)
		try:
			yield browser
		finally:
			browser.close()


def goto_quiet(page, url: str, timeout: float) -> None:
	"""Navigate and wait for network quiescence. timeout is in seconds."""
	page.goto(url, wait_until="networkidle", timeout=timeout * 1000)
