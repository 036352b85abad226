from contextlib import contextmanager
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from sales_rep.config import Settings


class FakePage:
	"""Stand-in for a Playwright page backed by a dict of url -> page entry.

	An entry is {"links": [...], "html": "..."} or an Exception to raise on goto.
	"""

	def __init__(self, site):
		self.site = site
		self.url = None
		self.visits = []
		self.viewports = []
		self.screenshots = []

	def goto(self, url, wait_until=None, timeout=None):
		self.visits.append((url, wait_until, timeout))
		entry = self.site.get(url)
		if entry is None:
			raise TimeoutError(f"Timeout {timeout}ms exceeded navigating to {url}")
		if isinstance(entry, Exception):
			raise entry
		self.url = url

	def eval_on_selector_all(self, selector, script):
		return list(self.site[self.url].get("links", []))

	def content(self):
		return self.site[self.url].get("html", "")

	def set_viewport_size(self, size):
		self.viewports.append(size)

	def screenshot(self, path=None, full_page=False, type="png"):
		with open(path, "wb") as f:
			f.write(b"\x89PNG fake")
		self.screenshots.append(path)


class FakeBrowser:
	def __init__(self, site):
		self.site = site
		self.pages = []
		self.closed = False

	def new_page(self):
		page = FakePage(self.site)
		self.pages.append(page)
		return page


class FakeLauncher:
	"""Callable returning a context manager, like sales_rep.browser.launch_browser."""

	def __init__(self, site):
		self.site = site
		self.browsers = []

	@contextmanager
	def __call__(self):
		browser = FakeBrowser(self.site)
		self.browsers.append(browser)
		try:
			yield browser
		finally:
			browser.closed = True


def completion(content):
	return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def settings(tmp_path):
	return Settings(api_key="sk-test", page_delay=0, navigation_timeout=1.0, analysis_dir=str(tmp_path / "analysis"))


@pytest.fixture
def llm_client():
	return MagicMock()


@pytest.fixture
def failing_llm_client():
	client = MagicMock()
	client.chat.completions.create.side_effect = Exception("429 rate limited")
	return client
