import re
from typing import Callable, Optional

from bs4 import BeautifulSoup

from .browser import goto_quiet, launch_browser
from .config import Settings
from .logs import log_warn
from .models import PageContent

# Navigational chrome that never holds page copy
REMOVE_SELECTORS = [
	"header", "nav", "footer", ".header", ".nav", ".footer",
	".navigation", ".menu", ".sidebar", "aside", ".ads", ".advertisement",
]

# First non-empty match wins
MAIN_CONTENT_SELECTORS = ["main", "article", ".content", "#content"]


def collapse_whitespace(text: str) -> str:
	return re.sub(r"\s+", " ", text).strip()


def parse_page_content(html: str) -> PageContent:
	"""Pull title, meta description and main body text out of a rendered page."""
	soup = BeautifulSoup(html, "lxml")

	title = ""
	title_tag = soup.find("title")
	if title_tag:
		title = title_tag.get_text().strip()
	if not title:
		h1 = soup.find("h1")
		if h1:
			title = h1.get_text().strip()

	meta_description = ""
	meta = soup.find("meta", attrs={"name": "description"})
	if meta and meta.get("content"):
		meta_description = meta["content"]

	for tag in soup(["script", "style", "noscript"]):
		tag.decompose()
	for selector in REMOVE_SELECTORS:
		for el in soup.select(selector):
			el.extract()

	text = ""
	for selector in MAIN_CONTENT_SELECTORS:
		node = soup.select_one(selector)
		if node is not None:
			text = node.get_text()
			if text.strip():
				break
	if not text.strip() and soup.body is not None:
		text = soup.body.get_text()

	return PageContent(
		title=title,
		meta_description=meta_description,
		content=collapse_whitespace(text),
	)


def extract_page_content(
	url: str,
	settings: Optional[Settings] = None,
	launcher: Optional[Callable] = None,
) -> Optional[PageContent]:
	"""Load url in a fresh headless browser and extract its content.

	Returns None on any navigation or parsing failure.
	"""
	settings = settings or Settings()
	launcher = launcher or launch_browser
	try:
		with launcher() as browser:
			page = browser.new_page()
			goto_quiet(page, url, settings.navigation_timeout)
			html = page.content()
		return parse_page_content(html)
	except Exception as exc:
		log_warn(f"Error extracting content from {url}: {exc}")
		return None
