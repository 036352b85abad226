import urllib.parse as urlparse
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Set

from .browser import goto_quiet, launch_browser
from .config import Settings
from .logs import log_info, log_warn

LINKS_SCRIPT = "els => els.map(a => a.href)"


def is_relevant_url(url: str, keywords: Iterable[str]) -> bool:
	url_lower = url.lower()
	for keyword in keywords:
		kw = keyword.lower()
		if kw in url_lower or f"/{kw}" in url_lower:
			return True
	return False


@dataclass
class CrawlState:
	"""Bookkeeping for a single breadth-first crawl."""

	visited: Set[str] = field(default_factory=set)
	frontier: deque = field(default_factory=deque)
	discovered: Set[str] = field(default_factory=set)
	order: List[str] = field(default_factory=list)

	def discover(self, url: str) -> bool:
		if url in self.discovered:
			return False
		self.discovered.add(url)
		self.order.append(url)
		self.frontier.append(url)
		return True

	def next_url(self, max_pages: int) -> Optional[str]:
		while self.frontier and len(self.visited) < max_pages:
			url = self.frontier.popleft()
			if url in self.visited:
				continue
			self.visited.add(url)
			return url
		return None


def collect_links(page) -> List[str]:
	hrefs = page.eval_on_selector_all("a[href]", LINKS_SCRIPT)
	return [h for h in hrefs if isinstance(h, str) and h.startswith("http")]


def same_host_links(links: Iterable[str], host: Optional[str]) -> List[str]:
	result: List[str] = []
	for link in links:
		try:
			if urlparse.urlparse(link).hostname == host:
				result.append(link)
		except ValueError:
			# Invalid URL, skip
			continue
	return result


def crawl_website(
	base_url: str,
	max_pages: int = 20,
	settings: Optional[Settings] = None,
	launcher: Optional[Callable] = None,
) -> List[str]:
	"""Breadth-first discovery of same-host links starting at base_url.

	At most max_pages pages are loaded. A page that fails to load is logged
	and skipped. The browser and its single tab are reused for the whole
	crawl and closed when it ends.
	"""
	settings = settings or Settings()
	launcher = launcher or launch_browser
	log_info(f"Starting website crawl of {base_url} (max {max_pages} pages)")
	base_host = urlparse.urlparse(base_url).hostname
	state = CrawlState()
	state.discover(base_url)

	with launcher() as browser:
		page = browser.new_page()
		while True:
			current = state.next_url(max_pages)
			if current is None:
				break
			try:
				goto_quiet(page, current, settings.navigation_timeout)
				links = collect_links(page)
			except Exception as exc:
				log_warn(f"Error crawling {current}: {exc}")
				continue
			for link in same_host_links(links, base_host):
				state.discover(link)

	log_info(f"Crawl visited {len(state.visited)} pages, discovered {len(state.order)} URLs")
	return list(state.order)
