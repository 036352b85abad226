import time
from datetime import datetime, timezone
from typing import List, Optional

from colorama import Fore, Style

from .config import Settings
from .crawler import crawl_website
from .extractor import extract_page_content
from .logs import log_info, log_warn
from .models import AnalysisResult, AnalyzedPage, PageContent
from .relevance import pick_relevant_urls
from .sitemap import fetch_sitemap


def discover_urls(base_url: str, settings: Settings) -> List[str]:
	urls = fetch_sitemap(base_url, settings)
	if urls is None:
		log_warn("Sitemap not available, crawling website...")
		urls = crawl_website(base_url, settings.max_pages, settings)
	return urls


def admit_page(url: str, content: Optional[PageContent], settings: Settings) -> Optional[AnalyzedPage]:
	"""Promote extracted content into the corpus, or None if it is too thin."""
	if content is None or len(content.content) <= settings.min_content_length:
		return None
	return AnalyzedPage(
		url=url,
		title=content.title,
		description=content.meta_description,
		content=content.content[: settings.max_content_length],
	)


def analyze_website(base_url: str, client, settings: Optional[Settings] = None) -> AnalysisResult:
	"""Discover, select and extract the pages of base_url.

	Pages are processed one at a time with settings.page_delay seconds
	between them. An empty corpus is a valid result.
	"""
	settings = settings or Settings()
	log_info(f"Starting analysis of: {Fore.WHITE}{base_url}{Style.RESET_ALL}")

	urls = discover_urls(base_url, settings)
	log_info(f"Found {len(urls)} total URLs")

	relevant = pick_relevant_urls(urls, base_url, client, settings)
	log_info(f"Processing {len(relevant)} selected URLs")

	pages: List[AnalyzedPage] = []
	for i, url in enumerate(relevant, start=1):
		log_info(f"[{i}/{len(relevant)}] Analyzing: {url}")
		page = admit_page(url, extract_page_content(url, settings), settings)
		if page:
			pages.append(page)
			log_info(f"✓ Added {url} ({len(page.content)} chars)")
		else:
			log_warn(f"Skipped {url}: no usable content")
		if settings.page_delay > 0:
			time.sleep(settings.page_delay)

	log_info(f"Analysis complete: {len(pages)} pages analyzed")
	return AnalysisResult(
		base_url=base_url,
		analyzed_pages=pages,
		analysis_date=datetime.now(timezone.utc).isoformat(),
		page_count=len(pages),
		discovered_count=len(urls),
	)
