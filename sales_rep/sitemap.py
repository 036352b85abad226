import urllib.parse as urlparse
from typing import List, Optional

import requests
from lxml import etree

from .config import Settings
from .errors import SitemapUnavailable
from .logs import log_info, log_warn


def _local_name(element) -> str:
	tag = element.tag
	if not isinstance(tag, str):
		return ""
	return etree.QName(tag).localname


def parse_sitemap_for_urls(sitemap_xml: bytes) -> List[str]:
	"""Return every <urlset><url><loc> value in document order.

	Namespaces are ignored so that sitemaps with or without the
	sitemaps.org namespace parse the same way. Raises etree.XMLSyntaxError
	on malformed input.
	"""
	root = etree.fromstring(sitemap_xml)
	urls: List[str] = []
	if _local_name(root) != "urlset":
		return urls
	for url_node in root:
		if _local_name(url_node) != "url":
			continue
		for child in url_node:
			if _local_name(child) == "loc":
				if child.text and child.text.strip():
					urls.append(child.text.strip())
				break
	return urls


def fetch_sitemap_xml(url: str, session: requests.Session, timeout: float) -> bytes:
	resp = session.get(url, timeout=timeout)
	if not resp.ok:
		raise SitemapUnavailable(url, resp.status_code)
	return resp.content


def fetch_sitemap(
	base_url: str,
	settings: Optional[Settings] = None,
	session: Optional[requests.Session] = None,
) -> Optional[List[str]]:
	"""Fetch {base}/sitemap.xml and list its page URLs.

	Returns None when the sitemap is missing or unreadable; callers fall
	back to crawling in that case.
	"""
	settings = settings or Settings()
	if session is None:
		session = requests.Session()
		session.headers.update({"User-Agent": settings.user_agent})
	sitemap_url = urlparse.urljoin(base_url, "/sitemap.xml")
	try:
		xml = fetch_sitemap_xml(sitemap_url, session, settings.navigation_timeout)
		urls = parse_sitemap_for_urls(xml)
	except (SitemapUnavailable, requests.RequestException, etree.XMLSyntaxError) as exc:
		log_warn(f"Sitemap fetch failed: {exc}")
		return None
	log_info(f"Found {len(urls)} URLs in sitemap {sitemap_url}")
	return urls
