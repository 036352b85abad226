from unittest.mock import MagicMock

import requests

from sales_rep.sitemap import fetch_sitemap, parse_sitemap_for_urls

SITEMAP = b"""<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
	<url><loc>https://shop.test/</loc><priority>1.0</priority></url>
	<url><loc> https://shop.test/products </loc></url>
	<url><loc>https://shop.test/faq</loc></url>
</urlset>
"""


def make_session(status=200, body=b""):
	session = MagicMock()
	resp = MagicMock()
	resp.ok = 200 <= status < 300
	resp.status_code = status
	resp.content = body
	session.get.return_value = resp
	return session


def test_parse_keeps_document_order():
	assert parse_sitemap_for_urls(SITEMAP) == [
		"https://shop.test/",
		"https://shop.test/products",
		"https://shop.test/faq",
	]


def test_parse_without_namespace():
	xml = b"<urlset><url><loc>https://a.test/x</loc></url><url><loc>https://a.test/y</loc></url></urlset>"
	assert parse_sitemap_for_urls(xml) == ["https://a.test/x", "https://a.test/y"]


def test_fetch_requests_sitemap_at_site_root(settings):
	session = make_session(body=SITEMAP)
	urls = fetch_sitemap("https://shop.test/some/page", settings, session=session)
	assert len(urls) == 3
	called_url = session.get.call_args[0][0]
	assert called_url == "https://shop.test/sitemap.xml"
	assert session.get.call_args[1]["timeout"] == settings.navigation_timeout


def test_fetch_404_returns_none(settings):
	assert fetch_sitemap("https://shop.test", settings, session=make_session(status=404)) is None


def test_fetch_malformed_returns_none(settings):
	session = make_session(body=b"<html><body>Not a sitemap<")
	assert fetch_sitemap("https://shop.test", settings, session=session) is None


def test_fetch_network_error_returns_none(settings):
	session = MagicMock()
	session.get.side_effect = requests.ConnectionError("DNS failure")
	assert fetch_sitemap("https://shop.test", settings, session=session) is None


def test_empty_urlset_is_empty_list(settings):
	session = make_session(body=b"<urlset></urlset>")
	assert fetch_sitemap("https://shop.test", settings, session=session) == []
