import pytest

from sales_rep.crawler import CrawlState, crawl_website, is_relevant_url

from .conftest import FakeLauncher


def chain_site(n):
	"""A site where every page links to the next one and back home."""
	site = {}
	for i in range(n):
		url = "https://acme.test" if i == 0 else f"https://acme.test/p{i}"
		links = ["https://acme.test", f"https://acme.test/p{i + 1}"]
		site[url] = {"links": links}
	return site


def test_breadth_first_order(settings):
	site = {
		"https://acme.test": {"links": ["https://acme.test/a", "https://acme.test/b"]},
		"https://acme.test/a": {"links": ["https://acme.test/a/deep", "https://acme.test/b"]},
		"https://acme.test/b": {"links": ["https://acme.test/b/deep"]},
		"https://acme.test/a/deep": {"links": []},
		"https://acme.test/b/deep": {"links": []},
	}
	launcher = FakeLauncher(site)
	urls = crawl_website("https://acme.test", 20, settings, launcher=launcher)

	assert urls == [
		"https://acme.test",
		"https://acme.test/a",
		"https://acme.test/b",
		"https://acme.test/a/deep",
		"https://acme.test/b/deep",
	]
	visits = [v[0] for v in launcher.browsers[0].pages[0].visits]
	assert visits == urls


def test_never_visits_more_than_max_pages(settings):
	launcher = FakeLauncher(chain_site(30))
	crawl_website("https://acme.test", 5, settings, launcher=launcher)
	page = launcher.browsers[0].pages[0]
	visited = [v[0] for v in page.visits]
	assert len(visited) == 5
	assert len(set(visited)) == 5


def test_discovered_urls_are_unique(settings):
	site = {
		"https://acme.test": {"links": ["https://acme.test/x", "https://acme.test/x", "https://acme.test"]},
		"https://acme.test/x": {"links": ["https://acme.test", "https://acme.test/x"]},
	}
	urls = crawl_website("https://acme.test", 20, settings, launcher=FakeLauncher(site))
	assert urls == ["https://acme.test", "https://acme.test/x"]


def test_other_hosts_and_non_http_links_are_ignored(settings):
	site = {
		"https://acme.test": {"links": [
			"https://other.test/page",
			"https://blog.acme.test/post",
			"mailto:hello@acme.test",
			"javascript:void(0)",
			"http://[broken",
			"https://acme.test/contact",
		]},
		"https://acme.test/contact": {"links": []},
	}
	urls = crawl_website("https://acme.test", 20, settings, launcher=FakeLauncher(site))
	assert urls == ["https://acme.test", "https://acme.test/contact"]


def test_navigation_error_does_not_abort(settings):
	site = {
		"https://acme.test": {"links": ["https://acme.test/broken", "https://acme.test/ok"]},
		"https://acme.test/broken": TimeoutError("Timeout 1000ms exceeded"),
		"https://acme.test/ok": {"links": ["https://acme.test/found-later"]},
	}
	urls = crawl_website("https://acme.test", 20, settings, launcher=FakeLauncher(site))
	assert "https://acme.test/found-later" in urls


def test_single_browser_and_tab_closed_after_crawl(settings):
	launcher = FakeLauncher(chain_site(4))
	crawl_website("https://acme.test", 20, settings, launcher=launcher)
	assert len(launcher.browsers) == 1
	assert len(launcher.browsers[0].pages) == 1
	assert launcher.browsers[0].closed


def test_browser_closed_when_crawl_raises(settings, monkeypatch):
	site = {"https://acme.test": {"links": ["https://acme.test/a"]}}
	launcher = FakeLauncher(site)

	def explode(links, host):
		raise RuntimeError("boom")

	monkeypatch.setattr("sales_rep.crawler.same_host_links", explode)
	with pytest.raises(RuntimeError):
		crawl_website("https://acme.test", 20, settings, launcher=launcher)
	assert launcher.browsers[0].closed


def test_unreachable_base_yields_only_base(settings):
	urls = crawl_website("https://acme.test", 20, settings, launcher=FakeLauncher({}))
	assert urls == ["https://acme.test"]


def test_navigation_uses_configured_timeout(settings):
	launcher = FakeLauncher({"https://acme.test": {"links": []}})
	crawl_website("https://acme.test", 20, settings, launcher=launcher)
	_, wait_until, timeout = launcher.browsers[0].pages[0].visits[0]
	assert wait_until == "networkidle"
	assert timeout == settings.navigation_timeout * 1000


def test_crawl_state_invariants():
	state = CrawlState()
	assert state.discover("https://a.test")
	assert not state.discover("https://a.test")
	assert state.next_url(10) == "https://a.test"
	assert state.visited <= state.discovered
	assert state.next_url(10) is None


def test_is_relevant_url_case_insensitive():
	assert is_relevant_url("https://x.com/Support/Tickets", ["support"])
	assert is_relevant_url("https://x.com/FAQ", ["faq"])
	assert not is_relevant_url("https://x.com/blog", ["faq", "about"])
	# Bare substring matches anywhere, including slugs
	assert is_relevant_url("https://x.com/blog/all-about-cats", ["about"])
