from typing import Iterable, List, Optional

from .config import Settings
from .crawler import is_relevant_url
from .logs import log_info, log_warn


def build_relevance_prompt(urls: List[str], base_url: str, max_relevant: int = 15) -> str:
	url_list = "\n".join(urls)
	return (
		"Analyze this list of URLs from a business website and identify the most relevant pages "
		"for a customer support representative to answer questions about the company's products, "
		"services, and policies.\n\n"
		"Look for pages like:\n"
		"- Products/services pages\n"
		"- FAQ/help/support pages\n"
		"- About us/company information\n"
		"- Pricing/offers\n"
		"- Contact information\n"
		"- Terms of service/policies\n"
		"- Case studies/testimonials\n\n"
		f"Website: {base_url}\n\n"
		f"URLs to analyze:\n{url_list}\n\n"
		f"Return ONLY the most relevant URLs (max {max_relevant}), one per line, "
		"without any explanations or additional text:"
	)


def parse_url_lines(text: str, allowed: Optional[Iterable[str]] = None, limit: int = 15) -> List[str]:
	"""Keep lines that look like URLs, in order, without duplicates.

	When allowed is given, URLs the model made up are dropped.
	"""
	allowed_set = set(allowed) if allowed is not None else None
	picked: List[str] = []
	for line in text.split("\n"):
		url = line.strip()
		if not url or not url.startswith("http"):
			continue
		if url in picked:
			continue
		if allowed_set is not None and url not in allowed_set:
			log_warn(f"Ignoring URL not found on the site: {url}")
			continue
		picked.append(url)
		if len(picked) >= limit:
			break
	return picked


def keyword_fallback(urls: List[str], keywords: Iterable[str], limit: int = 15) -> List[str]:
	keywords = list(keywords)
	picked: List[str] = []
	for url in urls:
		if url in picked or not is_relevant_url(url, keywords):
			continue
		picked.append(url)
		if len(picked) >= limit:
			break
	return picked


def pick_relevant_urls(urls: List[str], base_url: str, client, settings: Optional[Settings] = None) -> List[str]:
	"""Ask the model which discovered URLs are worth analyzing.

	Only the first settings.max_candidate_urls URLs are shown to the model.
	If the call raises or returns no content, URLs are picked by keyword
	instead, from the full list. A reply without usable URL lines gives [].
	"""
	settings = settings or Settings()
	log_info("Using LLM to identify relevant pages...")
	candidates = urls[: settings.max_candidate_urls]
	prompt = build_relevance_prompt(candidates, base_url, settings.max_relevant_urls)
	try:
		resp = client.chat.completions.create(
			model=settings.model,
			messages=[{"role": "user", "content": prompt}],
			temperature=0.1,
			max_tokens=1000,
			timeout=settings.llm_timeout,
		)
		content = resp.choices[0].message.content
		if content is None:
			raise ValueError("empty completion")
	except Exception as exc:
		log_warn(f"LLM analysis failed, falling back to keyword matching: {exc}")
		picked = keyword_fallback(urls, settings.keywords, settings.max_relevant_urls)
		log_info(f"Keyword matching selected {len(picked)} URLs")
		return picked

	picked = parse_url_lines(content, allowed=urls, limit=settings.max_relevant_urls)
	log_info(f"LLM identified {len(picked)} relevant URLs")
	return picked
