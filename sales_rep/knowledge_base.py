import urllib.parse as urlparse
from typing import List, Optional

from .config import Settings
from .logs import log_info, log_warn
from .models import AnalysisResult, AnalyzedPage

EMPTY_SUMMARY = "No content available for analysis."
FAILED_SUMMARY = "Failed to generate business summary."
LLM_ERROR_SUMMARY = "Failed to generate business summary due to LLM error."


def site_domain(base_url: str) -> str:
	parsed = urlparse.urlparse(base_url)
	return parsed.netloc or base_url.split("/")[0]


def build_summary_prompt(pages: List[AnalyzedPage]) -> str:
	content_summary = "\n\n---\n\n".join(
		f"URL: {p.url}\nTitle: {p.title}\nContent: {p.content[:1500]}" for p in pages
	)
	return (
		"Analyze the following website content and create a comprehensive business summary "
		"for a chatbot knowledge base.\n\n"
		"Provide:\n"
		"1. Company Overview (what they do, mission, key value propositions)\n"
		"2. Products/Services (detailed descriptions, features, benefits)\n"
		"3. Target Audience (who they serve)\n"
		"4. Key Information (pricing, policies, contact details)\n"
		"5. FAQ Insights (common questions and answers)\n"
		"6. Support Information (how customers can get help)\n\n"
		f"Website Content:\n{content_summary}\n\n"
		"Format the response as a structured markdown document suitable for a customer service chatbot:"
	)


def generate_business_summary(pages: List[AnalyzedPage], client, settings: Optional[Settings] = None) -> str:
	if not pages:
		return EMPTY_SUMMARY
	settings = settings or Settings()
	log_info(f"Generating business summary from {len(pages)} pages...")
	try:
		resp = client.chat.completions.create(
			model=settings.model,
			messages=[{"role": "user", "content": build_summary_prompt(pages)}],
			temperature=0.3,
			max_tokens=3000,
			timeout=settings.llm_timeout,
		)
	except Exception as exc:
		log_warn(f"Failed to generate business summary: {exc}")
		return LLM_ERROR_SUMMARY
	if not resp.choices:
		return FAILED_SUMMARY
	return resp.choices[0].message.content or FAILED_SUMMARY


def render_knowledge_base(result: AnalysisResult, summary: str) -> str:
	pages = result.analyzed_pages
	date = result.analysis_date.split("T")[0]
	lines = [
		f"# {site_domain(result.base_url)} - Business Knowledge Base",
		"",
		f"*Generated from {len(pages)} pages analyzed on {date}*",
		"",
		"## Business Summary",
		"",
		summary,
		"",
		"---",
		"",
		"## Source Pages Analyzed",
		"",
	]
	for index, page in enumerate(pages, start=1):
		lines.append(f"### {index}. {page.title or 'Untitled Page'}")
		lines.append(f"**URL**: {page.url}")
		if page.description:
			lines.append(f"**Description**: {page.description}")
		lines.extend([
			"",
			"#### Key Content:",
			f"{page.content[:1000]}...",
			"",
			"---",
			"",
		])
	return "\n".join(lines)


def build_knowledge_base(result: AnalysisResult, client, settings: Optional[Settings] = None) -> str:
	summary = generate_business_summary(result.analyzed_pages, client, settings)
	return render_knowledge_base(result, summary)
