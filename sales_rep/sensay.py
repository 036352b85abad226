import re
from typing import Dict, Optional

import requests

from .config import SensayConfig
from .knowledge_base import site_domain
from .logs import log_error, log_info, log_warn
from .models import AnalysisContext, AnalysisResult, SensayBot

API_VERSION = "2025-03-25"
REPLICA_MODEL = "gpt-4o"

STATUS_HINTS = {
	400: "This looks like a bad request error. Check the request payload.",
	401: "This looks like an authentication error. Check your SENSAY_API_KEY.",
	403: "This looks like a permissions error. Check your user permissions.",
}


def build_system_message(company_name: str, base_url: str, knowledge_base: str) -> str:
	domain = site_domain(base_url)
	return (
		f"You are a customer service representative bot for {company_name} ({domain}). "
		"This is a demo version, and the business owner is currently testing your capabilities. "
		"You have been trained only on information available from the company's public website. "
		"You want to show the value that the full version of the bot would provide: it would be able "
		"to answer questions from the knowledge the owner can teach it in Sensay studio.\n\n"
		"Key Guidelines:\n"
		f"- Conversation is in the context of the company {company_name}\n"
		"- Be helpful, professional, and friendly\n"
		"- Provide accurate information based on the company knowledge base\n"
		"- If you don't know something, clearly state that you are just a demo trained only on the "
		"public website, and may not have all the answers\n"
		f"- Stay focused on {company_name}-related topics\n"
		"- Use the company information provided to answer questions about products, services, "
		"pricing, and policies\n\n"
		f"Company Knowledge Base:\n{knowledge_base}\n\n"
		f"Always maintain a helpful and professional tone while representing {company_name}."
	)


def replica_slug(company_name: str) -> str:
	return re.sub(r"[^a-z0-9]", "-", company_name.lower()) + "-support-bot"


def build_replica_payload(display_name: str, slug: str, system_message: str, owner_id: str) -> Dict:
	return {
		"name": display_name,
		"shortDescription": f"Demo of the customer support bot for {display_name}.",
		"greeting": (
			f"Hello and welcome! This is a demo version of the {display_name} support bot. "
			"You're now testing how the bot works. Please note: I've been trained only on "
			"information available from your company's public website. How can I assist you today?"
		),
		"ownerID": owner_id,
		"slug": slug,
		"llm": {"systemMessage": system_message, "model": REPLICA_MODEL},
		"private": False,
	}


def create_replica(
	context: AnalysisContext,
	result: AnalysisResult,
	knowledge_base: str,
	config: SensayConfig,
	session: Optional[requests.Session] = None,
	timeout: float = 60.0,
) -> Optional[SensayBot]:
	"""Create a Sensay replica trained on the knowledge base.

	Returns None when the API call fails; the reason is logged.
	"""
	session = session or requests.Session()
	display_name = result.original_company_name or context.company_name
	system_message = build_system_message(context.company_name, result.base_url, knowledge_base)
	payload = build_replica_payload(display_name, replica_slug(context.company_name), system_message, config.user_id)

	url = f"{config.api_url}/v1/replicas"
	log_info(f"Creating Sensay bot '{display_name}' via {url}")
	log_info(f"Organization: {config.organization_id}  Pages: {result.page_count}  Analyzed: {result.analysis_date}")
	try:
		resp = session.post(
			url,
			json=payload,
			headers={
				"X-ORGANIZATION-SECRET": config.api_key,
				"X-API-Version": API_VERSION,
				"Content-Type": "application/json",
			},
			timeout=timeout,
		)
		resp.raise_for_status()
		bot_id = resp.json()["uuid"]
	except requests.HTTPError as exc:
		status = exc.response.status_code if exc.response is not None else None
		log_error(f"Failed to create Sensay bot: HTTP {status}")
		if exc.response is not None:
			log_error(f"API error response: {exc.response.text}")
		if status in STATUS_HINTS:
			log_warn(STATUS_HINTS[status])
		return None
	except (requests.RequestException, ValueError, KeyError) as exc:
		log_error(f"Failed to create Sensay bot: {exc}")
		return None

	log_info(f"Sensay bot created: {display_name} (ID: {bot_id})")
	return SensayBot(id=bot_id, name=display_name, system_message=system_message)
