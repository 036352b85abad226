import json
import os
import shutil
import urllib.parse as urlparse
from typing import Dict, List, Optional

from jinja2 import TemplateError
from slugify import slugify

from .config import SENSAY_ENV_VARS, SensayConfig, Settings
from .demo import generate_demo_page
from .knowledge_base import build_knowledge_base
from .logs import log_info, log_step, log_warn
from .models import AnalysisContext, AnalysisResult, AnalyzedPage, SensayBot
from .sensay import build_system_message, create_replica


def sanitize_company_name(name: str) -> str:
	return slugify(name.strip())


def company_name_from_url(url: str) -> str:
	host = urlparse.urlparse(url).hostname or url
	if host.startswith("www."):
		host = host[len("www."):]
	return slugify(host.replace(".", "-")) or "site"


def ensure_dir(path: str) -> None:
	os.makedirs(path, exist_ok=True)


def write_json(path: str, data: Dict) -> None:
	with open(path, "w", encoding="utf-8") as f:
		json.dump(data, f, ensure_ascii=False, indent=2)


def read_json_file(path: str) -> Optional[Dict]:
	try:
		with open(path, "r", encoding="utf-8") as f:
			return json.load(f)
	except FileNotFoundError:
		return None
	except (OSError, json.JSONDecodeError) as exc:
		log_warn(f"Could not read {path}: {exc}")
		return None


def save_analysis(context: AnalysisContext, result: AnalysisResult) -> str:
	ensure_dir(context.company_dir)
	write_json(context.raw_data_path, result.to_dict())
	log_info(f"Saved raw data to: {context.raw_data_path}")
	return context.raw_data_path


def save_knowledge_base(context: AnalysisContext, markdown: str) -> str:
	ensure_dir(context.company_dir)
	with open(context.knowledge_base_path, "w", encoding="utf-8") as f:
		f.write(markdown)
	log_info(f"Saved knowledge base to: {context.knowledge_base_path}")
	return context.knowledge_base_path


def save_bot(context: AnalysisContext, bot: SensayBot) -> str:
	ensure_dir(context.company_dir)
	write_json(context.bot_path, bot.to_dict())
	log_info(f"Saved bot info to: {context.bot_path}")
	return context.bot_path


def find_analysis_directories(root_dir: str = "analysis") -> List[str]:
	try:
		entries = sorted(os.listdir(root_dir))
	except FileNotFoundError:
		return []
	return [e for e in entries if os.path.isdir(os.path.join(root_dir, e))]


def load_analysis(context: AnalysisContext) -> Optional[AnalysisResult]:
	data = read_json_file(context.raw_data_path)
	if data is None:
		return None
	try:
		return AnalysisResult.from_dict(data)
	except (KeyError, TypeError) as exc:
		log_warn(f"Invalid analysis data in {context.raw_data_path}: {exc}")
		return None


def load_knowledge_base(context: AnalysisContext) -> Optional[str]:
	try:
		with open(context.knowledge_base_path, "r", encoding="utf-8") as f:
			return f.read()
	except FileNotFoundError:
		return None


def load_bot(context: AnalysisContext) -> Optional[SensayBot]:
	data = read_json_file(context.bot_path)
	if not data or not data.get("id"):
		return None
	return SensayBot.from_dict(data)


def training_page_filename(index: int, page: AnalyzedPage) -> str:
	slug = slugify(page.title or "", max_length=50)
	return f"page-{index:03d}-{slug}.md"


def render_training_page(page: AnalyzedPage) -> str:
	description = f"## Description\n{page.description}\n\n" if page.description else ""
	return f"# {page.title}\n\nSource: {page.url}\n\n{description}## Content\n{page.content}"


def write_training_data(
	context: AnalysisContext,
	result: AnalysisResult,
	knowledge_base: str,
	clean: bool = False,
) -> List[str]:
	"""Write the system message and one markdown file per analyzed page.

	With clean=True previously written page files are removed first.
	"""
	if clean and os.path.isdir(context.training_pages_dir):
		shutil.rmtree(context.training_pages_dir)
	ensure_dir(context.training_pages_dir)

	system_message = build_system_message(context.company_name, result.base_url, knowledge_base)
	with open(os.path.join(context.training_dir, "system-message.txt"), "w", encoding="utf-8") as f:
		f.write(system_message)

	written: List[str] = []
	for index, page in enumerate(result.analyzed_pages, start=1):
		path = os.path.join(context.training_pages_dir, training_page_filename(index, page))
		with open(path, "w", encoding="utf-8") as f:
			f.write(render_training_page(page))
		written.append(path)
		log_info(f"  Created: {os.path.basename(path)}")
	log_info(f"Sensay training data written to: {context.training_dir}")
	return written


def publish_bot(
	context: AnalysisContext,
	result: AnalysisResult,
	knowledge_base: str,
	sensay_config: SensayConfig,
) -> Optional[SensayBot]:
	"""Create the replica, save its descriptor and, with screenshots, the demo page."""
	bot = create_replica(context, result, knowledge_base, sensay_config)
	if bot is None:
		return None
	save_bot(context, bot)
	if result.screenshots:
		try:
			generate_demo_page(context, bot, result.base_url, result.screenshots)
		except (OSError, TemplateError) as exc:
			log_warn(f"Failed to generate demo page: {exc}")
	return bot


def save_results(
	context: AnalysisContext,
	result: AnalysisResult,
	client,
	settings: Optional[Settings] = None,
	create_bot: bool = False,
	sensay_config: Optional[SensayConfig] = None,
) -> Optional[SensayBot]:
	log_step("Saving analysis results")
	knowledge_base = build_knowledge_base(result, client, settings)
	save_knowledge_base(context, knowledge_base)
	save_analysis(context, result)
	write_training_data(context, result, knowledge_base)

	if not create_bot:
		log_info("Bot creation not requested (use --create-bot)")
		return None
	if sensay_config is None:
		log_warn("Bot creation not possible - Sensay configuration missing: " + ", ".join(SENSAY_ENV_VARS))
		return None
	log_step("Creating Sensay bot")
	return publish_bot(context, result, knowledge_base, sensay_config)
