import json
import os
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from .errors import ConfigurationError

USER_AGENT_DEFAULT = (
	"Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
	"(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)

DEFAULT_MODEL = "gpt-4o-mini"

DEFAULT_KEYWORDS = [
	"product", "services", "offer", "faq", "help", "support",
	"delivery", "returns", "about", "contact",
]

CONFIG_DIR = os.path.expanduser("~/.sales_rep")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")
PROJECT_CONFIG_FILE = "sales_rep_config.json"


@dataclass
class Settings:
	"""Policy constants and model configuration for one analysis run."""

	model: str = DEFAULT_MODEL
	api_key: str = ""
	base_url: Optional[str] = None
	max_pages: int = 20
	# Seconds
	navigation_timeout: float = 10.0
	page_delay: float = 1.0
	llm_timeout: float = 60.0
	max_candidate_urls: int = 50
	max_relevant_urls: int = 15
	min_content_length: int = 100
	max_content_length: int = 3000
	keywords: List[str] = field(default_factory=lambda: list(DEFAULT_KEYWORDS))
	user_agent: str = USER_AGENT_DEFAULT
	analysis_dir: str = "analysis"

	def with_overrides(self, **overrides) -> "Settings":
		return replace(self, **{k: v for k, v in overrides.items() if v is not None})


@dataclass
class SensayConfig:
	api_key: str
	api_url: str
	organization_id: str
	user_id: str


def read_json(path: str) -> Dict:
	try:
		with open(path, "r", encoding="utf-8") as f:
			return json.load(f)
	except (OSError, json.JSONDecodeError):
		return {}


def load_settings(
	api_key: Optional[str] = None,
	model: Optional[str] = None,
	config_path: Optional[str] = None,
	**overrides,
) -> Settings:
	"""Resolve settings: explicit arguments, then environment, then config files."""
	project_cfg = read_json(config_path or PROJECT_CONFIG_FILE)
	user_cfg = read_json(CONFIG_FILE)

	resolved_key = (
		api_key
		or os.environ.get("OPENAI_API_KEY")
		or project_cfg.get("openai_api_key")
		or user_cfg.get("openai_api_key")
		or ""
	)
	resolved_model = (
		model
		or os.environ.get("OPENAI_MODEL")
		or project_cfg.get("model")
		or user_cfg.get("model")
		or DEFAULT_MODEL
	)
	base_url = (
		os.environ.get("OPENAI_BASE_URL")
		or project_cfg.get("openai_base_url")
		or user_cfg.get("openai_base_url")
		or None
	)
	analysis_dir = os.environ.get("SALES_REP_ANALYSIS_DIR") or project_cfg.get("analysis_dir") or "analysis"

	settings = Settings(
		model=resolved_model,
		api_key=resolved_key,
		base_url=base_url,
		analysis_dir=analysis_dir,
	)
	if project_cfg.get("keywords"):
		settings.keywords = list(project_cfg["keywords"])
	return settings.with_overrides(**overrides)


def load_sensay_config() -> Optional[SensayConfig]:
	api_key = os.environ.get("SENSAY_API_KEY")
	api_url = os.environ.get("SENSAY_API_URL")
	organization_id = os.environ.get("SENSAY_ORGANIZATION_ID")
	user_id = os.environ.get("SENSAY_USER_ID")
	if api_key and api_url and organization_id and user_id:
		return SensayConfig(
			api_key=api_key,
			api_url=api_url.rstrip("/"),
			organization_id=organization_id,
			user_id=user_id,
		)
	return None


SENSAY_ENV_VARS = [
	"SENSAY_API_KEY",
	"SENSAY_API_URL",
	"SENSAY_ORGANIZATION_ID",
	"SENSAY_USER_ID",
]


def create_llm_client(settings: Settings):
	"""Build the OpenAI client. Without an API key nothing downstream can work."""
	if not settings.api_key:
		raise ConfigurationError("OPENAI_API_KEY environment variable is required")
	from openai import OpenAI

	return OpenAI(api_key=settings.api_key, base_url=settings.base_url)
