from typing import Optional, Tuple

from .analyzer import analyze_website
from .config import SensayConfig, Settings, create_llm_client
from .logs import log_info, log_step
from .models import AnalysisContext, AnalysisResult, SensayBot
from .screenshots import capture_responsive_screenshots
from .storage import company_name_from_url, save_results


def run_analysis(
	url: str,
	settings: Settings,
	create_bot: bool = False,
	sensay_config: Optional[SensayConfig] = None,
	company_name: Optional[str] = None,
	screenshots: bool = True,
) -> Tuple[AnalysisContext, AnalysisResult, Optional[SensayBot]]:
	"""Analyze url and persist every artifact under analysis/<company>/."""
	client = create_llm_client(settings)

	log_step("Website analysis")
	result = analyze_website(url, client, settings)

	context = AnalysisContext(
		company_name=company_name or company_name_from_url(url),
		root_dir=settings.analysis_dir,
	)
	log_info(f"Analysis completed for: {context.company_name}")

	if screenshots:
		log_step("Capturing website screenshots")
		result.screenshots = capture_responsive_screenshots(url, context.company_dir)

	bot = save_results(context, result, client, settings, create_bot, sensay_config)
	return context, result, bot
