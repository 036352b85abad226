import argparse
import os
import sys
import threading
import traceback
import webbrowser
from typing import List, Optional

from colorama import Fore, Style, init as colorama_init
from dotenv import load_dotenv

from .config import SENSAY_ENV_VARS, load_sensay_config, load_settings
from .logs import log_error, log_info, log_step, log_warn, print_header
from .models import AnalysisContext
from .screenshots import capture_responsive_screenshots
from .storage import (
	find_analysis_directories,
	load_analysis,
	load_bot,
	load_knowledge_base,
	publish_bot,
	sanitize_company_name,
	save_analysis,
	write_training_data,
)


def handle_error(exc: BaseException) -> None:
	log_error(f"Error occurred: {exc}")
	print(Fore.RED + traceback.format_exc() + Style.RESET_ALL, file=sys.stderr)
	sys.exit(1)


def list_analyses(root_dir: str) -> List[str]:
	directories = find_analysis_directories(root_dir)
	if not directories:
		log_warn(f"No analysis data found in the {root_dir}/ directory.")
		log_info("Run website analysis first using: sales-rep analyze <url>")
		return directories
	log_info("Available analyses:")
	for index, name in enumerate(directories, start=1):
		print(f"  {index}. {name}")
	return directories


def require_analysis(context: AnalysisContext):
	result = load_analysis(context)
	if result is None:
		log_error(f"No analysis data found for: {context.company_name}")
		list_analyses(context.root_dir)
		sys.exit(1)
	log_info(f"Loaded analysis data from {result.analysis_date}")
	log_info(f"{result.page_count} pages analyzed from {result.base_url}")
	return result


def cmd_analyze(args: argparse.Namespace) -> None:
	from .pipeline import run_analysis

	print_header("AI Sales Rep - Website Analysis")
	settings = load_settings(
		api_key=args.api_key,
		model=args.model,
		config_path=args.config,
		max_pages=args.max_pages,
	)
	sensay_config = load_sensay_config()
	log_info(f"Target URL: {Fore.WHITE}{args.url}{Style.RESET_ALL}")
	log_info(f"Create bot: {'YES' if args.create_bot else 'NO'}")

	company = sanitize_company_name(args.company) if args.company else None
	context, result, bot = run_analysis(
		args.url,
		settings,
		create_bot=args.create_bot,
		sensay_config=sensay_config,
		company_name=company,
		screenshots=not args.no_screenshots,
	)

	log_step("All done")
	log_info(f"Results saved to: {context.company_dir}")
	if args.create_bot:
		if sensay_config is None:
			log_warn("Bot creation requested but Sensay configuration missing. Set: " + ", ".join(SENSAY_ENV_VARS))
		elif bot is None:
			log_error("Bot creation failed. Check the logs above for details.")
			sys.exit(1)
		else:
			log_info(f"Bot created: {bot.name} (ID: {bot.id})")


def cmd_create_bot(args: argparse.Namespace) -> None:
	print_header("AI Sales Rep - Bot Creator")
	settings = load_settings(config_path=args.config)
	if not args.company:
		list_analyses(settings.analysis_dir)
		log_error("No company name provided! Usage: sales-rep create-bot <company-name>")
		sys.exit(1)

	context = AnalysisContext(company_name=args.company, root_dir=settings.analysis_dir)
	result = require_analysis(context)
	sensay_config = load_sensay_config()
	if sensay_config is None:
		log_error("Sensay configuration not found. Required: " + ", ".join(SENSAY_ENV_VARS))
		sys.exit(1)
	knowledge_base = load_knowledge_base(context)
	if knowledge_base is None:
		log_error(f"No knowledge base found for: {context.company_name}")
		sys.exit(1)

	bot = publish_bot(context, result, knowledge_base, sensay_config)
	if bot is None:
		log_error("Bot creation failed. Check the logs above for details.")
		sys.exit(1)
	log_step("Bot creation completed")
	log_info(f"Bot Name: {bot.name}")
	log_info(f"Bot ID: {bot.id}")


def regenerate_one(context: AnalysisContext) -> bool:
	result = load_analysis(context)
	knowledge_base = load_knowledge_base(context)
	if result is None or knowledge_base is None:
		log_warn(f"Skipping {context.company_name} - no valid raw data or knowledge base found")
		return False
	write_training_data(context, result, knowledge_base, clean=True)
	return True


def cmd_regenerate_training(args: argparse.Namespace) -> None:
	print_header("AI Sales Rep - Training Data Regenerator")
	settings = load_settings(config_path=args.config)
	if args.company:
		context = AnalysisContext(company_name=args.company, root_dir=settings.analysis_dir)
		require_analysis(context)
		if not regenerate_one(context):
			sys.exit(1)
		log_info(f"Updated: {context.training_dir}")
		return

	directories = list_analyses(settings.analysis_dir)
	if not directories:
		sys.exit(1)
	for name in directories:
		log_step(f"Processing {name}")
		regenerate_one(AnalysisContext(company_name=name, root_dir=settings.analysis_dir))
	log_info("All training data regenerated!")


def cmd_generate_demo(args: argparse.Namespace) -> None:
	from .demo import generate_demo_page

	print_header("AI Sales Rep - Demo Generator")
	settings = load_settings(config_path=args.config)
	if not args.company:
		list_analyses(settings.analysis_dir)
		log_error("No company name provided! Usage: sales-rep generate-demo <company-name>")
		sys.exit(1)

	context = AnalysisContext(company_name=args.company, root_dir=settings.analysis_dir)
	result = require_analysis(context)
	bot = load_bot(context)
	if bot is None:
		log_error(f"Missing bot info for {context.company_name}: {context.bot_path}")
		sys.exit(1)
	log_info(f"Bot found: {bot.name} (ID: {bot.id})")

	if result.screenshots is None:
		log_info("Screenshots not found, capturing now...")
		result.screenshots = capture_responsive_screenshots(result.base_url, context.demo_dir)
		if result.screenshots is None:
			log_error("Failed to capture screenshots")
			sys.exit(1)
		save_analysis(context, result)

	demo_path = generate_demo_page(context, bot, result.base_url, result.screenshots)
	log_step("Demo generation completed")
	log_info(f"Demo page: {demo_path}")
	log_info(f"View demo: sales-rep serve, then open /demo/{context.company_name}")


def cmd_serve(args: argparse.Namespace) -> None:
	from .app import app, serve

	if args.analysis_dir:
		app.config["ANALYSIS_DIR"] = args.analysis_dir
	log_info(f"Demo server running at: http://localhost:{args.port}")
	serve(port=args.port, debug=args.debug)


def cmd_full_demo(args: argparse.Namespace) -> None:
	from .app import app, serve
	from .pipeline import run_analysis

	print_header("AI Sales Rep - Full Demo Workflow")
	sensay_config = load_sensay_config()
	if sensay_config is None:
		log_error("Sensay configuration not found. Required: " + ", ".join(SENSAY_ENV_VARS))
		sys.exit(1)
	settings = load_settings(config_path=args.config, max_pages=args.max_pages)
	log_info(f"Target URL: {Fore.WHITE}{args.url}{Style.RESET_ALL}")

	context, result, bot = run_analysis(args.url, settings, create_bot=True, sensay_config=sensay_config)
	if bot is None:
		log_error("Bot creation failed. Check the logs above for details.")
		sys.exit(1)
	log_info(f"Bot created: {bot.name} (ID: {bot.id})")

	demo_url = f"http://localhost:{args.port}/demo/{context.company_name}"
	app.config["ANALYSIS_DIR"] = settings.analysis_dir
	log_step("Starting demo server")
	log_info(f"Demo page: {demo_url}")
	if not args.no_open:
		threading.Timer(1.5, webbrowser.open, args=[demo_url]).start()
	serve(port=args.port)


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="sales-rep",
		description="Analyze a business website and build a support bot knowledge base.",
	)
	parser.add_argument("--config", help="Path to project config JSON (default: sales_rep_config.json)")
	sub = parser.add_subparsers(dest="command", required=True)

	analyze = sub.add_parser("analyze", help="Crawl a website and build its knowledge base")
	analyze.add_argument("url", help="Website base URL, e.g. https://example.com")
	analyze.add_argument("--create-bot", action="store_true", help="Create a Sensay bot after analysis")
	analyze.add_argument("--max-pages", type=int, help="Max pages to visit when crawling (default: 20)")
	analyze.add_argument("--model", help="OpenAI model (default: OPENAI_MODEL or gpt-4o-mini)")
	analyze.add_argument("--api-key", help="OpenAI API key override (will take precedence)")
	analyze.add_argument("--company", help="Company name used for the output directory")
	analyze.add_argument("--no-screenshots", action="store_true", help="Skip responsive screenshots")
	analyze.set_defaults(func=cmd_analyze)

	create_bot = sub.add_parser("create-bot", help="Create a Sensay bot from a saved analysis")
	create_bot.add_argument("company", nargs="?", help="Company name (directory under analysis/)")
	create_bot.set_defaults(func=cmd_create_bot)

	regenerate = sub.add_parser("regenerate-training", help="Rewrite Sensay training files")
	regenerate.add_argument("company", nargs="?", help="Company name; all analyses when omitted")
	regenerate.set_defaults(func=cmd_regenerate_training)

	demo = sub.add_parser("generate-demo", help="Render the demo page for a created bot")
	demo.add_argument("company", nargs="?", help="Company name (directory under analysis/)")
	demo.set_defaults(func=cmd_generate_demo)

	serve = sub.add_parser("serve", help="Start the demo server")
	serve.add_argument("--port", type=int, default=int(os.environ.get("DEMO_PORT", 3005)))
	serve.add_argument("--analysis-dir", help="Directory holding analyses (default: analysis)")
	serve.add_argument("--debug", action="store_true")
	serve.set_defaults(func=cmd_serve)

	full_demo = sub.add_parser("full-demo", help="Analyze, create the bot, then serve and open its demo")
	full_demo.add_argument("url", help="Website base URL, e.g. https://example.com")
	full_demo.add_argument("--max-pages", type=int, help="Max pages to visit when crawling (default: 20)")
	full_demo.add_argument("--port", type=int, default=int(os.environ.get("DEMO_PORT", 3005)))
	full_demo.add_argument("--no-open", action="store_true", help="Do not open the demo in a browser")
	full_demo.set_defaults(func=cmd_full_demo)
	return parser


def main(argv: Optional[List[str]] = None) -> None:
	# Init color output and load .env if present
	colorama_init(autoreset=True)
	load_dotenv()
	args = build_parser().parse_args(argv)
	try:
		args.func(args)
	except KeyboardInterrupt:
		log_warn("Interrupted")
		sys.exit(130)
	except Exception as exc:
		handle_error(exc)


if __name__ == "__main__":
	main()
