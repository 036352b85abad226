"""
Demo server for generated support bots.

Serves the per-company demo pages, their screenshots, and an asynchronous
analysis API (start a job, then poll its status).
"""
import os
import threading
import traceback
import uuid
from datetime import datetime, timezone
from typing import Dict, List

from dotenv import load_dotenv
from flask import Flask, jsonify, request, send_file
from flask_cors import CORS
from markupsafe import escape

from .config import load_sensay_config, load_settings
from .logs import set_progress_callback
from .models import AnalysisContext
from .pipeline import run_analysis
from .storage import find_analysis_directories, load_analysis, load_bot

# In-memory job storage (use Redis/database in production)
jobs: Dict[str, Dict] = {}

# Jobs share the module-level progress callback, so they run one at a time
_job_lock = threading.Lock()

load_dotenv()

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
app.config.setdefault("ANALYSIS_DIR", os.environ.get("SALES_REP_ANALYSIS_DIR", "analysis"))

SCREENSHOT_SIZES = ["desktop", "tablet", "mobile"]

# Finished jobs kept for status polling; older ones are dropped first
MAX_FINISHED_JOBS = 50


def _prune_jobs() -> None:
	finished = [job_id for job_id, job in jobs.items() if job["status"] != "running"]
	for job_id in finished[: max(0, len(finished) - MAX_FINISHED_JOBS)]:
		jobs.pop(job_id, None)


def _now() -> str:
	return datetime.now(timezone.utc).isoformat()


def find_available_demos(root_dir: str) -> List[Dict]:
	"""Companies with a saved bot, raw data and a rendered demo page."""
	demos = []
	for company in find_analysis_directories(root_dir):
		context = AnalysisContext(company_name=company, root_dir=root_dir)
		demo_path = os.path.join(context.demo_dir, "index.html")
		if not os.path.isfile(demo_path):
			continue
		bot = load_bot(context)
		result = load_analysis(context)
		if bot is None or result is None:
			continue
		demos.append({
			"name": company,
			"botId": bot.id,
			"botName": bot.name,
			"websiteUrl": result.base_url,
			"demoPath": demo_path,
			"demoUrl": f"/demo/{company}",
		})
	return demos


@app.route("/health", methods=["GET"])
def health():
	"""Health check endpoint"""
	return jsonify({
		"status": "healthy",
		"service": "AI Sales Rep Demo Server",
		"timestamp": _now(),
		"openai_configured": bool(os.environ.get("OPENAI_API_KEY")),
		"sensay_configured": load_sensay_config() is not None,
	}), 200


@app.route("/", methods=["GET"])
def index():
	demos = find_available_demos(app.config["ANALYSIS_DIR"])
	items = "".join(
		f'<li><a href="{escape(d["demoUrl"])}">{escape(d["botName"] or d["name"])}</a> '
		f'&mdash; {escape(d["websiteUrl"])}</li>'
		for d in demos
	)
	body = f"<ul>{items}</ul>" if demos else "<p>No demos yet. Run: sales-rep analyze &lt;url&gt; --create-bot</p>"
	return (
		"<!DOCTYPE html><html><head><title>AI Sales Rep Demos</title></head>"
		f"<body><h1>AI Sales Rep Demos</h1>{body}</body></html>"
	), 200


@app.route("/api/demos", methods=["GET"])
def list_demos():
	demos = find_available_demos(app.config["ANALYSIS_DIR"])
	return jsonify([
		{k: d[k] for k in ("name", "botId", "websiteUrl", "demoUrl")} for d in demos
	]), 200


@app.route("/demo/<company>", methods=["GET"])
def demo_page(company):
	demos = find_available_demos(app.config["ANALYSIS_DIR"])
	demo = next((d for d in demos if d["name"] == company), None)
	if demo is None:
		return (
			"<!DOCTYPE html><html><head><title>Demo Not Found</title></head><body>"
			f"<h1>Demo Not Found</h1><p>The demo for \"{escape(company)}\" could not be found.</p>"
			'<a href="/">Back to Demo List</a></body></html>'
		), 404
	with open(demo["demoPath"], "r", encoding="utf-8") as f:
		return f.read(), 200


@app.route("/demo/<company>/screenshot-<size>.png", methods=["GET"])
def demo_screenshot(company, size):
	if size not in SCREENSHOT_SIZES:
		return jsonify({"error": "Screenshot not found"}), 404
	context = AnalysisContext(company_name=company, root_dir=app.config["ANALYSIS_DIR"])
	path = os.path.abspath(os.path.join(context.demo_dir, f"screenshot-{size}.png"))
	if not os.path.isfile(path):
		return jsonify({"error": "Screenshot not found"}), 404
	return send_file(path, mimetype="image/png")


@app.route("/analyze/async", methods=["POST"])
def analyze_async_endpoint():
	"""
	Start an analysis job in the background. Returns job_id immediately.
	Use /analyze/status/<job_id> to poll for progress.
	"""
	if not request.is_json:
		return jsonify({"error": "Request must be JSON"}), 400

	data = request.get_json()
	if not isinstance(data, dict) or not data.get("base_url"):
		return jsonify({"error": "base_url is required"}), 400

	settings = load_settings(
		api_key=data.get("api_key"),
		model=data.get("model"),
		max_pages=data.get("max_pages"),
		analysis_dir=app.config["ANALYSIS_DIR"],
	)
	if not settings.api_key:
		return jsonify({
			"error": "OpenAI API key is required. Provide via api_key in request or OPENAI_API_KEY env var."
		}), 400

	_prune_jobs()
	create_bot = bool(data.get("create_bot", False))
	job_id = str(uuid.uuid4())
	jobs[job_id] = {
		"status": "running",
		"progress": [],
		"base_url": data["base_url"],
		"created_at": _now(),
		"completed_at": None,
		"error": None,
		"company": None,
		"page_count": None,
		"bot_id": None,
	}

	def run_analysis_job():
		"""Run the analysis in background"""
		job = jobs[job_id]

		def progress_callback(level, message):
			job["progress"].append({"type": level, "message": message, "timestamp": _now()})

		with _job_lock:
			set_progress_callback(progress_callback)
			try:
				context, result, bot = run_analysis(
					data["base_url"],
					settings,
					create_bot=create_bot,
					sensay_config=load_sensay_config(),
				)
				job["company"] = context.company_name
				job["page_count"] = result.page_count
				job["bot_id"] = bot.id if bot else None
				job["status"] = "completed"
			except Exception as exc:
				job["status"] = "failed"
				job["error"] = str(exc)
				job["traceback"] = traceback.format_exc()
			finally:
				job["completed_at"] = _now()
				set_progress_callback(None)

	thread = threading.Thread(target=run_analysis_job, daemon=True)
	thread.start()

	return jsonify({
		"job_id": job_id,
		"status": "running",
		"message": "Analysis job started",
		"status_url": f"/analyze/status/{job_id}",
	}), 202


@app.route("/analyze/status/<job_id>", methods=["GET"])
def analyze_status_endpoint(job_id):
	"""
	Get status and progress of an analysis job.

	Returns:
	- status: "running" | "completed" | "failed"
	- progress: Array of progress messages
	- error: Error message if failed
	"""
	if job_id not in jobs:
		return jsonify({"error": "Job not found"}), 404

	job = jobs[job_id]
	return jsonify({
		"job_id": job_id,
		"status": job["status"],
		"progress": job["progress"],
		"error": job.get("error"),
		"company": job.get("company"),
		"page_count": job.get("page_count"),
		"bot_id": job.get("bot_id"),
		"created_at": job["created_at"],
		"completed_at": job.get("completed_at"),
	}), 200


@app.errorhandler(404)
def not_found(error):
	return jsonify({"error": "Endpoint not found"}), 404


@app.errorhandler(500)
def internal_error(error):
	return jsonify({"error": "Internal server error"}), 500


def serve(port: int = 3005, debug: bool = False) -> None:
	app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
	serve(
		port=int(os.environ.get("DEMO_PORT", 3005)),
		debug=os.environ.get("DEBUG", "false").lower() == "true",
	)
