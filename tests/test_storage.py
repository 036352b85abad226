import json
import os
from unittest.mock import patch

from sales_rep.config import SensayConfig
from sales_rep.models import AnalysisContext, AnalysisResult, AnalyzedPage, Screenshots, SensayBot
from sales_rep.storage import (
	company_name_from_url,
	find_analysis_directories,
	load_analysis,
	load_bot,
	publish_bot,
	sanitize_company_name,
	save_analysis,
	save_results,
	training_page_filename,
	write_training_data,
)

from .conftest import completion


def make_result(screenshots=None):
	return AnalysisResult(
		base_url="https://acme.test",
		analyzed_pages=[
			AnalyzedPage("https://acme.test/faq", "Frequently Asked Questions!", "FAQ page", "a" * 200),
			AnalyzedPage("https://acme.test/about", "About", "", "b" * 200),
		],
		analysis_date="2026-10-19T08:30:00+00:00",
		page_count=2,
		discovered_count=3,
		screenshots=screenshots,
	)


def test_company_names():
	assert company_name_from_url("https://www.acme-shop.co.uk/path") == "acme-shop-co-uk"
	assert company_name_from_url("https://acme.test") == "acme-test"
	assert sanitize_company_name("  Acme Shop & Co. ") == "acme-shop-co"


def test_raw_data_uses_persisted_keys(tmp_path):
	context = AnalysisContext("acme-test", str(tmp_path))
	path = save_analysis(context, make_result())
	with open(path, encoding="utf-8") as f:
		data = json.load(f)
	assert data["baseUrl"] == "https://acme.test"
	assert data["pageCount"] == 2
	assert data["analyzedPages"][0]["url"] == "https://acme.test/faq"
	assert data["analysisDate"] == "2026-10-19T08:30:00+00:00"

	loaded = load_analysis(context)
	assert loaded.analyzed_pages == make_result().analyzed_pages


def test_missing_analysis_loads_as_none(tmp_path):
	context = AnalysisContext("nobody", str(tmp_path))
	assert load_analysis(context) is None
	assert load_bot(context) is None


def test_find_analysis_directories(tmp_path):
	(tmp_path / "b-co").mkdir()
	(tmp_path / "a-co").mkdir()
	(tmp_path / "notes.txt").write_text("x")
	assert find_analysis_directories(str(tmp_path)) == ["a-co", "b-co"]
	assert find_analysis_directories(str(tmp_path / "missing")) == []


def test_training_page_filename():
	page = AnalyzedPage("u", "Shipping & Returns: Everything You Need To Know About Orders", "", "")
	name = training_page_filename(7, page)
	assert name.startswith("page-007-shipping-returns")
	assert len(name) <= len("page-007-") + 50 + len(".md")


def test_training_data_files(tmp_path):
	context = AnalysisContext("acme-test", str(tmp_path))
	written = write_training_data(context, make_result(), "KB BODY")
	assert [os.path.basename(p) for p in written] == [
		"page-001-frequently-asked-questions.md",
		"page-002-about.md",
	]
	with open(written[0], encoding="utf-8") as f:
		text = f.read()
	assert text.startswith("# Frequently Asked Questions!\n\nSource: https://acme.test/faq")
	assert "## Description\nFAQ page" in text
	with open(os.path.join(context.training_dir, "system-message.txt"), encoding="utf-8") as f:
		assert "KB BODY" in f.read()


def test_regenerate_removes_stale_pages(tmp_path):
	context = AnalysisContext("acme-test", str(tmp_path))
	os.makedirs(context.training_pages_dir)
	stale = os.path.join(context.training_pages_dir, "page-009-old.md")
	with open(stale, "w") as f:
		f.write("old")
	write_training_data(context, make_result(), "KB", clean=True)
	assert not os.path.exists(stale)
	assert len(os.listdir(context.training_pages_dir)) == 2


def test_save_results_without_bot(tmp_path, settings, llm_client):
	llm_client.chat.completions.create.return_value = completion("Acme sells anvils.")
	context = AnalysisContext("acme-test", str(tmp_path))
	with patch("sales_rep.storage.create_replica") as create:
		bot = save_results(context, make_result(), llm_client, settings, create_bot=False)
	assert bot is None
	create.assert_not_called()
	assert os.path.isfile(context.knowledge_base_path)
	assert os.path.isfile(context.raw_data_path)
	assert not os.path.exists(context.bot_path)


def test_save_results_without_sensay_config(tmp_path, settings, llm_client):
	llm_client.chat.completions.create.return_value = completion("summary")
	context = AnalysisContext("acme-test", str(tmp_path))
	with patch("sales_rep.storage.create_replica") as create:
		assert save_results(context, make_result(), llm_client, settings, create_bot=True) is None
	create.assert_not_called()


def test_save_results_creates_bot_and_demo(tmp_path, settings, llm_client):
	llm_client.chat.completions.create.return_value = completion("summary")
	context = AnalysisContext("acme-test", str(tmp_path))
	shots = {}
	for name in ("desktop", "tablet", "mobile"):
		path = tmp_path / f"shot-{name}.png"
		path.write_bytes(b"png")
		shots[name] = str(path)
	result = make_result(Screenshots(**shots))
	config = SensayConfig("secret", "https://api.sensay.test", "org", "user")
	bot = SensayBot(id="replica-uuid", name="acme-test", system_message="sys")

	with patch("sales_rep.storage.create_replica", return_value=bot) as create:
		assert save_results(context, result, llm_client, settings, create_bot=True, sensay_config=config) is bot

	assert create.call_args[0][2].startswith("# acme.test - Business Knowledge Base")
	assert load_bot(context).id == "replica-uuid"
	assert os.path.isfile(os.path.join(context.demo_dir, "index.html"))
	assert os.path.isfile(os.path.join(context.demo_dir, "screenshot-mobile.png"))


def test_demo_failure_keeps_created_bot(tmp_path):
	context = AnalysisContext("acme-test", str(tmp_path))
	missing = {name: str(tmp_path / f"missing-{name}.png") for name in ("desktop", "tablet", "mobile")}
	result = make_result(Screenshots(**missing))
	config = SensayConfig("secret", "https://api.sensay.test", "org", "user")
	bot = SensayBot(id="replica-uuid", name="acme-test", system_message="sys")

	with patch("sales_rep.storage.create_replica", return_value=bot):
		assert publish_bot(context, result, "# kb", config) is bot

	assert load_bot(context).id == "replica-uuid"
	assert not os.path.isfile(os.path.join(context.demo_dir, "index.html"))
