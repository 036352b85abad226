import os
import shutil
from typing import Optional

from jinja2 import Environment, select_autoescape

from .logs import log_info
from .models import AnalysisContext, Screenshots, SensayBot

DEFAULT_EMBED_BASE_URL = "https://localhost:3002"

DEMO_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
	<meta charset="UTF-8">
	<meta name="viewport" content="width=device-width, initial-scale=1.0">
	<title>{{ bot_name }} - Demo</title>
	<style>
		* { margin: 0; padding: 0; box-sizing: border-box; }
		body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: #f8f9fa; overflow: hidden; }
		.demo-container { position: relative; width: 100vw; height: 100vh; display: flex; flex-direction: column; }
		.website-wrapper { flex: 1; position: relative; background: white; border: 1px solid #e9ecef; overflow: hidden; }
		.website-iframe { width: 100%; height: 100%; border: none; display: block; }
		.website-screenshot { width: 100%; height: 100%; object-fit: cover; display: none; }
		.iframe-error { position: absolute; top: 0; left: 0; width: 100%; height: 100%; background: #f8f9fa; display: none; z-index: 1; }
	</style>
</head>
<body>
	<div class="demo-container">
		<div class="website-wrapper">
			<iframe id="websiteIframe" class="website-iframe" src="{{ website_url }}"
				sandbox="allow-same-origin allow-scripts allow-forms allow-popups"></iframe>
			<div class="iframe-error" id="iframeError">
			{% if screenshots %}
				<picture>
					<source media="(max-width: 480px)" srcset="{{ screenshots.mobile }}">
					<source media="(max-width: 1024px)" srcset="{{ screenshots.tablet }}">
					<img class="website-screenshot" id="websiteScreenshot" src="{{ screenshots.desktop }}" alt="{{ company_name }} website">
				</picture>
			{% else %}
				<p>The website could not be embedded. Visit <a href="{{ website_url }}">{{ website_url }}</a>.</p>
			{% endif %}
			</div>
		</div>
	</div>
	<script src="{{ embed_base_url }}/{{ bot_id }}/embed-script.js" defer></script>
	<script>
		const iframe = document.getElementById('websiteIframe');
		const iframeError = document.getElementById('iframeError');
		const screenshot = document.getElementById('websiteScreenshot');
		function showFallback() {
			iframe.style.display = 'none';
			iframeError.style.display = 'block';
			if (screenshot) { screenshot.style.display = 'block'; }
		}
		const iframeLoadTimeout = setTimeout(showFallback, 5000);
		iframe.addEventListener('load', () => clearTimeout(iframeLoadTimeout));
		iframe.addEventListener('error', () => { clearTimeout(iframeLoadTimeout); showFallback(); });
		console.log('Demo page initialized for bot: {{ bot_id }}');
	</script>
</body>
</html>
"""

_env = Environment(autoescape=select_autoescape(default_for_string=True))


def render_demo_html(
	bot: SensayBot,
	website_url: str,
	company_name: str,
	screenshots: Optional[Screenshots] = None,
	embed_base_url: Optional[str] = None,
) -> str:
	embed_base_url = embed_base_url or os.environ.get("SENSAY_EMBED_BASE_URL") or DEFAULT_EMBED_BASE_URL
	return _env.from_string(DEMO_TEMPLATE).render(
		bot_id=bot.id,
		bot_name=bot.name,
		website_url=website_url,
		company_name=company_name,
		screenshots=screenshots,
		embed_base_url=embed_base_url.rstrip("/"),
	)


def generate_demo_page(
	context: AnalysisContext,
	bot: SensayBot,
	website_url: str,
	screenshots: Optional[Screenshots] = None,
) -> str:
	"""Write demo/index.html for the company and copy its screenshots beside it."""
	os.makedirs(context.demo_dir, exist_ok=True)
	relative = None
	if screenshots:
		for name, source in screenshots.to_dict().items():
			target = os.path.join(context.demo_dir, f"screenshot-{name}.png")
			if os.path.abspath(source) != os.path.abspath(target):
				shutil.copyfile(source, target)
		relative = Screenshots(
			desktop=f"/demo/{context.company_name}/screenshot-desktop.png",
			tablet=f"/demo/{context.company_name}/screenshot-tablet.png",
			mobile=f"/demo/{context.company_name}/screenshot-mobile.png",
		)

	html = render_demo_html(bot, website_url, context.company_name, relative)
	demo_path = os.path.join(context.demo_dir, "index.html")
	with open(demo_path, "w", encoding="utf-8") as f:
		f.write(html)
	log_info(f"Demo page generated: {demo_path}")
	return demo_path
