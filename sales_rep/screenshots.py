import os
from typing import Callable, Optional

from .browser import goto_quiet, launch_browser
from .logs import log_info, log_warn
from .models import Screenshots

SCREEN_SIZES = [
	("desktop", 1200, 800),
	("tablet", 768, 1024),
	("mobile", 375, 667),
]


def capture_responsive_screenshots(
	base_url: str,
	output_dir: str,
	timeout: float = 15.0,
	launcher: Optional[Callable] = None,
) -> Optional[Screenshots]:
	"""Save desktop, tablet and mobile PNG screenshots of base_url into output_dir."""
	launcher = launcher or launch_browser
	os.makedirs(output_dir, exist_ok=True)
	paths = {}
	try:
		with launcher() as browser:
			page = browser.new_page()
			for name, width, height in SCREEN_SIZES:
				log_info(f"Capturing {name} screenshot ({width}x{height})")
				page.set_viewport_size({"width": width, "height": height})
				goto_quiet(page, base_url, timeout)
				path = os.path.join(output_dir, f"screenshot-{name}.png")
				page.screenshot(path=path, full_page=False, type="png")
				paths[name] = path
	except Exception as exc:
		log_warn(f"Failed to capture screenshots of {base_url}: {exc}")
		return None
	return Screenshots(**paths)
