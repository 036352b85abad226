from typing import Callable, Optional

from colorama import Fore, Style

# Minimal, structured logging with color
_progress_callback: Optional[Callable[[str, str], None]] = None


def set_progress_callback(callback: Optional[Callable[[str, str], None]]) -> None:
	"""Set a callback function to receive progress updates."""
	global _progress_callback
	_progress_callback = callback


def _notify(level: str, message: str) -> None:
	if _progress_callback:
		_progress_callback(level, message)


def log_info(message: str) -> None:
	print(Fore.CYAN + "[INFO] " + Style.RESET_ALL + f"{message}")
	_notify("info", message)


def log_warn(message: str) -> None:
	print(Fore.YELLOW + "[WARN] " + Style.RESET_ALL + f"{message}")
	_notify("warn", message)


def log_error(message: str) -> None:
	print(Fore.RED + "[ERROR] " + Style.RESET_ALL + f"{message}")
	_notify("error", message)


def log_step(title: str) -> None:
	print(Fore.BLUE + "\n" + title + Style.RESET_ALL)
	print(Fore.BLUE + "─" * len(title) + Style.RESET_ALL)
	_notify("step", title)


def print_header(title: str) -> None:
	print(Fore.MAGENTA + "\n" + "═" * 60 + Style.RESET_ALL)
	print(Fore.MAGENTA + f"  {title}" + Style.RESET_ALL)
	print(Fore.MAGENTA + "═" * 60 + Style.RESET_ALL)
