from __future__ import annotations

from flask import Request, current_app, request
from termcolor import colored


def _format_log(
	message: str,
	level: int,
	request: Request,
	color: str,
) -> str:
	log = f"HTML-Squeeze: {request.method} {request.path} | {2 * level * ' '}{message}"
	return colored(log, color)


def log(level: int, s: str) -> None:
	if current_app.config["SQUEEZE_VERBOSE_LOGGING"]:
		print(_format_log(s, level, request, "light_green"))
