from __future__ import annotations

import logging

from flask import Flask, Response

from .errors import MinificationError
from .log import log
from .minify import minify_response_data, resolve_config
from .models import Minification

logger = logging.getLogger(__name__)


class Squeeze:
	"""Flask extension that minifies HTML, CSS and JS responses."""

	__slots__ = ("app",)
	app: Flask

	def __init__(self, app: Flask | None = None) -> None:
		"""Initialize HTML-Squeeze with or without app."""
		if app is None:
			return
		self.app = app
		self.init_app(app)

	def init_app(self, app: Flask) -> None:
		"""Initialize HTML-Squeeze with app"""
		self.app = app

		logger.info("Initializing HTML-Squeeze")

		app.config.setdefault("SQUEEZE_MIN_SIZE", 500)
		# Minification options
		app.config.setdefault("SQUEEZE_MINIFY_JS", True)
		app.config.setdefault("SQUEEZE_MINIFY_CSS", True)
		app.config.setdefault("SQUEEZE_MINIFY_HTML", True)
		# MinifierConfig or mapping of option names, None for the default profile
		app.config.setdefault("SQUEEZE_HTML_OPTIONS", None)
		app.config.setdefault("SQUEEZE_VERBOSE_LOGGING", False)

		# Fail at startup rather than on the first request
		resolve_config(app.config["SQUEEZE_HTML_OPTIONS"])

		if app.config["SQUEEZE_MINIFY_JS"] or app.config["SQUEEZE_MINIFY_CSS"] or app.config["SQUEEZE_MINIFY_HTML"]:
			app.after_request(self.after_request)
			logger.info("HTML-Squeeze enabled")

	####################################################################################
	#### MARK: After Request

	def after_request(self, response: Response) -> Response:
		if response.status_code is None or response.content_length is None:
			return response

		if response.status_code not in range(200, 300):
			logger.debug(f"Skipping non-2xx response: {response.status_code}")
			return response

		if response.content_length < self.app.config["SQUEEZE_MIN_SIZE"]:
			logger.debug(
				f"Skipping small response ({response.content_length} bytes < {self.app.config['SQUEEZE_MIN_SIZE']} bytes threshold)"
			)
			return response

		if "Content-Encoding" in response.headers:
			logger.debug("Skipping already encoded response")
			return response

		minify_choice = Minification.get_from_mimetype_and_config(
			response.mimetype,
			self.app.config,
		)

		if minify_choice is None:
			logger.debug("No minification chosen")
			return response

		response.direct_passthrough = False  # We need to read the data

		html_config = resolve_config(self.app.config["SQUEEZE_HTML_OPTIONS"])

		try:
			data, minification_info = minify_response_data(
				response.get_data(as_text=False),
				minify_choice,
				html_config,
			)
		except (UnicodeDecodeError, MinificationError) as e:
			logger.warning(f"Serving {minify_choice.name} response unminified: {e}")
			return response

		response.set_data(data)
		response.headers.update(minification_info.headers)
		response.headers["Content-Length"] = str(response.content_length)

		log(1, f"Minified {minify_choice.name} content ({minification_info.ratio:.1f}x reduction)")

		return response
