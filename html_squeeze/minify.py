from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Tuple, Union

from .config import DEFAULT_CONFIG, MinifierConfig
from .emitter import Emitter
from .errors import InvalidInputError
from .minifiers import minify_css, minify_js
from .models import Minification
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


########################################################################################
#### MARK: HTML


def resolve_config(
	config: Union[MinifierConfig, Mapping[str, Any], None] = None,
	**options: Any,
) -> MinifierConfig:
	"""
	- No config and no options: the default profile.
	- No config but options: every option off except the given ones.
	- A config or a mapping of options: that, with `options` applied on top.
	"""
	if config is None:
		if not options:
			return DEFAULT_CONFIG
		return MinifierConfig.from_mapping(options)
	if not isinstance(config, MinifierConfig):
		config = MinifierConfig.from_mapping(config)
	if options:
		config = MinifierConfig.from_mapping(options, base=config)
	return config


def minify(
	html: str,
	config: Union[MinifierConfig, Mapping[str, Any], None] = None,
	**options: Any,
) -> str:
	"""
	Minify an HTML document or fragment.

	`minify(html)` uses the default profile: comments removed, empty and
	redundant attributes removed, script/style type attributes removed,
	whitespace collapsed, boolean attributes collapsed, short doctype.
	Pass a MinifierConfig, a mapping of option names, or keyword options to
	choose other behavior, e.g. `minify(html, remove_attribute_quotes=True)`.

	Malformed markup never fails the call, it is passed through as text.
	Raises InvalidInputError for empty input.
	"""
	if not isinstance(html, str) or not html:
		msg = "Cannot minify empty or missing HTML"
		raise InvalidInputError(msg)

	resolved = resolve_config(config, **options)
	tokens = tokenize(html, resolved.custom_fragments)
	minified = Emitter(resolved).emit(tokens)

	logger.debug(f"Minified HTML from {len(html)} to {len(minified)} characters")
	return minified


########################################################################################
#### MARK: Responses


@dataclass(frozen=True)
class MinificationInfo:
	minification: Minification
	duration: float
	ratio: float

	@property
	def headers(self) -> dict:
		value = "; ".join(
			[
				f"ratio={self.ratio:.1f}x",
				f"duration={self.duration * 1000:.1f}ms",
			],
		)
		return {"X-HTML-Squeeze-Minify": value}


def minify_response_data(
	data: bytes,
	minification: Minification,
	html_config: Union[MinifierConfig, None] = None,
) -> Tuple[bytes, MinificationInfo]:
	"""
	Minify an encoded response body with the minifier matching its type.
	Raises ValueError for an unsupported minification.
	"""
	t0 = time.perf_counter()
	text = data.decode()

	if minification is Minification.html:
		minified = minify(text, html_config) if text else text
	elif minification is Minification.css:
		minified = minify_css(text)
	elif minification is Minification.js:
		minified = minify_js(text)
	else:
		msg = f"Unsupported minification: {minification}"
		raise ValueError(msg)

	minified_data = minified.encode()
	ratio = len(data) / len(minified_data) if len(minified_data) > 0 else 1.0

	return minified_data, MinificationInfo(
		minification=minification,
		duration=time.perf_counter() - t0,
		ratio=ratio,
	)
