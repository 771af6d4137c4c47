from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
	from flask import Config


class TokenKind(Enum):
	text = "text"
	start_tag = "start_tag"
	end_tag = "end_tag"
	comment = "comment"
	doctype = "doctype"
	cdata = "cdata"
	conditional_comment = "conditional_comment"
	fragment = "fragment"


class Quote(Enum):
	none = ""
	single = "'"
	double = '"'


class WhitespaceMode(Enum):
	off = "off"
	collapse = "collapse"
	conservative = "conservative"
	preserve_line_breaks = "preserve_line_breaks"


class WhitespaceState(Enum):
	normal = "normal"
	insignificant = "insignificant"
	significant = "significant"


class Minification(Enum):
	js = "js"
	css = "css"
	html = "html"

	@classmethod
	def get_from_mimetype_and_config(
		cls,
		mimetype: Union[str, None],
		config: Config,
	) -> Union[Minification, None]:
		"""
		Based on the response mimetype:
		- `js` or `json`, and `SQUEEZE_MINIFY_JS=True`: return `Minification.js`
		- `css` and `SQUEEZE_MINIFY_CSS=True`: return `Minification.css`
		-  `html` and `SQUEEZE_MINIFY_HTML=True`: return `Minification.html`
		- Otherwise, return `None`
		"""
		if mimetype is None:
			return None
		is_js_or_json = mimetype.endswith(("javascript", "json"))
		if is_js_or_json and config.get("SQUEEZE_MINIFY_JS"):
			return cls.js
		if mimetype.endswith("css") and config.get("SQUEEZE_MINIFY_CSS"):
			return cls.css
		if mimetype.endswith("html") and config.get("SQUEEZE_MINIFY_HTML"):
			return cls.html
		return None
