from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Tuple, Union

from .models import WhitespaceMode
from .rules import DEFAULT_CUSTOM_FRAGMENTS, DEFAULT_PRESERVE_COMMENTS

if TYPE_CHECKING:
	Delegate = Callable[[str], str]

# html-minifier option names -> MinifierConfig field names
OPTION_ALIASES = {
	"removeAttributeQuotes": "remove_attribute_quotes",
	"removeComments": "remove_comments",
	"removeEmptyAttributes": "remove_empty_attributes",
	"removeRedundantAttributes": "remove_redundant_attributes",
	"removeScriptTypeAttributes": "remove_script_type_attributes",
	"removeStyleLinkTypeAttributes": "remove_style_link_type_attributes",
	"trimCustomFragments": "trim_custom_fragments",
	"useShortDoctype": "use_short_doctype",
	"collapseWhitespace": "collapse_whitespace",
	"conservativeCollapse": "conservative_collapse",
	"preserveLineBreaks": "preserve_line_breaks",
	"collapseBooleanAttributes": "collapse_boolean_attributes",
	"removeEmptyElements": "remove_empty_elements",
	"minifyJS": "minify_js",
	"minifyCSS": "minify_css",
	"minifyURLs": "minify_urls",
	"ignoreCustomFragments": "custom_fragments",
	"ignoreCustomComments": "preserve_comments",
	"keepClosingSlash": "keep_closing_slash",
}

# Options that also accept a delegate callable in place of True
_DELEGATE_OPTIONS = {
	"minify_css": "css_minifier",
	"minify_js": "js_minifier",
	"minify_urls": "url_minifier",
}


@dataclass(frozen=True)
class MinifierConfig:
	"""
	Immutable snapshot of every minification option. Every pass of one
	`minify()` call reads the same instance.
	"""

	remove_attribute_quotes: bool = False
	remove_comments: bool = False
	remove_empty_attributes: bool = False
	remove_redundant_attributes: bool = False
	remove_script_type_attributes: bool = False
	remove_style_link_type_attributes: bool = False
	trim_custom_fragments: bool = False
	use_short_doctype: bool = False
	collapse_whitespace: bool = False
	conservative_collapse: bool = False
	preserve_line_breaks: bool = False
	collapse_boolean_attributes: bool = False
	remove_empty_elements: bool = False
	minify_js: bool = False
	minify_css: bool = False
	minify_urls: bool = False

	css_minifier: Union[Delegate, None] = None
	""" Replaces rcssmin for <style> blocks and style attributes """

	js_minifier: Union[Delegate, None] = None
	""" Replaces rjsmin for <script> blocks and event handler attributes """

	url_minifier: Union[Delegate, None] = None
	site: Union[str, None] = None
	""" Base URL that URL attributes are made relative to """

	custom_fragments: Tuple[str, ...] = DEFAULT_CUSTOM_FRAGMENTS
	preserve_comments: Tuple[str, ...] = DEFAULT_PRESERVE_COMMENTS

	delegate_timeout: Union[float, None] = None
	""" Seconds a sub-minifier may run before its block is left unminified """

	strict_delegates: bool = False
	""" Raise sub-minifier failures instead of keeping the original text """

	keep_closing_slash: bool = True
	normalize_tag_case: bool = False

	def __post_init__(self) -> None:
		# Accept any iterable of patterns but store tuples, the config is shared
		object.__setattr__(self, "custom_fragments", tuple(self.custom_fragments))
		object.__setattr__(self, "preserve_comments", tuple(self.preserve_comments))
		if self.delegate_timeout is not None and self.delegate_timeout <= 0:
			msg = f"delegate_timeout must be positive, got {self.delegate_timeout}"
			raise ValueError(msg)

	@property
	def whitespace_mode(self) -> WhitespaceMode:
		if not self.collapse_whitespace:
			return WhitespaceMode.off
		if self.preserve_line_breaks:
			return WhitespaceMode.preserve_line_breaks
		if self.conservative_collapse:
			return WhitespaceMode.conservative
		return WhitespaceMode.collapse

	def replace(self, **changes: Any) -> MinifierConfig:
		return dataclasses.replace(self, **changes)

	@classmethod
	def from_mapping(
		cls,
		options: Mapping[str, Any],
		base: Union[MinifierConfig, None] = None,
	) -> MinifierConfig:
		"""
		Build a config from option names, either the html-minifier camelCase
		names (`removeComments`) or the field names (`remove_comments`).
		Options not given keep their value from `base`, or their default.

		As in html-minifier, `minifyCSS`/`minifyJS`/`minifyURLs` may be a
		callable that replaces the built-in sub-minifier, and `minifyURLs` may
		be a string naming the site URLs are made relative to.
		"""
		known = {field.name for field in dataclasses.fields(cls)}
		changes: dict[str, Any] = {}

		for key, value in options.items():
			name = OPTION_ALIASES.get(key, key)
			if name not in known:
				msg = f"Unsupported option: {key}"
				raise ValueError(msg)

			if name in _DELEGATE_OPTIONS and callable(value):
				changes[_DELEGATE_OPTIONS[name]] = value
				value = True
			elif name == "minify_urls" and isinstance(value, str):
				changes["site"] = value
				value = True

			changes[name] = value

		return dataclasses.replace(base or cls(), **changes)


DEFAULT_CONFIG = MinifierConfig(
	remove_comments=True,
	remove_empty_attributes=True,
	remove_redundant_attributes=True,
	remove_script_type_attributes=True,
	remove_style_link_type_attributes=True,
	use_short_doctype=True,
	collapse_whitespace=True,
	collapse_boolean_attributes=True,
)
""" The default profile used by `minify(html)` without options """
