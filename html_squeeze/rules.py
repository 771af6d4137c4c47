from __future__ import annotations

import re
from typing import Tuple, Union

########################################################################################
#### MARK: Elements


VOID_ELEMENTS = frozenset(
	[
		"area",
		"base",
		"br",
		"col",
		"embed",
		"hr",
		"img",
		"input",
		"link",
		"meta",
		"param",
		"source",
		"track",
		"wbr",
	]
)

# Content is scanned literally until the matching end tag
RAW_TEXT_ELEMENTS = frozenset(["script", "style", "textarea", "title"])

# Whitespace inside these is rendered, so it is never touched
WHITESPACE_SIGNIFICANT_ELEMENTS = frozenset(["pre", "textarea"])

# Whitespace next to these tags can be visible, so it is collapsed but never
# dropped. Every other tag is treated as a block boundary.
INLINE_ELEMENTS = frozenset(
	[
		"a",
		"abbr",
		"acronym",
		"b",
		"bdi",
		"bdo",
		"big",
		"button",
		"cite",
		"code",
		"del",
		"dfn",
		"em",
		"font",
		"i",
		"img",
		"input",
		"ins",
		"kbd",
		"label",
		"mark",
		"math",
		"meter",
		"nobr",
		"object",
		"output",
		"progress",
		"q",
		"rp",
		"rt",
		"rtc",
		"ruby",
		"s",
		"samp",
		"select",
		"small",
		"span",
		"strike",
		"strong",
		"sub",
		"sup",
		"svg",
		"textarea",
		"time",
		"tt",
		"u",
		"var",
		"wbr",
	]
)


########################################################################################
#### MARK: Attributes


BOOLEAN_ATTRIBUTES = frozenset(
	[
		"allowfullscreen",
		"async",
		"autofocus",
		"autoplay",
		"checked",
		"compact",
		"controls",
		"declare",
		"default",
		"defaultchecked",
		"defaultmuted",
		"defaultselected",
		"defer",
		"disabled",
		"enabled",
		"formnovalidate",
		"hidden",
		"indeterminate",
		"inert",
		"ismap",
		"itemscope",
		"loop",
		"multiple",
		"muted",
		"nohref",
		"noresize",
		"noshade",
		"novalidate",
		"nowrap",
		"open",
		"pauseonexit",
		"readonly",
		"required",
		"reversed",
		"scoped",
		"seamless",
		"selected",
		"sortable",
		"truespeed",
		"typemustmatch",
		"visible",
	]
)

_EMPTY_SAFE_PATTERN = re.compile(
	r"^(?:class|id|style|title|lang|dir"
	r"|on(?:focus|blur|change|click|dblclick|mouse(?:down|up|over|move|out)|key(?:press|down|up)))$"
)

_EVENT_ATTRIBUTE_PATTERN = re.compile(r"^on[a-z]{3,}$")

# (tag, attribute) -> attribute value that the tag implies anyway
REDUNDANT_DEFAULTS: dict[tuple[str, str], str] = {
	("script", "language"): "javascript",
	("script", "type"): "text/javascript",
	("form", "method"): "get",
	("input", "type"): "text",
	("area", "shape"): "rect",
}

URL_ATTRIBUTES: dict[str, frozenset[str]] = {
	"a": frozenset(["href"]),
	"area": frozenset(["href"]),
	"link": frozenset(["href"]),
	"base": frozenset(["href"]),
	"img": frozenset(["src", "longdesc", "usemap"]),
	"object": frozenset(["classid", "codebase", "data", "usemap"]),
	"q": frozenset(["cite"]),
	"blockquote": frozenset(["cite"]),
	"ins": frozenset(["cite"]),
	"del": frozenset(["cite"]),
	"form": frozenset(["action"]),
	"input": frozenset(["src", "usemap"]),
	"head": frozenset(["profile"]),
	"script": frozenset(["src", "for"]),
}

EXECUTABLE_SCRIPT_TYPES = frozenset(
	[
		"",
		"text/javascript",
		"text/ecmascript",
		"text/jscript",
		"application/javascript",
		"application/x-javascript",
		"application/ecmascript",
		"module",
	]
)

STYLE_TYPES = frozenset(["", "text/css"])


def _normalize(value: Union[str, None]) -> str:
	return (value or "").strip().lower()


def is_boolean_attribute(name: str) -> bool:
	return name in BOOLEAN_ATTRIBUTES


def is_empty_safe_attribute(tag: str, name: str) -> bool:
	return (tag == "input" and name == "value") or _EMPTY_SAFE_PATTERN.match(name) is not None


def is_event_attribute(name: str) -> bool:
	return _EVENT_ATTRIBUTE_PATTERN.match(name) is not None


def is_url_attribute(tag: str, name: str) -> bool:
	return name in URL_ATTRIBUTES.get(tag, ())


def is_executable_script_type(value: Union[str, None]) -> bool:
	# Parameters such as `; charset=utf-8` do not change the type
	return _normalize(value).split(";")[0].strip() in EXECUTABLE_SCRIPT_TYPES


def is_redundant_attribute(
	tag: str,
	name: str,
	value: Union[str, None],
	attributes: Tuple[Tuple[str, Union[str, None]], ...],
) -> bool:
	"""
	True when the attribute repeats what the element implies anyway.
	`attributes` holds the lower-cased names and raw values of the whole tag,
	some rules depend on sibling attributes.
	"""
	if tag == "script" and name == "charset":
		return not any(other == "src" for other, _ in attributes)
	if tag == "a" and name == "name":
		return any(other == "id" and other_value == value for other, other_value in attributes)
	default = REDUNDANT_DEFAULTS.get((tag, name))
	return default is not None and _normalize(value) == default


def is_removable_type_attribute(
	tag: str,
	name: str,
	value: Union[str, None],
	attributes: Tuple[Tuple[str, Union[str, None]], ...],
	*,
	script: bool,
	style_link: bool,
) -> bool:
	"""`type` attributes that only restate the HTML5 default for script, style and link."""
	if name != "type":
		return False
	if script and tag == "script":
		# `module` changes how the script runs
		return _normalize(value) != "module" and is_executable_script_type(value)
	if style_link and tag == "style":
		return _normalize(value) in STYLE_TYPES
	if style_link and tag == "link":
		is_stylesheet = any(
			other == "rel" and _normalize(other_value) == "stylesheet" for other, other_value in attributes
		)
		return is_stylesheet and _normalize(value) in STYLE_TYPES
	return False


def can_remove_element(tag: str, attributes: Tuple[Tuple[str, Union[str, None]], ...]) -> bool:
	"""Whether an element with no content may be dropped by `remove_empty_elements`."""
	if tag in VOID_ELEMENTS or tag == "textarea":
		return False
	names = {name for name, _ in attributes}
	if tag in ("audio", "script", "video"):
		return "src" not in names
	if tag == "iframe":
		return not names & {"src", "srcdoc"}
	if tag == "object":
		return "data" not in names
	return True


########################################################################################
#### MARK: Fragments and comments


# Template language regions passed through verbatim
DEFAULT_CUSTOM_FRAGMENTS: Tuple[str, ...] = (
	r"<%[\s\S]*?%>",
	r"<\?[\s\S]*?\?>",
)

# Comments kept even when removing comments, matched against the comment body
DEFAULT_PRESERVE_COMMENTS: Tuple[str, ...] = (
	r"^!",
	r"^\s*#",
)

IGNORE_MARKER = "<!-- htmlmin:ignore -->"

SHORT_DOCTYPE = "<!doctype html>"
