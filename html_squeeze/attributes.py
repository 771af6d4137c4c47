from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple, Union

from .models import Quote
from .rules import (
	is_boolean_attribute,
	is_empty_safe_attribute,
	is_event_attribute,
	is_redundant_attribute,
	is_removable_type_attribute,
	is_url_attribute,
)

if TYPE_CHECKING:
	from .config import MinifierConfig
	from .minifiers import SubMinifiers
	from .tokens import Attribute, StartTag

# Characters that would end or split an unquoted value when re-tokenized
_UNQUOTED_UNSAFE_PATTERN = re.compile(r"[ \t\n\f\r\"'`=<>]")

_QUOTE_ESCAPES = {
	Quote.double: "&#34;",
	Quote.single: "&#39;",
}


@dataclass(frozen=True)
class MinifiedAttribute:
	name: str
	value: Union[str, None]
	quote: Quote

	def render(self) -> str:
		if self.value is None:
			return self.name
		quote = self.quote.value
		return f"{self.name}={quote}{self.value}{quote}"


def can_remove_quotes(value: Union[str, None]) -> bool:
	"""
	True when `value` written without quotes reads back as the same value.
	A trailing `/` is kept quoted so it cannot be mistaken for `/>`.
	"""
	if not value:
		return False
	return _UNQUOTED_UNSAFE_PATTERN.search(value) is None and not value.endswith("/")


def _quote_value(original: Quote, value: str) -> Tuple[Quote, str]:
	quote = Quote.double if original is Quote.none else original
	if quote.value not in value:
		return quote, value
	other = Quote.single if quote is Quote.double else Quote.double
	if other.value not in value:
		return other, value
	return quote, value.replace(quote.value, _QUOTE_ESCAPES[quote])


def _minify_value(
	tag: str,
	name: str,
	value: str,
	config: MinifierConfig,
	minifiers: SubMinifiers,
) -> str:
	if config.minify_urls and is_url_attribute(tag, name):
		return minifiers.url_attribute(value)
	if config.minify_css and name == "style":
		return minifiers.style_attribute(value)
	if config.minify_js and is_event_attribute(name):
		return minifiers.event_attribute(value)
	return value


def minify_attribute(
	tag: str,
	attribute: Attribute,
	siblings: Tuple[Tuple[str, Union[str, None]], ...],
	config: MinifierConfig,
	minifiers: SubMinifiers,
) -> Union[MinifiedAttribute, None]:
	"""
	Minify one attribute of a start tag, or return None to drop it.

	The steps run in a fixed order: redundant removal, boolean collapsing,
	empty removal, sub-minification, quote removal. Collapsing a boolean
	first means a valueless attribute never reaches quote handling.
	"""
	name = attribute.lower_name
	value = attribute.value

	if config.remove_redundant_attributes and is_redundant_attribute(tag, name, value, siblings):
		return None
	if is_removable_type_attribute(
		tag,
		name,
		value,
		siblings,
		script=config.remove_script_type_attributes,
		style_link=config.remove_style_link_type_attributes,
	):
		return None

	if config.collapse_boolean_attributes and is_boolean_attribute(name):
		return MinifiedAttribute(attribute.name, None, Quote.none)

	is_empty = value is None or not value.strip()
	if config.remove_empty_attributes and is_empty and is_empty_safe_attribute(tag, name):
		return None

	if value is None:
		return MinifiedAttribute(attribute.name, None, Quote.none)

	minified = _minify_value(tag, name, value, config, minifiers)

	if config.remove_attribute_quotes and can_remove_quotes(minified):
		return MinifiedAttribute(attribute.name, minified, Quote.none)
	if attribute.quote is Quote.none and minified == value:
		return MinifiedAttribute(attribute.name, value, Quote.none)

	quote, minified = _quote_value(attribute.quote, minified)
	return MinifiedAttribute(attribute.name, minified, quote)


def minify_attributes(tag: StartTag, config: MinifierConfig, minifiers: SubMinifiers) -> List[MinifiedAttribute]:
	"""Minify the attributes of `tag`, keeping declaration order."""
	siblings = tuple((attribute.lower_name, attribute.value) for attribute in tag.attributes)
	minified = (
		minify_attribute(tag.lower_name, attribute, siblings, config, minifiers) for attribute in tag.attributes
	)
	return [attribute for attribute in minified if attribute is not None]
