from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Tuple, Union

from .errors import EngineDefectError
from .models import Quote
from .rules import DEFAULT_CUSTOM_FRAGMENTS, IGNORE_MARKER, RAW_TEXT_ELEMENTS
from .tokens import (
	Attribute,
	CData,
	Comment,
	ConditionalComment,
	Doctype,
	EndTag,
	Fragment,
	Span,
	StartTag,
	Text,
	Token,
)

if TYPE_CHECKING:
	from re import Match, Pattern

logger = logging.getLogger(__name__)

_SPACE = "\t\n\f\r "

_TAG_NAME_PATTERN = re.compile(rf"[A-Za-z][^{_SPACE}/>]*")
_TAG_END_PATTERN = re.compile(rf"[{_SPACE}/]*>")
_ATTRIBUTE_PATTERN = re.compile(
	rf"""
	[{_SPACE}/]*
	(?P<name>[^{_SPACE}/>=]+)
	(?:
		[{_SPACE}]*=[{_SPACE}]*
		(?:
			"(?P<double>[^"]*)"
			|'(?P<single>[^']*)'
			|(?P<bare>[^{_SPACE}>]+)
		)
	)?
	""",
	re.VERBOSE,
)
_END_TAG_PATTERN = re.compile(rf"</(?P<name>[A-Za-z][^{_SPACE}/>]*)[^>]*>")
_DOCTYPE_PATTERN = re.compile(r"<!doctype[^>]*>", re.IGNORECASE)
_DOWNLEVEL_REVEALED_PATTERN = re.compile(r"<!\[(?:if\b[^\]<>]*|endif)\]>", re.IGNORECASE)
_RAW_TEXT_END_PATTERNS = {
	name: re.compile(rf"</{name}(?=[{_SPACE}/>]|$)", re.IGNORECASE) for name in RAW_TEXT_ELEMENTS
}

_COMMENT_OPEN = "<!--"
_COMMENT_CLOSE = "-->"
_CDATA_OPEN = "<![CDATA["
_CDATA_CLOSE = "]]>"
_ENDIF_CLOSE = "<![endif]-->"


########################################################################################
#### MARK: Attributes


def _build_attribute(match: Match[str]) -> Attribute:
	if match.group("double") is not None:
		value, quote = match.group("double"), Quote.double
	elif match.group("single") is not None:
		value, quote = match.group("single"), Quote.single
	elif match.group("bare") is not None:
		value, quote = match.group("bare"), Quote.none
	else:
		value, quote = None, Quote.none
	return Attribute(
		name=match.group("name"),
		value=value,
		quote=quote,
		span=Span(match.start("name"), match.end()),
	)


def _scan_attributes(source: str, pos: int) -> Tuple[List[Attribute], Union[Match[str], None], int]:
	"""
	Read attributes from `pos` up to the closing `>` of a start tag.
	Returns the attributes, the match of the tag end, which is None when the
	tag is never closed, and the offset the scan stopped at.
	"""
	attributes: List[Attribute] = []
	while True:
		tag_end = _TAG_END_PATTERN.match(source, pos)
		if tag_end is not None:
			return attributes, tag_end, tag_end.end()
		match = _ATTRIBUTE_PATTERN.match(source, pos)
		if match is None:
			return attributes, None, pos
		attributes.append(_build_attribute(match))
		pos = match.end()


def parse_attributes(tag_source: str) -> List[Attribute]:
	"""
	Extract the attributes of a start tag in declaration order.
	`tag_source` is either a whole start tag (`<a href="/">`) or just the
	attribute part of one. Spans are offsets into `tag_source`.
	"""
	pos = 0
	if tag_source.startswith("<"):
		name = _TAG_NAME_PATTERN.match(tag_source, 1)
		pos = name.end() if name is not None else 1
	attributes, _, _ = _scan_attributes(tag_source, pos)
	return attributes


########################################################################################
#### MARK: Tokenizer


class Tokenizer:
	"""
	Single forward pass over an HTML string producing lexical events.

	Anything that does not parse as markup is kept as text, so the tokens
	always cover the whole input without gaps or overlaps.

	Unclosed markup never makes the scan quadratic: a delimiter that is
	missing once is not searched for again, and the attributes of a start
	tag that never closes are read only once.
	"""

	__slots__ = "_missing", "_resume_at", "fragment_pattern", "html"

	html: str
	fragment_pattern: Union[Pattern[str], None]

	_missing: Dict[str, int]
	""" Closing delimiter -> earliest offset from which it does not occur """

	_resume_at: int
	""" Where scanning goes on after markup failed to parse """

	def __init__(self, html: str, custom_fragments: Iterable[str] = DEFAULT_CUSTOM_FRAGMENTS) -> None:
		self.html = html
		patterns = [f"(?:{pattern})" for pattern in custom_fragments]
		self.fragment_pattern = re.compile("|".join(patterns)) if patterns else None
		self._missing = {}
		self._resume_at = 0

	def __iter__(self) -> Iterator[Token]:
		expected = 0
		for token in self._scan():
			if token.span.start != expected or token.span.end <= token.span.start:
				msg = f"Token {token!r} does not continue at offset {expected}"
				raise EngineDefectError(msg)
			expected = token.span.end
			yield token
		if expected != len(self.html):
			msg = f"Tokens stop at offset {expected}, input has {len(self.html)} characters"
			raise EngineDefectError(msg)

	def _text(self, start: int, end: int) -> Text:
		return Text(Span(start, end), self.html[start:end])

	def _find(self, needle: str, start: int) -> int:
		if start >= self._missing.get(needle, len(self.html) + 1):
			return -1
		index = self.html.find(needle, start)
		if index == -1:
			self._missing[needle] = start
		return index

	def _search_fragment(self, pos: int) -> Union[Match[str], None]:
		if self.fragment_pattern is None:
			return None
		for match in self.fragment_pattern.finditer(self.html, pos):
			if match.end() > match.start():
				return match
		return None

	def _scan(self) -> Iterator[Token]:
		html = self.html
		length = len(html)
		pos = text_start = 0
		next_fragment = self._search_fragment(0)
		# Every markup construct ends in `>`, past the last one only text is left
		last_close = html.rfind(">")

		while pos < length:
			if next_fragment is not None and next_fragment.start() < pos:
				next_fragment = self._search_fragment(pos)

			lt = html.find("<", pos)
			if lt == -1 or lt > last_close:
				lt = length

			if next_fragment is not None and next_fragment.start() <= lt:
				start, end = next_fragment.span()
				if start > text_start:
					yield self._text(text_start, start)
				yield Fragment(Span(start, end), html[start:end], content=html[start:end])
				pos = text_start = end
				continue

			if lt == length:
				break

			token = self._match_markup(lt)
			if token is None:
				logger.debug(f"Keeping unparsable '<' at offset {lt} as text")
				pos = self._resume_at
				if next_fragment is not None and next_fragment.start() < pos:
					pos = next_fragment.start()
				continue

			if lt > text_start:
				yield self._text(text_start, lt)
			yield token
			pos = text_start = token.span.end

			if isinstance(token, StartTag) and token.lower_name in RAW_TEXT_ELEMENTS:
				raw_end = self._find_raw_text_end(token.lower_name, pos)
				if raw_end > pos:
					yield self._text(pos, raw_end)
				pos = text_start = raw_end

		if length > text_start:
			yield self._text(text_start, length)

	def _find_raw_text_end(self, name: str, pos: int) -> int:
		match = _RAW_TEXT_END_PATTERNS[name].search(self.html, pos)
		if match is None:
			logger.debug(f"No closing </{name}> after offset {pos}, reading to the end")
			return len(self.html)
		return match.start()

	####################################################################################
	#### MARK: Markup

	def _match_markup(self, start: int) -> Union[Token, None]:
		html = self.html
		self._resume_at = start + 1
		if html.startswith(_COMMENT_OPEN, start):
			return self._match_comment(start)
		if html.startswith("<![", start):
			return self._match_bracket(start)
		if html.startswith("<!", start):
			match = _DOCTYPE_PATTERN.match(html, start)
			if match is None:
				return None
			return Doctype(Span(start, match.end()), match.group())
		if html.startswith("</", start):
			return self._match_end_tag(start)
		return self._match_start_tag(start)

	def _match_comment(self, start: int) -> Union[Token, None]:
		html = self.html

		if html.startswith(IGNORE_MARKER, start):
			inner_start = start + len(IGNORE_MARKER)
			close = self._find(IGNORE_MARKER, inner_start)
			if close != -1:
				end = close + len(IGNORE_MARKER)
				return Fragment(Span(start, end), html[start:end], content=html[inner_start:close])

		body_start = start + len(_COMMENT_OPEN)
		close = self._find(_COMMENT_CLOSE, body_start)
		if close == -1:
			return None
		end = close + len(_COMMENT_CLOSE)
		body = html[body_start:close]

		if body.startswith("[if"):
			if body.endswith("<!"):
				# Downlevel-revealed opener: <!--[if !IE]><!-->
				return ConditionalComment(Span(start, end), html[start:end])
			endif = self._find(_ENDIF_CLOSE, body_start)
			if endif != -1:
				end = endif + len(_ENDIF_CLOSE)
				return ConditionalComment(Span(start, end), html[start:end])
		if body == "<![endif]":
			return ConditionalComment(Span(start, end), html[start:end])

		return Comment(Span(start, end), html[start:end], data=body)

	def _match_bracket(self, start: int) -> Union[Token, None]:
		html = self.html
		if html.startswith(_CDATA_OPEN, start):
			close = self._find(_CDATA_CLOSE, start + len(_CDATA_OPEN))
			if close == -1:
				return None
			end = close + len(_CDATA_CLOSE)
			return CData(Span(start, end), html[start:end])
		match = _DOWNLEVEL_REVEALED_PATTERN.match(html, start)
		if match is None:
			return None
		return ConditionalComment(Span(start, match.end()), match.group())

	def _match_end_tag(self, start: int) -> Union[EndTag, None]:
		match = _END_TAG_PATTERN.match(self.html, start)
		if match is None:
			return None
		return EndTag(Span(start, match.end()), match.group(), name=match.group("name"))

	def _match_start_tag(self, start: int) -> Union[StartTag, None]:
		html = self.html
		name = _TAG_NAME_PATTERN.match(html, start + 1)
		if name is None:
			return None
		attributes, tag_end, stop = _scan_attributes(html, name.end())
		if tag_end is None:
			# What was read as attributes of an unclosed tag stays text
			self._resume_at = stop
			return None
		end = tag_end.end()
		return StartTag(
			Span(start, end),
			html[start:end],
			name=name.group(),
			attributes=tuple(attributes),
			self_closing=tag_end.group().endswith("/>"),
		)


def tokenize(html: str, custom_fragments: Iterable[str] = DEFAULT_CUSTOM_FRAGMENTS) -> Iterator[Token]:
	"""
	Lazily split `html` into tokens. The sequence is consumed once; the
	concatenated `source` of all tokens equals `html`.
	"""
	return iter(Tokenizer(html, custom_fragments))
