from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Iterable, Iterator, List, Tuple, Union

from .attributes import minify_attributes
from .minifiers import SubMinifiers
from .models import Quote, WhitespaceMode, WhitespaceState
from .rules import RAW_TEXT_ELEMENTS, SHORT_DOCTYPE, VOID_ELEMENTS, can_remove_element, is_executable_script_type
from .tokens import Comment, Doctype, EndTag, Fragment, Span, StartTag, Text, Token
from .whitespace import ElementContext, OpenElement, WhitespaceCollapser, is_block_boundary

if TYPE_CHECKING:
	from .attributes import MinifiedAttribute
	from .config import MinifierConfig

logger = logging.getLogger(__name__)

_HTML_WHITESPACE = " \t\n\r\f"
_WHITESPACE_PATTERN = re.compile(r"[ \t\n\r\f]+")


def _with_lookahead(tokens: Iterable[Token]) -> Iterator[Tuple[Token, Union[Token, None]]]:
	iterator = iter(tokens)
	current = next(iterator, None)
	while current is not None:
		following = next(iterator, None)
		yield current, following
		current = following


def _render_slash(attributes: List[MinifiedAttribute]) -> str:
	# `<img src=a/>` would read the slash as part of the value
	if attributes and attributes[-1].value is not None and attributes[-1].quote is Quote.none:
		return " /"
	return "/"


class Emitter:
	"""
	Reassembles a token stream into minified HTML.
	One instance serves exactly one `minify()` call.
	"""

	__slots__ = (
		"_last",
		"_pending_space",
		"_raw_owner",
		"_space_dropped",
		"collapser",
		"config",
		"context",
		"minifiers",
		"output",
		"preserve_pattern",
	)

	config: MinifierConfig
	context: ElementContext
	collapser: WhitespaceCollapser
	minifiers: SubMinifiers
	output: List[str]
	preserve_pattern: Union[re.Pattern[str], None]

	_last: Union[Token, None]
	""" The last token that produced output, for whitespace trimming """

	_raw_owner: Union[StartTag, None]
	""" The open raw-text tag whose content comes next """

	_space_dropped: bool
	""" Whether the last text run lost its trailing whitespace to a block boundary """

	_pending_space: bool
	""" A dropped element took the space that separated its neighbours """

	def __init__(self, config: MinifierConfig) -> None:
		self.config = config
		self.context = ElementContext()
		self.collapser = WhitespaceCollapser(config.whitespace_mode)
		self.minifiers = SubMinifiers(config)
		self.output = []
		patterns = [f"(?:{pattern})" for pattern in config.preserve_comments]
		self.preserve_pattern = re.compile("|".join(patterns)) if patterns else None
		self._last = None
		self._raw_owner = None
		self._space_dropped = False
		self._pending_space = False

	def emit(self, tokens: Iterable[Token]) -> str:
		for token, following in _with_lookahead(self._surviving(tokens)):
			self._emit_token(token, following)
		return "".join(self.output)

	####################################################################################
	#### MARK: Token stream

	def _drops_comment(self, comment: Comment) -> bool:
		if not self.config.remove_comments:
			return False
		return self.preserve_pattern is None or self.preserve_pattern.search(comment.data) is None

	def _surviving(self, tokens: Iterable[Token]) -> Iterator[Token]:
		"""Drop removed comments and join the text on both sides of them."""
		pending: Union[Text, None] = None
		for token in tokens:
			if isinstance(token, Comment) and self._drops_comment(token):
				continue
			if isinstance(token, Text):
				if pending is None:
					pending = token
				else:
					pending = Text(Span(pending.span.start, token.span.end), pending.source + token.source)
				continue
			if pending is not None:
				yield pending
				pending = None
			yield token
		if pending is not None:
			yield pending

	def _write(self, token: Token, text: str) -> None:
		self.output.append(text)
		self._last = token
		self._space_dropped = False
		self._pending_space = False

	def _emit_token(self, token: Token, following: Union[Token, None]) -> None:
		if isinstance(token, Text):
			self._emit_text(token, following)
		elif isinstance(token, StartTag):
			self._emit_start_tag(token)
		elif isinstance(token, EndTag):
			self._emit_end_tag(token)
		elif isinstance(token, Doctype):
			self._emit_doctype(token)
		elif isinstance(token, Fragment):
			self._write(token, token.content)
		else:
			# Kept comments, conditional comments and CDATA pass through untouched
			self._write(token, token.source)

	####################################################################################
	#### MARK: Text

	def _emit_raw_text(self, token: Text, owner: StartTag) -> None:
		text = token.source
		if owner.lower_name == "style" and self.config.minify_css:
			text = self.minifiers.style_block(text)
		elif owner.lower_name == "script" and self.config.minify_js:
			script_type = next(
				(attribute.value for attribute in owner.attributes if attribute.lower_name == "type"),
				None,
			)
			if is_executable_script_type(script_type):
				text = self.minifiers.script_block(text)
		self._write(token, text)

	def _collapsing(self) -> bool:
		if self.config.whitespace_mode is WhitespaceMode.off:
			return False
		return self.context.state is not WhitespaceState.significant

	def _emit_title_text(self, token: Text) -> None:
		text = self.collapser.collapse(token.source, self.context.state, prev_is_block=True, next_is_block=True)
		if text:
			self._write(token, text)

	def _emit_text(self, token: Text, following: Union[Token, None]) -> None:
		top = self.context.top
		owner = self._raw_owner
		if owner is not None and top is not None and top.name == owner.lower_name:
			if owner.lower_name == "title":
				self._emit_title_text(token)
			else:
				self._emit_raw_text(token, owner)
			return

		trim_fragments = self.config.trim_custom_fragments
		prev_is_block = is_block_boundary(self._last, trim_fragments)
		text = self.collapser.collapse(
			token.source,
			self.context.state,
			prev_is_block=prev_is_block,
			next_is_block=is_block_boundary(following, trim_fragments),
		)

		collapsing = self._collapsing()
		if text and collapsing:
			# Two runs only meet when an empty element between them was dropped
			if isinstance(self._last, Text) and text[0] in " \n" and self.output[-1][-1:] in (" ", "\n"):
				text = text[1:]
			elif self._pending_space and not prev_is_block and text[0] not in " \n":
				text = f" {text}"
		space_dropped = collapsing and token.source[-1] in _HTML_WHITESPACE and not text.endswith((" ", "\n"))

		if text:
			self._write(token, text)
		self._space_dropped = space_dropped

	####################################################################################
	#### MARK: Tags

	def _tag_name(self, name: str) -> str:
		return name.lower() if self.config.normalize_tag_case else name

	def _emit_start_tag(self, token: StartTag) -> None:
		name = token.lower_name
		attributes = minify_attributes(token, self.config, self.minifiers)

		parts = [f"<{self._tag_name(token.name)}"]
		parts.extend(f" {attribute.render()}" for attribute in attributes)
		if token.self_closing and self.config.keep_closing_slash:
			parts.append(_render_slash(attributes))
		parts.append(">")

		output_index = len(self.output)
		last_token, space_before = self._last, self._space_dropped
		self._write(token, "".join(parts))

		# Raw-text elements are open until their end tag whatever the slash says
		opens = name not in VOID_ELEMENTS and (not token.self_closing or name in RAW_TEXT_ELEMENTS)
		if not opens:
			return
		siblings = tuple((attribute.lower_name, attribute.value) for attribute in token.attributes)
		self.context.push(
			name,
			output_index=output_index,
			removable=self.config.remove_empty_elements and can_remove_element(name, siblings),
			last_token=last_token,
			space_before=space_before,
		)
		self._raw_owner = token if name in RAW_TEXT_ELEMENTS else None

	def _is_empty_content(self, element: OpenElement) -> bool:
		content = "".join(self.output[element.output_index + 1 :])
		if not content:
			return True
		# Whitespace only counts as nothing where it would have been collapsed
		significant = element.significant or self.context.state is WhitespaceState.significant
		collapsing = self.config.whitespace_mode is not WhitespaceMode.off
		return collapsing and not significant and _WHITESPACE_PATTERN.fullmatch(content) is not None

	def _drop_element(self, element: OpenElement) -> None:
		"""
		Remove an empty element from the output as if it had never been there.
		Whitespace around it is re-joined by the next text run.
		"""
		del self.output[element.output_index :]
		self._last = element.last_token
		self._space_dropped = False
		self._pending_space = element.space_before and self._collapsing()

	def _emit_end_tag(self, token: EndTag) -> None:
		name = token.lower_name
		self._raw_owner = None
		closed = self.context.pop(name)

		if not closed:
			logger.debug(f"Stray </{token.name}> at offset {token.span.start}")
		else:
			element = closed[-1]
			if element.removable and self._is_empty_content(element):
				self._drop_element(element)
				return

		self._write(token, f"</{self._tag_name(token.name)}>")

	def _emit_doctype(self, token: Doctype) -> None:
		if self.config.use_short_doctype:
			self._write(token, SHORT_DOCTYPE)
		elif self.config.collapse_whitespace:
			self._write(token, _WHITESPACE_PATTERN.sub(" ", token.source))
		else:
			self._write(token, token.source)
