from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Union

from .models import TokenKind, WhitespaceMode, WhitespaceState
from .rules import INLINE_ELEMENTS, WHITESPACE_SIGNIFICANT_ELEMENTS
from .tokens import EndTag, StartTag, Token

# HTML whitespace only, a non-breaking space is content
_WHITESPACE_RUN_PATTERN = re.compile(r"[ \t\n\r\f]+")


########################################################################################
#### MARK: Element context


@dataclass
class OpenElement:
	name: str
	""" Lower-cased tag name """

	significant: bool
	output_index: int = 0
	""" Where the start tag was written in the output, used to drop empty elements """

	removable: bool = False

	last_token: Union[Token, None] = None
	""" The token written just before the start tag, restored when the element is dropped """

	space_before: bool = False
	""" Whether collapsing dropped the whitespace right before the start tag """


class ElementContext:
	"""
	Stack of currently open elements, innermost last.
	A stray end tag leaves the stack untouched.
	"""

	__slots__ = "_significant_depth", "_stack"

	_stack: List[OpenElement]
	_significant_depth: int

	def __init__(self) -> None:
		self._stack = []
		self._significant_depth = 0

	def __len__(self) -> int:
		return len(self._stack)

	@property
	def top(self) -> Union[OpenElement, None]:
		return self._stack[-1] if self._stack else None

	@property
	def state(self) -> WhitespaceState:
		if self._significant_depth > 0:
			return WhitespaceState.significant
		if self._stack:
			return WhitespaceState.insignificant
		return WhitespaceState.normal

	def push(
		self,
		name: str,
		output_index: int = 0,
		removable: bool = False,
		last_token: Union[Token, None] = None,
		space_before: bool = False,
	) -> OpenElement:
		element = OpenElement(
			name=name,
			significant=name in WHITESPACE_SIGNIFICANT_ELEMENTS,
			output_index=output_index,
			removable=removable,
			last_token=last_token,
			space_before=space_before,
		)
		self._stack.append(element)
		if element.significant:
			self._significant_depth += 1
		return element

	def pop(self, name: str) -> List[OpenElement]:
		"""
		Close the innermost open element called `name` together with anything
		still open inside it. Returns the closed elements, innermost first, or
		an empty list when nothing called `name` is open.
		"""
		for index in range(len(self._stack) - 1, -1, -1):
			if self._stack[index].name == name:
				break
		else:
			return []

		closed = self._stack[index:][::-1]
		del self._stack[index:]
		self._significant_depth -= sum(1 for element in closed if element.significant)
		return closed


########################################################################################
#### MARK: Collapser


def is_block_boundary(token: Union[Token, None], trim_custom_fragments: bool = False) -> bool:
	"""
	Whether whitespace next to `token` may be dropped entirely.
	None stands for the start or the end of the document.
	"""
	if token is None:
		return True
	if isinstance(token, (StartTag, EndTag)):
		return token.lower_name not in INLINE_ELEMENTS
	if token.kind is TokenKind.doctype:
		return True
	if token.kind is TokenKind.fragment:
		return trim_custom_fragments
	return False


def _collapse_run(match: re.Match[str]) -> str:
	return "\n" if "\n" in match.group() else " "


class WhitespaceCollapser:
	__slots__ = ("mode",)

	mode: WhitespaceMode

	def __init__(self, mode: WhitespaceMode) -> None:
		self.mode = mode

	def collapse(
		self,
		text: str,
		state: WhitespaceState,
		prev_is_block: bool,
		next_is_block: bool,
	) -> str:
		"""
		Rewrite the whitespace of one text run.

		- `collapse`: runs become one space, a space next to a block boundary
		  is dropped.
		- `conservative`: runs become one space, nothing is dropped.
		- `preserve_line_breaks`: runs containing a newline become one newline,
		  other runs one space; only spaces are dropped at block boundaries, so
		  a line break survives.

		Text in a whitespace-significant region is returned unchanged.
		"""
		if self.mode is WhitespaceMode.off or state is WhitespaceState.significant:
			return text

		if self.mode is WhitespaceMode.preserve_line_breaks:
			collapsed = _WHITESPACE_RUN_PATTERN.sub(_collapse_run, text)
		else:
			collapsed = _WHITESPACE_RUN_PATTERN.sub(" ", text)

		if self.mode is WhitespaceMode.conservative:
			return collapsed

		if prev_is_block and collapsed.startswith(" "):
			collapsed = collapsed[1:]
		if next_is_block and collapsed.endswith(" "):
			collapsed = collapsed[:-1]
		return collapsed
