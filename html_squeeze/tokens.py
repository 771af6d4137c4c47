from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

from .models import Quote, TokenKind


@dataclass(frozen=True)
class Span:
	start: int
	end: int

	def __len__(self) -> int:
		return self.end - self.start


@dataclass(frozen=True)
class Attribute:
	name: str
	""" Name as written in the source """

	value: Union[str, None]
	""" Raw value text without quotes, None for a valueless attribute """

	quote: Quote
	span: Span

	@property
	def lower_name(self) -> str:
		return self.name.lower()


@dataclass(frozen=True)
class Token:
	kind: ClassVar[TokenKind]

	span: Span
	source: str
	""" The exact slice of the input covered by `span` """


class Text(Token):
	kind = TokenKind.text


@dataclass(frozen=True)
class StartTag(Token):
	kind = TokenKind.start_tag

	name: str
	attributes: Tuple[Attribute, ...]
	self_closing: bool

	@property
	def lower_name(self) -> str:
		return self.name.lower()


@dataclass(frozen=True)
class EndTag(Token):
	kind = TokenKind.end_tag

	name: str

	@property
	def lower_name(self) -> str:
		return self.name.lower()


@dataclass(frozen=True)
class Comment(Token):
	kind = TokenKind.comment

	data: str
	""" Text between `<!--` and `-->` """


class Doctype(Token):
	kind = TokenKind.doctype


class CData(Token):
	kind = TokenKind.cdata


class ConditionalComment(Token):
	kind = TokenKind.conditional_comment


@dataclass(frozen=True)
class Fragment(Token):
	"""
	A region excluded from every minification pass: a custom fragment such as
	`<?php ... ?>`, or the inside of a `<!-- htmlmin:ignore -->` pair.
	"""

	kind = TokenKind.fragment

	content: str
	""" What the emitter writes, byte for byte """
