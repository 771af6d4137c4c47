from __future__ import annotations


class HTMLSqueezeError(Exception):
	"""Base class for all errors raised by html_squeeze."""


class InvalidInputError(HTMLSqueezeError, ValueError):
	"""The HTML source is empty or missing."""


class MinificationError(HTMLSqueezeError):
	"""
	A CSS/JS/URL sub-minifier could not process its input.
	Recovered locally (the original text is kept) unless the config sets
	`strict_delegates`.
	"""


class DelegateTimeoutError(MinificationError):
	"""A sub-minifier delegate did not finish within `delegate_timeout`."""


class EngineDefectError(HTMLSqueezeError, RuntimeError):
	"""An internal invariant was violated. This is a bug in html_squeeze."""
