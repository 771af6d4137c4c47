from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union
from urllib.parse import SplitResult, urlsplit, urlunsplit

import rcssmin
import rjsmin

from .errors import DelegateTimeoutError, MinificationError

if TYPE_CHECKING:
	from .config import MinifierConfig

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {
	"http": 80,
	"https": 443,
	"ws": 80,
	"wss": 443,
	"ftp": 21,
}


########################################################################################
#### MARK: Built-in minifiers


def minify_css(data: str) -> str:
	return rcssmin.cssmin(data, keep_bang_comments=False)


def minify_js(data: str) -> str:
	return rjsmin.jsmin(data, keep_bang_comments=False)


def _remove_dot_segments(path: str) -> str:
	if "." not in path:
		return path
	segments = path.split("/")
	output: list[str] = []
	for segment in segments:
		if segment == ".":
			continue
		if segment == "..":
			# Never pop the empty segment in front of an absolute path
			if len(output) > 1:
				output.pop()
			continue
		output.append(segment)
	if segments[-1] in (".", ".."):
		output.append("")
	return "/".join(output)


def _normalize_netloc(parts: SplitResult, scheme: str) -> str:
	if not parts.netloc:
		return ""
	host = parts.hostname or ""
	if ":" in host:
		host = f"[{host}]"
	netloc = host
	port = parts.port
	if port is not None and port != _DEFAULT_PORTS.get(scheme):
		netloc += f":{port}"
	userinfo = parts.netloc.rpartition("@")[0]
	if userinfo:
		netloc = f"{userinfo}@{netloc}"
	return netloc


def minify_url(url: str, site: Union[str, None] = None) -> str:
	"""
	Shorten a URL without changing where it points: lower-case scheme and
	host, drop default ports, resolve `.` and `..` segments. With `site`,
	URLs on the same origin become root-relative and URLs with the same
	scheme become scheme-relative.
	Non-hierarchical URLs (`mailto:`, `data:`, `javascript:`) are returned as is.
	"""
	stripped = url.strip()
	parts = urlsplit(stripped)
	scheme = parts.scheme.lower()
	if scheme and scheme not in _DEFAULT_PORTS:
		return stripped

	netloc = _normalize_netloc(parts, scheme)
	path = parts.path
	if netloc or path.startswith("/"):
		path = _remove_dot_segments(path)

	if site is not None and netloc:
		base = urlsplit(site.strip())
		base_scheme = base.scheme.lower()
		if scheme == base_scheme:
			if netloc == _normalize_netloc(base, base_scheme):
				scheme, netloc = "", ""
				path = path or "/"
			else:
				scheme = ""

	return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


########################################################################################
#### MARK: Delegates


async def _join(awaitable: Awaitable[Any], timeout: Union[float, None]) -> Any:
	try:
		return await asyncio.wait_for(awaitable, timeout)
	except asyncio.TimeoutError as e:
		msg = f"Asynchronous minifier did not finish within {timeout}s"
		raise DelegateTimeoutError(msg) from e


def _call_in_thread(delegate: Callable[[str], Any], text: str, timeout: float) -> Any:
	executor = ThreadPoolExecutor(max_workers=1)
	future = executor.submit(delegate, text)
	try:
		return future.result(timeout=timeout)
	except FutureTimeoutError as e:
		msg = f"Minifier did not finish within {timeout}s"
		raise DelegateTimeoutError(msg) from e
	finally:
		# A timed out delegate keeps running, its result is discarded
		executor.shutdown(wait=False)


def _await(awaitable: Awaitable[Any], timeout: Union[float, None]) -> Any:
	try:
		asyncio.get_running_loop()
	except RuntimeError:
		return asyncio.run(_join(awaitable, timeout))

	# The caller's loop is busy running us, it cannot drive the awaitable
	if inspect.iscoroutine(awaitable):
		awaitable.close()
	msg = "Asynchronous minifier cannot be awaited inside a running event loop"
	raise MinificationError(msg)


def _invoke(delegate: Callable[[str], Any], text: str, timeout: Union[float, None]) -> str:
	if timeout is None:
		result = delegate(text)
	else:
		result = _call_in_thread(delegate, text, timeout)

	if inspect.isawaitable(result):
		result = _await(result, timeout)

	if not isinstance(result, str):
		msg = f"Minifier returned {type(result).__name__}, expected str"
		raise MinificationError(msg)
	return result


def run_delegate(kind: str, delegate: Callable[[str], Any], text: str, config: MinifierConfig) -> str:
	"""
	Run one sub-minifier on one block or attribute value.
	Any failure leaves `text` unchanged, unless `config.strict_delegates` is
	set, in which case it is raised as a MinificationError.
	"""
	try:
		return _invoke(delegate, text, config.delegate_timeout)
	except Exception as e:
		if config.strict_delegates:
			if isinstance(e, MinificationError):
				raise
			msg = f"{kind} minifier failed: {e}"
			raise MinificationError(msg) from e
		logger.warning(f"Keeping {kind} unminified, minifier failed: {e!r}")
		return text


class SubMinifiers:
	"""The CSS, JS and URL minifiers of one `minify()` call."""

	__slots__ = "config", "css", "js", "url"

	config: MinifierConfig
	css: Callable[[str], Any]
	js: Callable[[str], Any]
	url: Callable[[str], Any]

	def __init__(self, config: MinifierConfig) -> None:
		self.config = config
		self.css = config.css_minifier or minify_css
		self.js = config.js_minifier or minify_js
		self.url = config.url_minifier or functools.partial(minify_url, site=config.site)

	# run_delegate hands back the very same `text` object when it failed

	def style_block(self, text: str) -> str:
		if not text.strip():
			return ""
		minified = run_delegate("CSS", self.css, text, self.config)
		return text if minified is text else minified.strip()

	def script_block(self, text: str) -> str:
		if not text.strip():
			return ""
		minified = run_delegate("JS", self.js, text, self.config)
		return text if minified is text else minified.strip()

	def style_attribute(self, value: str) -> str:
		# Declarations only parse inside a rule, so wrap them in one
		wrapped = f"*{{{value}}}"
		minified = run_delegate("CSS", self.css, wrapped, self.config).strip()
		if minified == wrapped or not (minified.startswith("*{") and minified.endswith("}")):
			return value
		return minified[2:-1].strip()

	def event_attribute(self, value: str) -> str:
		minified = run_delegate("JS", self.js, value, self.config)
		if minified is value:
			return value
		minified = minified.strip()
		return minified[:-1] if minified.endswith(";") else minified

	def url_attribute(self, value: str) -> str:
		return run_delegate("URL", self.url, value, self.config)
