from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence, Union

from .config import DEFAULT_CONFIG
from .errors import InvalidInputError
from .minify import minify, resolve_config

_OPTION_HELP = {
	"remove_attribute_quotes": "Remove quotes around attribute values when it is safe.",
	"remove_comments": "Remove comments, except conditional comments and <!--! ... -->.",
	"remove_empty_attributes": "Remove class, id, style, event handler and similar attributes with empty values.",
	"remove_redundant_attributes": "Remove attributes that repeat the element default, e.g. <form method=get>.",
	"remove_script_type_attributes": "Remove type=text/javascript from script tags.",
	"remove_style_link_type_attributes": "Remove type=text/css from style and link tags.",
	"trim_custom_fragments": "Remove whitespace around custom fragments such as <% ... %>.",
	"use_short_doctype": "Replace the doctype with <!doctype html>.",
	"collapse_whitespace": "Collapse whitespace in text, leaving pre and textarea alone.",
	"conservative_collapse": "With --collapse-whitespace, always keep one space.",
	"preserve_line_breaks": "With --collapse-whitespace, keep a line break where one was.",
	"collapse_boolean_attributes": "Write boolean attributes without value, e.g. disabled.",
	"remove_empty_elements": "Remove elements without content.",
	"minify_js": "Minify scripts and event handler attributes.",
	"minify_css": "Minify style elements and style attributes.",
	"minify_urls": "Normalize URLs in href, src and similar attributes.",
}

parser = argparse.ArgumentParser(
	prog="html-squeeze",
	description="Minify HTML",
)

parser.add_argument(
	"input_file",
	nargs="?",
	metavar="INPUT",
	help="File path to html file to minify. Defaults to stdin.",
)

parser.add_argument(
	"output_file",
	nargs="?",
	metavar="OUTPUT",
	help="File path to output to. Defaults to stdout.",
)

parser.add_argument(
	"-d",
	"--default-profile",
	action="store_true",
	help="Start from the default profile. This is implied when no option is given.",
)

for _name, _help in _OPTION_HELP.items():
	parser.add_argument(f"--{_name.replace('_', '-')}", dest=_name, action="store_true", help=_help)

parser.add_argument(
	"--site",
	help="With --minify-urls, make URLs relative to this site URL.",
	default=None,
)

parser.add_argument(
	"--delegate-timeout",
	type=float,
	metavar="SECONDS",
	help="Leave a script or style block unminified when its minifier takes longer than this.",
	default=None,
)

parser.add_argument(
	"-e",
	"--encoding",
	help="Encoding to read and write with. Default 'utf-8'.",
	default="utf-8",
)

parser.add_argument(
	"-v",
	"--verbose",
	action="store_true",
	help="Log what the minifier does to stderr.",
)


def main(argv: Union[Sequence[str], None] = None) -> int:
	args = parser.parse_args(argv)

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)

	options: dict[str, Any] = {name: True for name in _OPTION_HELP if getattr(args, name)}
	if args.site is not None:
		options["site"] = args.site
	if args.delegate_timeout is not None:
		options["delegate_timeout"] = args.delegate_timeout

	use_default = args.default_profile or not any(getattr(args, name) for name in _OPTION_HELP)
	config = resolve_config(DEFAULT_CONFIG if use_default else None, **options)

	if args.input_file:
		html = Path(args.input_file).read_text(encoding=args.encoding)
	else:
		html = sys.stdin.read()

	try:
		minified = minify(html, config)
	except InvalidInputError as e:
		print(f"html-squeeze: {e}", file=sys.stderr)
		return 1

	if args.output_file:
		Path(args.output_file).write_text(minified, encoding=args.encoding)
	else:
		sys.stdout.write(minified)
	return 0
