from __future__ import annotations

import pytest

from html_squeeze import minify
from html_squeeze.attributes import can_remove_quotes
from html_squeeze.errors import MinificationError
from html_squeeze.tokenizer import tokenize
from html_squeeze.tokens import StartTag

########################################################################################
#### MARK: Quotes


@pytest.mark.parametrize(
	("value", "removable"),
	[
		("blah", True),
		("a-b_c.d", True),
		("", False),
		("a b", False),
		("a>b", False),
		("a=b", False),
		("a`b", False),
		("it's", False),
		('say "hi"', False),
		("foo/", False),
		(None, False),
	],
)
def test_can_remove_quotes(value: str | None, removable: bool) -> None:
	assert can_remove_quotes(value) is removable


def test_remove_attribute_quotes() -> None:
	html = '<p title="blah" id="moo">foo</p>'
	assert minify(html, remove_attribute_quotes=True) == "<p title=blah id=moo>foo</p>"


@pytest.mark.parametrize(
	"value",
	["plain", "a b", "1>2", "a=b", "it's", 'say "hi"', "path/", "tab\there"],
)
def test_removed_quotes_read_back_the_same(value: str) -> None:
	quote = "'" if '"' in value else '"'
	result = minify(f"<p data-v={quote}{value}{quote}>x</p>", remove_attribute_quotes=True)
	tag = next(tokenize(result))
	assert isinstance(tag, StartTag)
	assert [attribute.value for attribute in tag.attributes] == [value]


def test_quotes_and_case_kept_without_options() -> None:
	html = "<P CLASS=\"x\" a='y' b=z>w</P>"
	assert minify(html, remove_comments=True) == html


########################################################################################
#### MARK: Removal


def test_collapse_boolean_attributes() -> None:
	assert minify('<input disabled="disabled">', collapse_boolean_attributes=True) == "<input disabled>"
	assert minify('<option SELECTED="">x</option>', collapse_boolean_attributes=True) == "<option SELECTED>x</option>"


def test_boolean_collapse_runs_before_quote_removal() -> None:
	html = '<input checked="checked" value="x">'
	result = minify(html, collapse_boolean_attributes=True, remove_attribute_quotes=True)
	assert result == "<input checked value=x>"


def test_remove_empty_attributes() -> None:
	html = '<p class="" id=" " style="" onclick="" title="x" data-a="">x</p>'
	assert minify(html, remove_empty_attributes=True) == '<p title="x" data-a="">x</p>'


def test_empty_alt_is_kept() -> None:
	html = '<img src="a.png" alt="">'
	assert minify(html, remove_empty_attributes=True) == html


def test_remove_redundant_attributes() -> None:
	html = '<form method="get" action="/a"><input type="text" name="q"></form>'
	assert minify(html, remove_redundant_attributes=True) == '<form action="/a"><input name="q"></form>'


def test_remove_redundant_script_attributes() -> None:
	html = '<script language="javascript" charset="utf-8">x()</script>'
	assert minify(html, remove_redundant_attributes=True) == "<script>x()</script>"

	html = '<script src="a.js" charset="utf-8"></script>'
	assert minify(html, remove_redundant_attributes=True) == html


def test_redundant_anchor_name() -> None:
	assert minify('<a id="top" name="top">x</a>', remove_redundant_attributes=True) == '<a id="top">x</a>'
	html = '<a id="x" name="y">x</a>'
	assert minify(html, remove_redundant_attributes=True) == html


@pytest.mark.parametrize(
	("html", "expected"),
	[
		('<script type="text/javascript">a()</script>', "<script>a()</script>"),
		('<script type="TEXT/JavaScript">a()</script>', "<script>a()</script>"),
		('<script type="module">a()</script>', '<script type="module">a()</script>'),
		('<script type="application/ld+json">{}</script>', '<script type="application/ld+json">{}</script>'),
	],
)
def test_remove_script_type_attributes(html: str, expected: str) -> None:
	assert minify(html, remove_script_type_attributes=True) == expected


def test_remove_style_link_type_attributes() -> None:
	html = '<link rel="stylesheet" type="text/css" href="a.css"><style type="text/css">p{}</style>'
	expected = '<link rel="stylesheet" href="a.css"><style>p{}</style>'
	assert minify(html, remove_style_link_type_attributes=True) == expected

	html = '<link rel="icon" type="text/css" href="a.ico">'
	assert minify(html, remove_style_link_type_attributes=True) == html


########################################################################################
#### MARK: Sub-minified values


def _squash(css: str) -> str:
	return css.replace(" ", "")


def test_style_attribute() -> None:
	html = '<p style="color: red;  margin : 0">x</p>'
	assert minify(html, minify_css=True, css_minifier=_squash) == '<p style="color:red;margin:0">x</p>'


def test_style_attribute_with_rcssmin() -> None:
	result = minify('<p style="color : red ;  margin : 0 ;">x</p>', minify_css=True)
	assert result.startswith('<p style="color:red;')
	assert "margin:0" in result


def test_style_attribute_keeps_quotes_of_unchanged_value() -> None:
	html = "<p style='font-family: \"A B\"'>x</p>"
	assert minify(html, minify_css=True, css_minifier=lambda css: css) == html
	result = minify(html, minify_css=True, css_minifier=_squash)
	assert result == "<p style='font-family:\"AB\"'>x</p>"


def test_style_attribute_switches_quotes() -> None:
	html = '<p style="font-family: X">x</p>'
	result = minify(html, minify_css=True, css_minifier=lambda css: css.replace("X", '"x"'))
	assert result == "<p style='font-family: \"x\"'>x</p>"


def test_event_attribute() -> None:
	html = '<button onclick="  go( 1 );  ">x</button>'
	result = minify(html, minify_js=True, js_minifier=lambda js: js.replace(" ", ""))
	assert result == '<button onclick="go(1)">x</button>'


def test_event_attribute_with_rjsmin() -> None:
	result = minify('<button onclick="  alert( 1 );  ">x</button>', minify_js=True)
	assert result == '<button onclick="alert(1)">x</button>'


def test_url_attributes() -> None:
	html = '<a href="HTTP://Example.COM:80/a/./b/../c">x</a><img src="/img/../logo.png">'
	expected = '<a href="http://example.com/a/c">x</a><img src="/logo.png">'
	assert minify(html, minify_urls=True) == expected


def test_url_attributes_relative_to_site() -> None:
	html = '<a href="http://example.com/a">x</a><a href="http://other.com/b">y</a>'
	expected = '<a href="/a">x</a><a href="//other.com/b">y</a>'
	assert minify(html, {"minifyURLs": "http://example.com/"}) == expected


def test_failing_attribute_minifier_keeps_value() -> None:
	def broken(css: str) -> str:
		msg = "cannot parse"
		raise ValueError(msg)

	html = '<p style="color : red">x</p>'
	assert minify(html, minify_css=True, css_minifier=broken) == html

	with pytest.raises(MinificationError):
		minify(html, minify_css=True, css_minifier=broken, strict_delegates=True)
