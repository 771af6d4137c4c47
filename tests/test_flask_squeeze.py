from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generator

import pytest
from test_app import create_app

from html_squeeze import Squeeze

if TYPE_CHECKING:
	from flask.testing import FlaskClient
	from werkzeug.wrappers import Response

STATUS_CODE_NOT_FOUND_404 = 404
STATUS_CODE_OK_200 = 200

MINIFY_HEADER = "X-HTML-Squeeze-Minify"

########################################################################################
#### MARK: Fixtures


@pytest.fixture
def client() -> Generator[FlaskClient, Any, None]:
	app = create_app()
	app.testing = True
	with app.test_client() as test_client:
		yield test_client


@pytest.fixture(params=[False, True])
def use_minify_js(request: pytest.FixtureRequest) -> bool:
	return request.param


@pytest.fixture(params=[False, True])
def use_minify_css(request: pytest.FixtureRequest) -> bool:
	return request.param


########################################################################################
#### MARK: Utilities


def content_length_correct(r: Response) -> bool:
	return r.headers.get("Content-Length", 0) == str(len(r.data))


def original_static_file(client: FlaskClient, name: str) -> bytes:
	static_folder = client.application.static_folder
	assert static_folder is not None
	with open(f"{static_folder}/{name}", "rb") as f:
		return f.read()


########################################################################################
#### MARK: Tests


def test_init_app_with_existing_app() -> None:
	app = create_app()
	_squeeze = Squeeze(app)


def test_init_app_rejects_invalid_html_options() -> None:
	with pytest.raises(ValueError, match="Unsupported option: bogus"):
		create_app({"SQUEEZE_HTML_OPTIONS": {"bogus": True}})


def test_get_index(client: FlaskClient) -> None:
	r = client.get("/")
	assert r.status_code == STATUS_CODE_OK_200
	assert content_length_correct(r)
	assert MINIFY_HEADER in r.headers

	html = r.get_data(as_text=True)
	assert html.startswith('<!doctype html><html lang="en"><head><meta charset="utf-8">')
	assert "<title>HTML-Squeeze test page</title>" in html
	assert "page styles" not in html
	assert '<link rel="stylesheet" href="/static/main.css">' in html
	assert "<!--[if IE]>" in html
	assert '<form action="/search"><input name="q"> <input type="checkbox" name="all" checked>' in html
	assert "<pre>\n  preformatted\n      text  </pre>" in html
	assert "<script>" in html


def test_index_keeps_inline_whitespace(client: FlaskClient) -> None:
	html = client.get("/").get_data(as_text=True)
	assert '<p class="intro" id="intro">Rendered at <time>' in html
	assert "</time> .</p>" in html


def test_html_options_from_config() -> None:
	app = create_app({"SQUEEZE_HTML_OPTIONS": {"removeAttributeQuotes": True, "minifyJS": True}})
	app.testing = True
	with app.test_client() as client:
		html = client.get("/").get_data(as_text=True)

	assert 'class=intro id=intro' in html
	assert "<!-- page styles -->" in html
	assert 'var greeting="hello"' in html


def test_disable_html_minification(client: FlaskClient) -> None:
	client.application.config.update({"SQUEEZE_MINIFY_HTML": False})
	r = client.get("/")
	assert MINIFY_HEADER not in r.headers
	assert "<!-- page styles -->" in r.get_data(as_text=True)


def test_get_css_file(client: FlaskClient, use_minify_css: bool) -> None:
	client.application.config.update({"SQUEEZE_MINIFY_CSS": use_minify_css})
	r = client.get("/static/main.css")
	assert r.status_code == STATUS_CODE_OK_200
	assert content_length_correct(r)

	original = original_static_file(client, "main.css")
	if use_minify_css:
		assert MINIFY_HEADER in r.headers
		assert len(r.data) < len(original)
		assert b"Main stylesheet" not in r.data
		assert b".intro{margin:0 auto" in r.data
	else:
		assert MINIFY_HEADER not in r.headers
		assert r.data == original


def test_get_js_file(client: FlaskClient, use_minify_js: bool) -> None:
	client.application.config.update({"SQUEEZE_MINIFY_JS": use_minify_js})
	r = client.get("/static/main.js")
	assert content_length_correct(r)

	original = original_static_file(client, "main.js")
	if use_minify_js:
		assert MINIFY_HEADER in r.headers
		assert len(r.data) < len(original)
		assert b"function check(button)" in r.data
	else:
		assert r.data == original


def test_get_unknown_url(client: FlaskClient) -> None:
	r = client.get("/static/unknown.js")
	assert r.status_code == STATUS_CODE_NOT_FOUND_404


def test_non_2xx_response_is_not_minified(client: FlaskClient) -> None:
	r = client.get("/missing")
	assert r.status_code == STATUS_CODE_NOT_FOUND_404
	assert MINIFY_HEADER not in r.headers
	assert "<!-- page styles -->" in r.get_data(as_text=True)


def test_encoded_response_is_not_minified(client: FlaskClient) -> None:
	r = client.get("/encoded")
	assert MINIFY_HEADER not in r.headers
	assert "<!-- page styles -->" in r.get_data(as_text=True)


def test_plain_text_is_not_minified(client: FlaskClient) -> None:
	r = client.get("/plain")
	assert MINIFY_HEADER not in r.headers
	assert r.data == b"  some   plain   text  "


def test_undecodable_html_is_served_unchanged(client: FlaskClient, caplog: pytest.LogCaptureFixture) -> None:
	with caplog.at_level(logging.WARNING, logger="html_squeeze.flask_squeeze"):
		r = client.get("/binary")
	assert r.status_code == STATUS_CODE_OK_200
	assert MINIFY_HEADER not in r.headers
	assert r.data == b"\xff\xfe\xfd<p>  x  </p>" * 100
	assert "unminified" in caplog.text


def test_small_response_below_min_size(client: FlaskClient) -> None:
	min_size = 1000
	client.application.config.update({"SQUEEZE_MIN_SIZE": min_size})

	r = client.get("/static/small.js")
	assert r.content_length is not None
	assert r.content_length < min_size
	assert MINIFY_HEADER not in r.headers


def test_verbose_logging(client: FlaskClient, capsys: pytest.CaptureFixture[str]) -> None:
	client.get("/")
	assert "HTML-Squeeze: GET / | " in capsys.readouterr().out

	client.application.config.update({"SQUEEZE_VERBOSE_LOGGING": False})
	client.get("/")
	assert capsys.readouterr().out == ""


def test_disable_minification() -> None:
	app = create_app(
		{
			"SQUEEZE_MINIFY_JS": False,
			"SQUEEZE_MINIFY_CSS": False,
			"SQUEEZE_MINIFY_HTML": False,
		},
	)
	app.testing = True
	with app.test_client() as client:
		for url in ("/", "/static/main.css", "/static/main.js"):
			r = client.get(url)
			assert MINIFY_HEADER not in r.headers
