"""Tests for request building."""

import base64
import json

import pytest

from http_impersonate import (
    Auth,
    ClientOptions,
    ConfigurationError,
    InvalidHeader,
    InvalidURL,
    Method,
    ProxySettings,
    SSLOptions,
    build_request,
    merge_options,
    profile_headers,
)


def effective(**kwargs) -> ClientOptions:
    """Merged options as the clients pass them to the builder."""
    return merge_options(ClientOptions(), ClientOptions(**kwargs))


class TestUrlParsing:
    """Tests for URL handling."""

    def test_https_default_port(self):
        request = build_request("GET", "https://example.com/a/b?x=1", options=effective())

        assert request.scheme == "https"
        assert request.host == "example.com"
        assert request.port == 443
        assert request.target == "/a/b?x=1"

    def test_http_default_port(self):
        request = build_request("GET", "http://example.com", options=effective())

        assert request.port == 80
        assert request.target == "/"

    def test_explicit_port(self):
        request = build_request("GET", "https://example.com:8443/x", options=effective())
        assert request.port == 8443

    @pytest.mark.parametrize("url", [
        "not a url",
        "/relative/path",
        "ftp://example.com/file",
        "https://",
        "https://example.com:99999/",
    ])
    def test_invalid_url(self, url):
        """Test malformed URLs fail before anything else happens."""
        with pytest.raises(InvalidURL):
            build_request("GET", url, options=effective())


class TestMethod:
    """Tests for method handling."""

    def test_string_method_normalized(self):
        request = build_request("post", "https://example.com", options=effective())
        assert request.method is Method.POST

    def test_unknown_method_rejected(self):
        with pytest.raises(ValueError):
            build_request("TRACE", "https://example.com", options=effective())


class TestHeaderPrecedence:
    """Tests for the header layering order."""

    def test_impersonation_headers_applied(self):
        request = build_request(
            "GET", "https://example.com",
            options=effective(impersonate="chrome", impersonate_os="android"),
        )

        assert request.headers == profile_headers("chrome", "android")
        assert request.profile == "chrome/android"

    def test_no_impersonation_no_headers(self):
        request = build_request("GET", "https://example.com", options=effective())

        assert request.headers == {}
        assert request.profile is None

    def test_explicit_headers_override_profile(self):
        """Caller headers win over same-named impersonation headers."""
        request = build_request(
            "GET", "https://example.com",
            options=effective(impersonate="firefox", headers={"Accept": "application/json"}),
        )
        assert request.headers["Accept"] == "application/json"

    def test_override_is_case_insensitive(self):
        """A differently cased caller header replaces the profile one."""
        request = build_request(
            "GET", "https://example.com",
            options=effective(impersonate="chrome", headers={"user-agent": "custom/1.0"}),
        )

        assert request.headers["user-agent"] == "custom/1.0"
        assert "User-Agent" not in request.headers

    def test_user_agent_option_overrides_profile(self):
        request = build_request(
            "GET", "https://example.com",
            options=effective(impersonate="safari", user_agent="bot/2.0"),
        )
        assert request.headers["User-Agent"] == "bot/2.0"

    def test_explicit_header_beats_user_agent_option(self):
        request = build_request(
            "GET", "https://example.com",
            options=effective(user_agent="bot/2.0", headers={"User-Agent": "hdr/3.0"}),
        )
        assert request.headers["User-Agent"] == "hdr/3.0"

    def test_bearer_token(self):
        request = build_request(
            "GET", "https://example.com",
            options=effective(auth=Auth(token="abc")),
        )
        assert request.headers["Authorization"] == "Bearer abc"

    def test_token_beats_basic(self):
        """Token wins even when username/password are present."""
        request = build_request(
            "GET", "https://example.com",
            options=effective(auth=Auth(username="u", password="p", token="abc")),
        )
        assert request.headers["Authorization"] == "Bearer abc"

    def test_basic_auth(self):
        request = build_request(
            "GET", "https://example.com",
            options=effective(auth=Auth(username="user", password="pass")),
        )
        expected = base64.b64encode(b"user:pass").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"

    def test_incomplete_basic_auth_ignored(self):
        request = build_request(
            "GET", "https://example.com",
            options=effective(auth=Auth(username="user")),
        )
        assert "Authorization" not in request.headers

    def test_auth_overrides_caller_authorization(self):
        request = build_request(
            "GET", "https://example.com",
            options=effective(headers={"authorization": "Custom x"}, auth=Auth(token="abc")),
        )
        assert request.headers == {"Authorization": "Bearer abc"}

    def test_cookies_verbatim(self):
        request = build_request(
            "GET", "https://example.com",
            options=effective(cookies="a=1; b=2", headers={"Cookie": "ignored=1"}),
        )
        assert request.headers["Cookie"] == "a=1; b=2"

    def test_empty_cookies_ignored(self):
        request = build_request("GET", "https://example.com", options=effective(cookies=""))
        assert "Cookie" not in request.headers


class TestHeaderValidation:
    """Tests for wire-encodability checks on the final headers."""

    def test_latin1_value_accepted(self):
        request = build_request("GET", "https://example.com", options=effective(cookies="name=café"))
        assert request.headers["Cookie"] == "name=café"

    def test_non_latin1_cookie_rejected(self):
        with pytest.raises(InvalidHeader, match="Cookie"):
            build_request("GET", "https://example.com", options=effective(cookies="name=☕"))

    def test_non_latin1_token_rejected(self):
        with pytest.raises(InvalidHeader, match="Authorization"):
            build_request("GET", "https://example.com", options=effective(auth=Auth(token="tök€n")))

    def test_non_ascii_name_rejected(self):
        with pytest.raises(InvalidHeader):
            build_request("GET", "https://example.com", options=effective(headers={"X-Naïve": "1"}))

    def test_non_string_value_rejected(self):
        with pytest.raises(InvalidHeader, match="X-Count"):
            build_request("GET", "https://example.com", options=effective(headers={"X-Count": 3}))

    def test_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            build_request("GET", "https://example.com", options=effective(cookies="☕"))


class TestBody:
    """Tests for body encoding."""

    def test_no_body(self):
        request = build_request("GET", "https://example.com", options=effective())
        assert request.content is None

    def test_string_body_unchanged(self):
        """Strings are sent as-is without a forced content type."""
        request = build_request(
            "POST", "https://example.com", "plain text",
            options=effective(headers={"Content-Type": "text/plain"}),
        )

        assert request.content == b"plain text"
        assert request.headers["Content-Type"] == "text/plain"

    def test_bytes_body_unchanged(self):
        request = build_request("PUT", "https://example.com", b"\x00\x01", options=effective())

        assert request.content == b"\x00\x01"
        assert "Content-Type" not in request.headers

    def test_json_body(self):
        """Non-string bodies become compact JSON."""
        request = build_request("POST", "https://example.com", {"key": "value"}, options=effective())

        assert request.content == b'{"key":"value"}'
        assert request.headers["Content-Type"] == "application/json"

    def test_json_content_type_overrides_caller(self):
        request = build_request(
            "PATCH", "https://example.com", [1, 2],
            options=effective(headers={"content-type": "text/plain"}),
        )

        assert json.loads(request.content) == [1, 2]
        assert request.headers == {"Content-Type": "application/json"}


class TestTransportSettings:
    """Tests for timeout, TLS and proxy propagation."""

    def test_timeout_and_ssl(self):
        ssl_options = SSLOptions(verify=False, ca="/etc/ca.pem")
        request = build_request(
            "GET", "https://example.com",
            options=effective(timeout=1.5, ssl=ssl_options),
        )

        assert request.timeout == 1.5
        assert request.ssl == ssl_options
        assert "ca" not in {k.lower() for k in request.headers}

    def test_default_timeout(self):
        request = build_request("GET", "https://example.com")
        assert request.timeout == 5.0
        assert request.ssl.verify is True

    def test_proxy_carried_not_applied(self):
        proxy = ProxySettings(host="proxy", port=8080)
        request = build_request("GET", "https://example.com", options=effective(proxy=proxy))

        assert request.proxy == proxy
        assert request.host == "example.com"
        assert "Proxy-Authorization" not in request.headers
