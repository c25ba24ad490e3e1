"""Browser/OS impersonation profiles for header shaping."""

from __future__ import annotations

from enum import Enum

from ..models import UnsupportedImpersonationTarget


class Browser(str, Enum):
    """Browsers that can be impersonated."""

    CHROME = "chrome"
    SAFARI = "safari"
    EDGE = "edge"
    FIREFOX = "firefox"
    OKHTTP = "okhttp"


class OperatingSystem(str, Enum):
    """Operating systems that can be impersonated."""

    ANDROID = "android"
    IOS = "ios"
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


DEFAULT_OS = OperatingSystem.WINDOWS

MOBILE_OS = frozenset({OperatingSystem.ANDROID, OperatingSystem.IOS})

_OKHTTP_UA = "okhttp/4.9.0"

USER_AGENTS: dict[Browser, dict[OperatingSystem, str]] = {
    Browser.CHROME: {
        OperatingSystem.ANDROID: "Mozilla/5.0 (Linux; Android 10; SM-G975F) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.120 Mobile Safari/537.36",
        OperatingSystem.IOS: "Mozilla/5.0 (iPhone; CPU iPhone OS 14_6 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) CriOS/91.0.4472.80 Mobile/15E148 Safari/604.1",
        OperatingSystem.LINUX: "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
        OperatingSystem.MACOS: "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
        OperatingSystem.WINDOWS: "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
    },
    Browser.SAFARI: {
        OperatingSystem.ANDROID: "Mozilla/5.0 (Linux; Android 10; SM-G975F) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0 Mobile/15E148 Safari/604.1",
        OperatingSystem.IOS: "Mozilla/5.0 (iPhone; CPU iPhone OS 14_6 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0 Mobile/15E148 Safari/604.1",
        OperatingSystem.LINUX: "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0 Safari/605.1.15",
        OperatingSystem.MACOS: "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0 Safari/605.1.15",
        OperatingSystem.WINDOWS: "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0 Safari/605.1.15",
    },
    Browser.EDGE: {
        OperatingSystem.ANDROID: "Mozilla/5.0 (Linux; Android 10; SM-G975F) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Mobile Safari/537.36 Edg/91.0.864.59",
        OperatingSystem.IOS: "Mozilla/5.0 (iPhone; CPU iPhone OS 14_6 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.0 EdgiOS/46.3.13 Mobile/15E148 Safari/604.1",
        OperatingSystem.LINUX: "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36 Edg/91.0.864.59",
        OperatingSystem.MACOS: "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36 Edg/91.0.864.59",
        OperatingSystem.WINDOWS: "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36 Edg/91.0.864.59",
    },
    Browser.FIREFOX: {
        OperatingSystem.ANDROID: "Mozilla/5.0 (Android 10; Mobile; rv:68.0) Gecko/68.0 Firefox/88.0",
        OperatingSystem.IOS: "Mozilla/5.0 (iPhone; CPU iPhone OS 14_6 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) FxiOS/29.0 Mobile/15E148 Safari/605.1.15",
        OperatingSystem.LINUX: "Mozilla/5.0 (X11; Linux x86_64; rv:88.0) Gecko/20100101 Firefox/88.0",
        OperatingSystem.MACOS: "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:88.0) Gecko/20100101 Firefox/88.0",
        OperatingSystem.WINDOWS: "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:88.0) Gecko/20100101 Firefox/88.0",
    },
    # OkHttp sends the same agent everywhere
    Browser.OKHTTP: {os: _OKHTTP_UA for os in OperatingSystem},
}

COMMON_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate, br",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

SEC_FETCH_HEADERS: dict[str, str] = {
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
}

SEC_CH_UA = '" Not A;Brand";v="99", "Chromium";v="91", "Google Chrome";v="91"'


def resolve_browser(browser: Browser | str) -> Browser:
    """Coerce a browser name into the Browser enum.

    Raises:
        UnsupportedImpersonationTarget: If the name is not a known browser.
    """
    try:
        return Browser(browser)
    except ValueError:
        raise UnsupportedImpersonationTarget(browser) from None


def resolve_os(os: OperatingSystem | str | None) -> OperatingSystem:
    """Coerce an OS name into the OperatingSystem enum, defaulting to Windows.

    Raises:
        UnsupportedImpersonationTarget: If the name is not a known OS.
    """
    if os is None:
        return DEFAULT_OS
    try:
        return OperatingSystem(os)
    except ValueError:
        raise UnsupportedImpersonationTarget("*", os) from None


def get_user_agent(
    browser: Browser | str,
    os: OperatingSystem | str | None = None,
) -> str:
    """Look up the User-Agent string for a browser/OS pair.

    Args:
        browser: Browser to impersonate.
        os: Operating system. Defaults to Windows.

    Returns:
        User-Agent header value.

    Raises:
        UnsupportedImpersonationTarget: If either value is not declared.
    """
    return USER_AGENTS[resolve_browser(browser)][resolve_os(os)]


def profile_headers(
    browser: Browser | str | None = None,
    os: OperatingSystem | str | None = None,
) -> dict[str, str]:
    """Build the header set that makes a request look like a given browser.

    Args:
        browser: Browser to impersonate. None disables impersonation.
        os: Operating system of the impersonated browser. Defaults to Windows.

    Returns:
        New dict of headers. Empty when browser is None.

    Raises:
        UnsupportedImpersonationTarget: If browser or os is not declared.
    """
    if browser is None:
        return {}

    browser = resolve_browser(browser)
    os = resolve_os(os)

    headers = {"User-Agent": USER_AGENTS[browser][os]}
    headers.update(COMMON_HEADERS)

    if browser in (Browser.CHROME, Browser.EDGE):
        headers.update(SEC_FETCH_HEADERS)
        headers["Sec-Ch-Ua"] = SEC_CH_UA
        headers["Sec-Ch-Ua-Mobile"] = "?1" if os in MOBILE_OS else "?0"
    elif browser is Browser.FIREFOX:
        headers.update(SEC_FETCH_HEADERS)

    return headers


def list_targets() -> list[tuple[Browser, OperatingSystem]]:
    """Get every declared (browser, os) impersonation target."""
    return [(browser, os) for browser in Browser for os in OperatingSystem]
