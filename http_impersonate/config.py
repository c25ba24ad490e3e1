"""Configuration dataclasses and option merging."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping

from .fingerprint.profiles import (
    DEFAULT_OS,
    Browser,
    OperatingSystem,
    resolve_browser,
    resolve_os,
)

DEFAULT_TIMEOUT = 5.0


@dataclass(frozen=True)
class Auth:
    """Request credentials.

    A bearer token takes precedence over username/password.

    Attributes:
        username: Basic auth username.
        password: Basic auth password.
        token: Bearer token.
    """

    username: str | None = None
    password: str | None = None
    token: str | None = None


@dataclass(frozen=True)
class ProxySettings:
    """Proxy endpoint. Validated but not applied to requests.

    Attributes:
        host: Proxy hostname.
        port: Proxy port.
        auth: Optional proxy credentials.
    """

    host: str
    port: int
    auth: Auth | None = None

    def __post_init__(self) -> None:
        """Validate proxy shape."""
        if not self.host:
            raise ValueError("proxy host must not be empty")
        if not 1 <= self.port <= 65535:
            raise ValueError("proxy port must be in 1..65535")

    @property
    def url(self) -> str:
        """Proxy as a URL, for display."""
        creds = ""
        if self.auth and self.auth.username:
            creds = f"{self.auth.username}:{self.auth.password or ''}@"
        return f"http://{creds}{self.host}:{self.port}"


@dataclass(frozen=True)
class SSLOptions:
    """TLS settings applied to the transport.

    Attributes:
        verify: Whether to verify the server certificate.
        ca: CA bundle, either a file path or PEM text.
        cert: Client certificate file path.
        key: Client private key file path.
    """

    verify: bool = True
    ca: str | None = None
    cert: str | None = None
    key: str | None = None


@dataclass(frozen=True)
class ClientOptions:
    """Options for a client or a single call.

    Every field is optional. A field left as None is "absent" and falls
    through to the client defaults during merge_options().

    Attributes:
        timeout: Request timeout in seconds.
        headers: Extra request headers, case as supplied. Stored as a
                 read-only copy.
        auth: Credentials for the Authorization header.
        proxy: Proxy settings (accepted, not applied).
        cookies: Raw cookie string sent verbatim as the Cookie header.
        ssl: TLS verification and client certificate settings.
        user_agent: Explicit User-Agent, overriding the impersonated one.
        impersonate: Browser to impersonate (enum or its string value).
        impersonate_os: OS of the impersonated browser. Defaults to Windows
                        when impersonate is set.
    """

    timeout: float | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    auth: Auth | None = None
    proxy: ProxySettings | None = None
    cookies: str | None = None
    ssl: SSLOptions | None = None
    user_agent: str | None = None
    impersonate: Browser | None = None
    impersonate_os: OperatingSystem | None = None

    def __post_init__(self) -> None:
        """Validate values and coerce impersonation names into enums."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.impersonate is not None:
            object.__setattr__(self, "impersonate", resolve_browser(self.impersonate))
        if self.impersonate_os is not None:
            object.__setattr__(self, "impersonate_os", resolve_os(self.impersonate_os))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClientOptions":
        """Build options from a plain mapping of field names.

        Nested auth, proxy and ssl values may be given as mappings too.

        Raises:
            TypeError: If the mapping contains an unknown field name.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise TypeError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        values = dict(data)
        if isinstance(values.get("auth"), Mapping):
            values["auth"] = Auth(**values["auth"])
        if isinstance(values.get("ssl"), Mapping):
            values["ssl"] = SSLOptions(**values["ssl"])
        if isinstance(values.get("proxy"), Mapping):
            proxy = dict(values["proxy"])
            if isinstance(proxy.get("auth"), Mapping):
                proxy["auth"] = Auth(**proxy["auth"])
            values["proxy"] = ProxySettings(**proxy)
        return cls(**values)


OptionsLike = ClientOptions | Mapping[str, Any] | None


def coerce_options(options: OptionsLike) -> ClientOptions:
    """Accept ClientOptions, a mapping, or None and return ClientOptions."""
    if options is None:
        return ClientOptions()
    if isinstance(options, ClientOptions):
        return options
    return ClientOptions.from_dict(options)


def merge_options(
    defaults: ClientOptions | None,
    per_call: ClientOptions | None = None,
) -> ClientOptions:
    """Layer per-call options over client defaults.

    Fields set in per_call win. Headers are unioned, with per-call header
    names replacing default names of the same spelling. Fields absent from
    both layers resolve to the documented defaults.

    Args:
        defaults: Client-level options.
        per_call: Options for one call.

    Returns:
        Effective options with timeout, ssl and impersonate_os resolved.
    """
    defaults = defaults or ClientOptions()
    per_call = per_call or ClientOptions()

    merged: dict[str, Any] = {}
    for f in fields(ClientOptions):
        if f.name == "headers":
            continue
        value = getattr(per_call, f.name)
        merged[f.name] = value if value is not None else getattr(defaults, f.name)

    merged["headers"] = {**defaults.headers, **per_call.headers}

    if merged["timeout"] is None:
        merged["timeout"] = DEFAULT_TIMEOUT
    if merged["ssl"] is None:
        merged["ssl"] = SSLOptions()
    if merged["impersonate"] is not None and merged["impersonate_os"] is None:
        merged["impersonate_os"] = DEFAULT_OS

    return ClientOptions(**merged)

