"""Process configuration.

All settings come from environment variables so the proxy can run unchanged
on a laptop or a hosted container.

Configuration via environment variables:
    FOOTBALL_API_KEY: Upstream credential (FOOTBALL_DATA_API_KEY also accepted)
    PORT: Listening port (default: 3000)
    HOST: Bind address (default: 127.0.0.1)
    FOOTBALL_API_BASE: Upstream base URL (default: football-data.org v4)
    PROXY_CACHE_TTL: Seconds a cached upstream response stays fresh (default: 60)
    PROXY_TIMEOUT: Upstream request timeout in seconds (default: 10)
    LOG_LEVEL: Root log level (default: INFO)
"""

import os
from dataclasses import dataclass, field

DEFAULT_API_BASE = "https://api.football-data.org/v4"
DEFAULT_PORT = 3000
DEFAULT_HOST = "127.0.0.1"
DEFAULT_CACHE_TTL = 60
DEFAULT_TIMEOUT = 10.0

# Checked in order, first non-empty value wins
CREDENTIAL_ENV_VARS = ("FOOTBALL_API_KEY", "FOOTBALL_DATA_API_KEY")

# Header the upstream expects the credential in
CREDENTIAL_HEADER = "X-Auth-Token"


def strip_quotes(value: str) -> str:
    """Trim whitespace and one layer of matching surrounding quotes.

    Hosting dashboards and .env files often keep the quotes around a pasted
    token, which the upstream then rejects.

    Examples:
        >>> strip_quotes('"abc123"')
        'abc123'
        >>> strip_quotes("  'abc123' ")
        'abc123'
    """
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1].strip()
    return value


def read_credential(environ: dict | None = None) -> str | None:
    """Read the upstream credential from the first accepted variable that is set."""
    env = os.environ if environ is None else environ
    for name in CREDENTIAL_ENV_VARS:
        raw = env.get(name)
        if raw:
            value = strip_quotes(raw)
            if value:
                return value
    return None


@dataclass(frozen=True)
class Settings:
    """Proxy settings resolved once at startup."""

    api_key: str | None = field(default=None, repr=False)
    api_base: str = DEFAULT_API_BASE
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cache_ttl: int = DEFAULT_CACHE_TTL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    def __repr__(self) -> str:
        masked = "***" if self.api_key else None
        return (
            f"Settings(api_key={masked!r}, api_base={self.api_base!r}, host={self.host!r}, "
            f"port={self.port}, cache_ttl={self.cache_ttl}, timeout={self.timeout}, "
            f"log_level={self.log_level!r})"
        )


def load_settings(environ: dict | None = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (used by tests)

    Returns:
        Frozen Settings instance
    """
    env = os.environ if environ is None else environ
    return Settings(
        api_key=read_credential(env),
        api_base=env.get("FOOTBALL_API_BASE", DEFAULT_API_BASE).rstrip("/"),
        host=env.get("HOST", DEFAULT_HOST),
        port=int(env.get("PORT", DEFAULT_PORT)),
        cache_ttl=int(env.get("PROXY_CACHE_TTL", DEFAULT_CACHE_TTL)),
        timeout=float(env.get("PROXY_TIMEOUT", DEFAULT_TIMEOUT)),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )
