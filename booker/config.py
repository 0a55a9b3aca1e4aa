import logging
import os
import re
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Tuple

from booker.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_KEY = "BOOKER_CONFIG"
ENV_PREFIX = "BOOKER_"
DEFAULT_PROPERTIES = Path(__file__).with_name("config.properties")

DEFAULT_BASE_URL = "https://restful-booker.herokuapp.com"
DEFAULT_REQUEST_TIMEOUT_MS = 30000
DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "password123"


_ENTRY = re.compile(r"([^=:\s]+)\s*[=:]?\s*(.*)")


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    # a line ending in an odd number of backslashes continues on the next one
    start, pending = 0, None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.lstrip()
        if pending is None:
            if not line or line[0] in "#!":
                continue
            start, pending = lineno, ""
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2:
            pending += line[:-1]
            continue
        yield start, pending + line
        pending = None
    if pending is not None:
        yield start, pending


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse a Java-style .properties document.

    Keys are separated from values by `=`, `:` or whitespace, and a key on
    its own maps to an empty value. `#` and `!` start comments and a trailing
    backslash joins the next line. Unicode and character escapes are not
    decoded.
    """
    props: Dict[str, str] = {}
    for lineno, line in _logical_lines(text):
        match = _ENTRY.fullmatch(line)
        if match is None:
            raise ConfigurationError(f"line {lineno}: empty key")
        props[match.group(1)] = match.group(2).rstrip()
    return props


def env_name(key: str) -> str:
    return ENV_PREFIX + key.upper().replace(".", "_").replace("-", "_")


class Configuration:
    """
    Resolved settings for one test run. Lookups check explicit overrides,
    then the environment (`base.url` or `BOOKER_BASE_URL`), then the loaded
    properties.
    """

    def __init__(self, properties: Optional[Mapping[str, str]] = None,
                 overrides: Optional[Mapping[str, str]] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self._properties = dict(properties or {})
        self._overrides = dict(overrides or {})
        self._environ = os.environ if environ is None else environ

    @classmethod
    def load(cls, path: Optional[os.PathLike] = None,
             overrides: Optional[Mapping[str, str]] = None,
             environ: Optional[Mapping[str, str]] = None) -> "Configuration":
        env = os.environ if environ is None else environ
        if path is None:
            path = env.get(CONFIG_ENV_KEY) or DEFAULT_PROPERTIES
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("no properties at %s, using defaults", path)
            return cls({}, overrides, env)
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Failed to load configuration properties from {path}") from exc
        return cls(parse_properties(text), overrides, env)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        if key in self._overrides:
            return self._overrides[key]
        for name in (key, env_name(key)):
            value = self._environ.get(name)
            if value is not None:
                return value
        return self._properties.get(key, default)

    def get_int(self, key: str, default: int) -> int:
        value = self.get(key)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise ConfigurationError(f"{key} must be an integer, got {value!r}") from exc

    def get_bool(self, key: str, default: bool) -> bool:
        value = self.get(key)
        if value is None:
            return default
        return value.strip().lower() == "true"

    @property
    def base_url(self) -> str:
        return self.get("base.url", DEFAULT_BASE_URL).rstrip("/")

    @property
    def request_timeout_ms(self) -> int:
        return self.get_int("request.timeout", DEFAULT_REQUEST_TIMEOUT_MS)

    @property
    def connection_timeout_ms(self) -> int:
        return self.get_int("connection.timeout", self.request_timeout_ms)

    @property
    def socket_timeout_ms(self) -> int:
        return self.get_int("socket.timeout", self.request_timeout_ms)

    @property
    def logging_enabled(self) -> bool:
        return self.get_bool("logging.enabled", True)

    @property
    def auth_username(self) -> str:
        return self.get("auth.username", DEFAULT_USERNAME)

    @property
    def auth_password(self) -> str:
        return self.get("auth.password", DEFAULT_PASSWORD)

    @property
    def audit_file(self) -> Optional[str]:
        return self.get("audit.file") or None

    def with_overrides(self, **overrides: str) -> "Configuration":
        """Copy with extra overrides; keyword names use `_` for `.`."""
        merged = dict(self._overrides)
        merged.update({k.replace("_", "."): v for k, v in overrides.items()})
        return Configuration(self._properties, merged, self._environ)
