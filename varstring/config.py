"""
varstring Threshold Configuration

The two dispatch thresholds decide which representation a new value uses:

    length <= top               -> Kind.INLINE
    top < length <= bottom      -> Kind.EXCLUSIVE
    length > bottom             -> Kind.SHARED

They are fixed once per process. ACTIVE is built at import time from the
defaults, optionally overridden by a TOML file named in VARSTRING_CONFIG.
configure() may replace it once at startup, before the first value is
built:

    [thresholds]
    top = 23
    bottom = 255

    [varstring]
    encoding = "utf-8"
    trace_level = 0

VARSTRING_TRACE, when set, overrides trace_level.
"""

import codecs
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

# TOML parsing - use stdlib tomllib in 3.11+, fallback to tomli
try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None

from varstring.errors import ConfigError
from varstring.representations import Kind
from varstring.trace import set_trace_level


# Inline storage is capped at three machine words
INLINE_CAPACITY_LIMIT = 23

DEFAULT_TOP_THRESHOLD = 23
DEFAULT_BOTTOM_THRESHOLD = 255
DEFAULT_ENCODING = "utf-8"

CONFIG_ENV_VAR = "VARSTRING_CONFIG"
TRACE_ENV_VAR = "VARSTRING_TRACE"


@dataclass(frozen=True)
class Thresholds:
    """Length boundaries between the three representations"""
    top: int = DEFAULT_TOP_THRESHOLD
    bottom: int = DEFAULT_BOTTOM_THRESHOLD

    def __post_init__(self):
        for name in ("top", "bottom"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(f"thresholds.{name} must be an integer, got {value!r}")
        if not 0 <= self.top <= INLINE_CAPACITY_LIMIT:
            raise ConfigError(
                f"thresholds.top must be between 0 and {INLINE_CAPACITY_LIMIT}, got {self.top}"
            )
        if self.bottom <= self.top:
            raise ConfigError(
                f"thresholds.bottom ({self.bottom}) must be greater than thresholds.top ({self.top})"
            )

    def select(self, length: int) -> Kind:
        """Pick the representation kind for content of the given byte length."""
        if length <= self.top:
            return Kind.INLINE
        if length <= self.bottom:
            return Kind.EXCLUSIVE
        return Kind.SHARED


@dataclass(frozen=True)
class Config:
    """Process-wide settings for StringValue"""
    thresholds: Thresholds = field(default_factory=Thresholds)
    encoding: str = DEFAULT_ENCODING
    trace_level: int = 0

    def __post_init__(self):
        try:
            codecs.lookup(self.encoding)
        except (LookupError, TypeError):
            raise ConfigError(f"Unknown encoding: {self.encoding!r}")
        if not isinstance(self.trace_level, int) or self.trace_level < 0:
            raise ConfigError(f"trace_level must be a non-negative integer, got {self.trace_level!r}")


def load_config(path: str) -> Config:
    """Parse a TOML config file into a Config.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values
    """
    if tomllib is None:
        raise ConfigError(
            "TOML parsing not available.\n"
            "Install with: pip install tomli"
        )

    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}")
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse {path}: {e}")

    return config_from_mapping(data)


def config_from_mapping(data: Mapping) -> Config:
    """Build a Config from already-parsed TOML tables."""
    thresholds_data = data.get('thresholds', {})
    options = data.get('varstring', {})
    if not isinstance(thresholds_data, Mapping):
        raise ConfigError("[thresholds] must be a table")
    if not isinstance(options, Mapping):
        raise ConfigError("[varstring] must be a table")

    unknown = set(thresholds_data) - {'top', 'bottom'}
    if unknown:
        raise ConfigError(f"Unknown threshold key(s): {', '.join(sorted(unknown))}")

    thresholds = Thresholds(
        top=thresholds_data.get('top', DEFAULT_TOP_THRESHOLD),
        bottom=thresholds_data.get('bottom', DEFAULT_BOTTOM_THRESHOLD),
    )
    return Config(
        thresholds=thresholds,
        encoding=options.get('encoding', DEFAULT_ENCODING),
        trace_level=options.get('trace_level', 0),
    )


def config_from_environment(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build the Config named by VARSTRING_CONFIG / VARSTRING_TRACE."""
    if environ is None:
        environ = os.environ

    path = environ.get(CONFIG_ENV_VAR)
    config = load_config(path) if path else Config()

    trace = environ.get(TRACE_ENV_VAR)
    if trace:
        try:
            level = int(trace)
        except ValueError:
            raise ConfigError(f"{TRACE_ENV_VAR} must be an integer, got {trace!r}")
        config = Config(config.thresholds, config.encoding, level)

    return config


def configure(new_config: Config):
    """Install `new_config` as the process-wide configuration.

    Only allowed before the first value is built; from then on the
    thresholds stay fixed for the life of the process.

    Raises:
        ConfigError: If a StringValue has already been built
    """
    global ACTIVE
    if _locked:
        raise ConfigError("Configuration is fixed once a StringValue has been built")
    ACTIVE = new_config
    set_trace_level(new_config.trace_level)


def active_thresholds() -> Thresholds:
    """Thresholds for a new value. Locks the configuration."""
    global _locked
    _locked = True
    return ACTIVE.thresholds


ACTIVE = config_from_environment()
_locked = False
