import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import jsonschema

# tomllib is stdlib in Python 3.11+. Fall back to tomli for older versions.
try:
    import tomllib  # type: ignore
except ImportError:  # pragma: no cover - platform dependent
    import tomli as tomllib  # type: ignore

logger = logging.getLogger(__name__)

DISABLE_ENV = 'REX_DISABLE_SUDO'
HELPER_ENV = 'REX_SUDO_HELPER'
LOG_LEVEL_ENV = 'REX_SUDO_LOG_LEVEL'

DEFAULT_HELPER = 'sudo'
DEFAULT_PRESERVE_ENV_FLAG = '-E'
DEFAULT_LOG_LEVEL = 'WARNING'

CONFIG_SCHEMA: dict[str, Any] = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    'title': 'rexsudo configuration',
    'type': 'object',
    'properties': {
        'helper': {'type': 'string', 'minLength': 1},
        'preserve_env_flag': {'type': 'string', 'minLength': 1},
        'log_level': {
            'type': 'string',
            'enum': ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        },
    },
    'additionalProperties': False,
}

# env var consulted for each config key; None means file/default only
_ENV_OVERRIDES: dict[str, Optional[str]] = {
    'helper': HELPER_ENV,
    'preserve_env_flag': None,
    'log_level': LOG_LEVEL_ENV,
}

_DEFAULTS: dict[str, str] = {
    'helper': DEFAULT_HELPER,
    'preserve_env_flag': DEFAULT_PRESERVE_ENV_FLAG,
    'log_level': DEFAULT_LOG_LEVEL,
}


@dataclass(frozen=True)
class WrapperSettings:
    """Everything the wrapper reads from its surroundings, captured once."""

    escalation_disabled: bool = False
    helper: str = DEFAULT_HELPER
    preserve_env_flag: str = DEFAULT_PRESERVE_ENV_FLAG
    log_level: str = DEFAULT_LOG_LEVEL
    search_path: Optional[str] = None


def _config_file_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    xdg = env.get('XDG_CONFIG_HOME')
    if xdg:
        base = Path(xdg)
    else:
        base = Path.home() / '.config'
    return base / 'rexsudo' / 'config.toml'


def load_config(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Load and validate the TOML config file. Returns empty dict on error."""
    p = None
    try:
        p = _config_file_path(environ)
        if not p.exists():
            return {}
        with p.open('rb') as f:
            data = tomllib.load(f)
    except (OSError, RuntimeError, tomllib.TOMLDecodeError) as e:
        # RuntimeError: no HOME and no passwd entry to resolve ~
        logger.warning('ignoring unreadable config %s: %s', p or '~/.config/rexsudo/config.toml', e)
        return {}
    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        logger.warning('ignoring invalid config %s: %s', p, e.message)
        return {}
    return data


def is_escalation_disabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Only the literal string "1" disables escalation; anything else does not."""
    env = os.environ if environ is None else environ
    return env.get(DISABLE_ENV) == '1'


def get_effective_value(
    key: str,
    environ: Optional[Mapping[str, str]] = None,
    cfg: Optional[dict[str, Any]] = None,
) -> dict[str, Any] | None:
    """Return a dict with env/config/code default/effective for a key.

    Returns None if key is not allowed.
    """
    if key not in _DEFAULTS:
        return None

    env_map = os.environ if environ is None else environ
    env_name = _ENV_OVERRIDES[key]
    env = env_map.get(env_name) if env_name else None
    if env == '':
        env = None
    if cfg is None:
        cfg = load_config(env_map)
    cfg_val = cfg.get(key)

    # precedence env > config > code default
    if env is not None:
        effective = env
    elif cfg_val is not None:
        effective = cfg_val
    else:
        effective = _DEFAULTS[key]

    return {'env': env, 'config': cfg_val, 'code_default': _DEFAULTS[key], 'effective': effective}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> WrapperSettings:
    """Read the environment and config file once and freeze the result."""
    env = os.environ if environ is None else environ
    cfg = load_config(env)

    def effective(key: str) -> str:
        return get_effective_value(key, env, cfg)['effective']  # type: ignore[index]

    return WrapperSettings(
        escalation_disabled=is_escalation_disabled(env),
        helper=effective('helper'),
        preserve_env_flag=effective('preserve_env_flag'),
        log_level=effective('log_level').upper(),
        search_path=env.get('PATH'),
    )
