"""Configuration loader and validator for shtools.

Provides ``load_config(path)`` which reads a JSON config (with
comment and trailing-comma tolerant sanitizer) from an explicit path
or from ``~/.config/shtools/config.json``.

Also provides ``validate_config(conf)`` which normalizes and
validates config keys, raising ``ValueError`` on invalid values.
"""

from __future__ import annotations

import json
import logging
import os
import re

logger = logging.getLogger(__name__)

USER_CONFIG_PATH = '~/.config/shtools/config.json'

NOTIFIER_KINDS = ('auto', 'kde', 'notify-send', 'none')

# Single source of truth for default configuration
DEFAULT_CONFIG: dict = {
    'debug': False,
    'log_file': '~/.shtools.log',
    'bin_dir': '~/bin',
    'install_skip_pattern': r'^\.gitignore|README\.md|cs$',
    'shebang': '#!/usr/bin/env bash',
    'shell': '/bin/sh',
    'nice': 10,
    'notifier': 'auto',
    'notify_timeout': 5,
    'poll_interval': 0.25,
}


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _sanitize_json_text(s: str) -> str:
    """Remove ``#``/``//`` comments and trailing commas from JSON-like text."""
    # Hash-style line comments
    s = re.sub(r"^[ \t]*#.*$", "", s, flags=re.MULTILINE)
    # C++-style line comments
    s = re.sub(r"^[ \t]*//.*$", "", s, flags=re.MULTILINE)
    s = re.sub(r"[ \t]+//[^\"\n]*$", "", s, flags=re.MULTILINE)
    # Trailing commas before } or ]
    s = re.sub(r",[ \t\r\n]+(\}|\])", r"\1", s)
    return s


def _non_empty_str(conf: dict, key: str) -> str:
    value = conf.get(key, DEFAULT_CONFIG[key])
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid '{key}': must be a non-empty string")
    return value


def _bounded_int(conf: dict, key: str, low: int, high: int) -> int:
    raw = conf.get(key, DEFAULT_CONFIG[key])
    if isinstance(raw, bool):
        raise ValueError(f"Invalid '{key}': {raw}")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid '{key}': {raw}")
    if not (low <= value <= high):
        raise ValueError(f"Invalid '{key}': {raw} (must be between {low} and {high})")
    return value


# ------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------

def validate_config(conf: dict | None) -> dict:
    """Validate and normalize configuration dictionary.

    Returns a normalized dict with all expected keys.
    Raises ``ValueError`` on invalid values.
    """
    if conf is None:
        conf = {}

    out = dict(DEFAULT_CONFIG)

    # debug — boolean
    dbg = conf.get('debug', DEFAULT_CONFIG['debug'])
    if not isinstance(dbg, bool):
        raise ValueError("Invalid 'debug' flag: must be boolean")
    out['debug'] = dbg

    out['log_file'] = _non_empty_str(conf, 'log_file')
    out['bin_dir'] = _non_empty_str(conf, 'bin_dir')
    out['shell'] = _non_empty_str(conf, 'shell')

    # install_skip_pattern — must compile
    skip = _non_empty_str(conf, 'install_skip_pattern')
    try:
        re.compile(skip)
    except re.error as exc:
        raise ValueError(f"Invalid 'install_skip_pattern': {exc}")
    out['install_skip_pattern'] = skip

    # shebang — interpreter line
    shebang = _non_empty_str(conf, 'shebang')
    if not shebang.startswith('#!') or '\n' in shebang:
        raise ValueError("Invalid 'shebang': must be a single line starting with '#!'")
    out['shebang'] = shebang

    out['nice'] = _bounded_int(conf, 'nice', 0, 19)
    out['notify_timeout'] = _bounded_int(conf, 'notify_timeout', 1, 60)

    # notifier — one of the known strategies
    kind = conf.get('notifier', DEFAULT_CONFIG['notifier'])
    if kind not in NOTIFIER_KINDS:
        raise ValueError(f"Invalid 'notifier': {kind} (must be one of {', '.join(NOTIFIER_KINDS)})")
    out['notifier'] = kind

    # poll_interval — positive float in [0.01, 10.0]
    pi = conf.get('poll_interval', DEFAULT_CONFIG['poll_interval'])
    if isinstance(pi, bool):
        raise ValueError(f"Invalid 'poll_interval': {pi}")
    try:
        pi_val = float(pi)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid 'poll_interval': {pi}")
    if not (0.01 <= pi_val <= 10.0):
        raise ValueError(f"Invalid 'poll_interval': {pi} (must be between 0.01 and 10.0)")
    out['poll_interval'] = pi_val

    return out


def _read_and_merge(path: str, target_config: dict, debug: bool = False) -> bool:
    """Read a JSON file, validate, and merge into *target_config*.

    Returns True on success, False on any error.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = f.read()
    except OSError as exc:
        if debug:
            logger.warning("Cannot read config %s: %s", path, exc)
        return False

    try:
        cfg = json.loads(raw)
    except json.JSONDecodeError:
        try:
            cfg = json.loads(_sanitize_json_text(raw))
        except json.JSONDecodeError as exc:
            if debug:
                logger.warning("JSON parse error in %s: %s", path, exc)
            return False

    if not isinstance(cfg, dict):
        if debug:
            logger.warning("Invalid config %s: top level must be an object", path)
        return False

    try:
        validated = validate_config(cfg)
    except ValueError as verr:
        if debug:
            logger.warning("Invalid config %s: %s", path, verr)
        return False

    # Only override keys explicitly present in source
    for k in cfg:
        if k in validated:
            target_config[k] = validated[k]
    return True


# ------------------------------------------------------------------
# Top-level loader
# ------------------------------------------------------------------

def load_config(config_path: str | None = None, debug: bool = False) -> dict:
    """Load and merge configuration.

    If *config_path* is given, uses only that file (returns defaults if
    the file does not exist).  Otherwise falls back to
    ``~/.config/shtools/config.json``.

    Returns the effective configuration dict (always has all default keys).
    """
    config = dict(DEFAULT_CONFIG)

    path = config_path if config_path is not None else os.path.expanduser(USER_CONFIG_PATH)
    if os.path.exists(path):
        _read_and_merge(path, config, debug=debug)

    return config
