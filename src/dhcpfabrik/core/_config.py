# Copyright (C) 2026 Linuxfabrik <info@linuxfabrik.ch>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# On Debian systems, the complete text of the GNU General Public License
# version 2 can be found in /usr/share/common-licenses/GPL-2.
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""YAML configuration loader for the driver options."""

from __future__ import annotations

import dataclasses
import logging
import pathlib

import yaml

from .options import DriverDefaults, migrate_options

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = '/etc/dhcpfabrik/nfdhcpd.yml'

_TRUE_STRINGS = frozenset({'1', 'true', 'yes', 'on'})
_FALSE_STRINGS = frozenset({'0', 'false', 'no', 'off'})


def _coerce(key: str, value, default):
    """Coerce *value* to the type of *default*."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f'Option {key}: expected a boolean, got {value!r}')

    if isinstance(default, dict):
        if not isinstance(value, dict):
            raise ValueError(f'Option {key}: expected a mapping, got {value!r}')
        merged = dict(default)
        merged.update({str(k): str(v) for k, v in value.items()})
        return merged

    if isinstance(value, bool):
        raise ValueError(
            f'Option {key}: expected {type(default).__name__}, got {value!r}'
        )
    try:
        return type(default)(value)
    except (TypeError, ValueError):
        raise ValueError(
            f'Option {key}: expected {type(default).__name__}, got {value!r}'
        ) from None


def config_from_dict(options: dict | None) -> DriverDefaults:
    """Build a :class:`DriverDefaults` from a raw options mapping."""
    defaults = DriverDefaults()
    known = {f.name for f in dataclasses.fields(DriverDefaults)}
    changes = {}

    for key, value in migrate_options(options).items():
        if key not in known:
            logger.warning('Ignoring unknown option: %s', key)
            continue
        if value is None:
            continue
        changes[str(key)] = _coerce(key, value, defaults.get(key))

    return defaults.replace(**changes)


def load_config(path: str | pathlib.Path | None = None) -> DriverDefaults:
    """Load the driver configuration.

    Without *path*, the system-wide default file is read if it exists
    and built-in defaults are used otherwise. An explicitly given file
    must exist.
    """
    if path is None:
        config_path = pathlib.Path(DEFAULT_CONFIG_FILE)
        if not config_path.is_file():
            logger.debug('No configuration at %s, using defaults', config_path)
            return DriverDefaults()
    else:
        config_path = pathlib.Path(path)

    try:
        with config_path.open(encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ValueError(f'Cannot read configuration {config_path}: {e}') from e
    except yaml.YAMLError as e:
        raise ValueError(f'Invalid YAML in {config_path}: {e}') from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f'Configuration {config_path} must be a mapping')

    logger.debug('Loaded configuration from %s', config_path)
    return config_from_dict(data)
