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

"""Typed option keys and schemas for the driver configuration.

This module provides:

- **StrEnum keys**: Type-safe option key names
- **Dataclass schema**: Typed defaults
- **Migration helpers**: Legacy key compatibility

Usage::

    from dhcpfabrik.core.options import DriverOption

    chain = config.get(DriverOption.GLOBAL_CHAIN)
"""

from dhcpfabrik.core.options._keys import DriverOption
from dhcpfabrik.core.options._migration import migrate_options
from dhcpfabrik.core.options._schemas import (
    DEFAULT_COMMANDS,
    DRIVER_DEFAULTS,
    DriverDefaults,
)

__all__ = [
    'DEFAULT_COMMANDS',
    'DRIVER_DEFAULTS',
    'DriverDefaults',
    'DriverOption',
    'migrate_options',
]
