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

"""Canonical option key definitions using StrEnum.

The keys double as the field names of
:class:`~dhcpfabrik.core.options.DriverDefaults` and as the top-level
keys of the YAML configuration file, so a typo is caught at import
time rather than silently ignored at runtime.

Example:
    from dhcpfabrik.core.options import DriverOption

    queue = config.get(DriverOption.NFQUEUE_QUEUE_NUM)
"""

from enum import StrEnum


class DriverOption(StrEnum):
    """nfdhcpd driver option keys."""

    # Filter table layout
    GLOBAL_CHAIN = 'global_chain'
    TABLE = 'table'
    CHAIN_PREFIX = 'chain_prefix'
    CHAIN_SUFFIX = 'chain_suffix'
    NFQUEUE_QUEUE_NUM = 'nfqueue_queue_num'
    LEGACY_RULE_MATCH = 'legacy_rule_match'

    # Binding files
    BINDING_FILES_DATAPATH = 'binding_files_datapath'
    MTU = 'mtu'

    # VM template
    XPATH_FILTER = 'xpath_filter'

    # Locking
    LOCKING = 'locking'
    LOCK_FILE = 'lock_file'
    LOCK_TIMEOUT = 'lock_timeout'

    # External tools
    COMMANDS = 'commands'
