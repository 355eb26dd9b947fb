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

"""IPTables platform: command batches, table dumps, and chain naming."""

from dhcpfabrik.platforms.iptables._commands import Command, Commands
from dhcpfabrik.platforms.iptables._parser import (
    Rule,
    TableSnapshot,
    parse_dump,
    parse_rule,
)
from dhcpfabrik.platforms.iptables._rulestore import RuleStore
from dhcpfabrik.platforms.iptables._utils import (
    MAX_CHAIN_NAME_LENGTH,
    get_binding_file_name,
    get_nic_chain_name,
    parse_nic_chain_name,
)

__all__ = [
    'MAX_CHAIN_NAME_LENGTH',
    'Command',
    'Commands',
    'Rule',
    'RuleStore',
    'TableSnapshot',
    'get_binding_file_name',
    'get_nic_chain_name',
    'parse_dump',
    'parse_nic_chain_name',
    'parse_rule',
]
