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

"""Read-only queries against one iptables table."""

from __future__ import annotations

import logging

from dhcpfabrik.platforms.iptables._commands import Commands
from dhcpfabrik.platforms.iptables._parser import Rule, TableSnapshot, parse_dump

logger = logging.getLogger(__name__)


class RuleStore:
    """Dumps a table and returns its chains and rules.

    Every call queries iptables again. The table is shared with other
    processes, so results are never cached.
    """

    def __init__(
        self,
        table: str = 'mangle',
        command_table: dict[str, str] | None = None,
    ) -> None:
        self.table = table
        self._command_table = command_table

    def snapshot(self) -> TableSnapshot:
        commands = Commands(self._command_table)
        commands.add('iptables', f'-t {self.table} -S')
        snapshot = parse_dump(commands.run(), self.table)
        logger.debug('Chains in %s: %s', self.table, sorted(snapshot.chains))
        return snapshot

    def list_chains(self) -> frozenset[str]:
        return self.snapshot().chains

    def list_rules(self, chain: str) -> tuple[Rule, ...]:
        rules = self.snapshot().rules_in(chain)
        logger.debug('Rules in %s/%s: %s', self.table, chain, [r.spec for r in rules])
        return rules
