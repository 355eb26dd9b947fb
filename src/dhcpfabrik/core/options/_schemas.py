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

"""Typed option schema with shared defaults.

:class:`DriverDefaults` is the single source of truth for which
options exist, their types, and their default values. The YAML loader
coerces user values to the type of the corresponding default.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

# Tool key -> command prefix. Matches the command table of the
# OpenNebula VNM drivers.
DEFAULT_COMMANDS: dict[str, str] = {
    'iptables': 'sudo -n iptables --wait',
}


@dataclass
class DriverDefaults:
    """Default values for the nfdhcpd driver."""

    # Single entry point chain, created once and never deleted
    global_chain: str = 'opennebula'
    table: str = 'mangle'

    # Per-NIC chains are named <prefix>-<vm_id>-<nic_id>-<suffix>
    chain_prefix: str = 'one'
    chain_suffix: str = 'nfdhcpd'

    # Userspace queue nfdhcpd listens on
    nfqueue_queue_num: int = 42

    # Match linking rules by substring of the rule text instead of by
    # the jump target
    legacy_rule_match: bool = False

    binding_files_datapath: str = '/var/lib/opennebula-nfdhcpd/'
    mtu: int = 1450

    # Selects the NICs the driver manages from the VM template
    xpath_filter: str = "TEMPLATE/NIC[NFDHCPD='YES']"

    locking: bool = True
    lock_file: str = '/var/lock/one/.vnm.lock'
    lock_timeout: float = -1.0  # negative waits forever

    commands: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COMMANDS))

    def get(self, key: str):
        return getattr(self, str(key))

    def replace(self, **changes) -> DriverDefaults:
        return dataclasses.replace(self, **changes)


DRIVER_DEFAULTS = DriverDefaults()
