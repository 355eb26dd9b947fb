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

"""IPTables naming helpers for per-NIC chains."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# xt_table chain names hold 29 bytes including the terminating NUL
MAX_CHAIN_NAME_LENGTH = 28


def get_nic_chain_name(prefix: str, vm_id: str, nic_id: str, suffix: str) -> str:
    """Return the dedicated chain name of a VM NIC.

    E.g. ("one", "7", "0", "nfdhcpd") -> "one-7-0-nfdhcpd"
    """
    name = f'{prefix}-{vm_id}-{nic_id}-{suffix}'
    if len(name) > MAX_CHAIN_NAME_LENGTH:
        logger.warning(
            'Chain name %s exceeds %d characters, iptables will reject it',
            name,
            MAX_CHAIN_NAME_LENGTH,
        )
    return name


def parse_nic_chain_name(name: str, prefix: str, suffix: str) -> tuple[str, str] | None:
    """Return ``(vm_id, nic_id)`` for a chain built by :func:`get_nic_chain_name`.

    Returns None for any other chain name.
    """
    m = re.fullmatch(rf'{re.escape(prefix)}-(\d+)-(\d+)-{re.escape(suffix)}', name)
    if m is None:
        return None
    return m.group(1), m.group(2)


def get_binding_file_name(prefix: str, vm_id: str, nic_id: str) -> str:
    """Return the binding file name of a VM NIC, e.g. "one-7-0"."""
    return f'{prefix}-{vm_id}-{nic_id}'
