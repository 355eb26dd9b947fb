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

"""Value objects describing a VM and its network interfaces."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class Nic:
    """One VM network interface as described by the VM template."""

    nic_id: str
    tap: str = ''
    mac: str = ''
    ip: str = ''
    network_address: str = ''
    network_mask: str = ''
    gateway: str = ''
    dns: str = ''


@dataclasses.dataclass(frozen=True)
class VirtualMachine:
    """A VM with the NICs selected for management by the driver.

    ``attach_nic_id`` is set when the template describes a single NIC
    being hot-attached or detached (``ATTACH=YES`` together with
    ``NFDHCPD=YES``).
    """

    vm_id: str
    nics: tuple[Nic, ...] = ()
    attach_nic_id: str | None = None

    def get_nic(self, nic_id: str) -> Nic | None:
        for nic in self.nics:
            if nic.nic_id == nic_id:
                return nic
        return None
