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

"""nfdhcpd binding file.

nfdhcpd reads one file per NIC to learn how to answer DHCP requests
arriving on that NIC's tap device::

    HOSTNAME=one-7
    INDEV=tap0
    MAC=02:00:0a:00:00:01
    IP=10.0.0.1
    SUBNET=10.0.0.0/255.255.255.0
    GATEWAY=10.0.0.254
    NAMESERVERS=8.8.8.8
    MTU=1450
"""

from __future__ import annotations

import logging
from pathlib import Path

from dhcpfabrik.driver._jinja2_template import Jinja2Template

logger = logging.getLogger(__name__)

DEFAULT_MTU = 1450


class BindingFile:
    """Key/value configuration of one NIC for nfdhcpd."""

    def __init__(
        self,
        hostname: str,
        indev: str,
        mac: str,
        ip: str,
        network_address: str,
        network_mask: str,
        gateway: str,
        nameservers: str,
        mtu: int = DEFAULT_MTU,
    ) -> None:
        # Order matters, nfdhcpd expects the keys in this sequence.
        self.items: list[tuple[str, str]] = [
            ('HOSTNAME', hostname),
            ('INDEV', indev),
            ('MAC', mac),
            ('IP', ip),
            ('SUBNET', f'{network_address}/{network_mask}'),
            ('GATEWAY', gateway),
            ('NAMESERVERS', nameservers),
            ('MTU', str(mtu)),
        ]

    def render(self) -> str:
        template = Jinja2Template('nfdhcpd', 'binding.j2')
        return template.render({'items': self.items})

    def save(self, path: str | Path) -> None:
        """Write the binding file, replacing any previous content."""
        text = self.render()
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
        logger.debug('Wrote binding file %s', path)
