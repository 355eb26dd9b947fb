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

"""XML reader for OpenNebula VM templates.

The host driver framework hands the VM over as a base64 encoded
``<VM>`` document. Only the VM ID and the ``TEMPLATE/NIC`` elements
are of interest here.
"""

from __future__ import annotations

import base64
import binascii
import logging
import xml.etree.ElementTree

from ._vm import Nic, VirtualMachine
from .options import DRIVER_DEFAULTS

logger = logging.getLogger(__name__)

# NIC child element -> Nic field
_NIC_FIELDS = {
    'NIC_ID': 'nic_id',
    'TARGET': 'tap',
    'MAC': 'mac',
    'IP': 'ip',
    'NETWORK_ADDRESS': 'network_address',
    'NETWORK_MASK': 'network_mask',
    'GATEWAY': 'gateway',
    'DNS': 'dns',
}


def _text(elem: xml.etree.ElementTree.Element, tag: str) -> str:
    child = elem.find(tag)
    if child is None or child.text is None:
        return ''
    return child.text.strip()


def _is_yes(value: str) -> bool:
    return value.upper() == 'YES'


def _parse_nic(elem: xml.etree.ElementTree.Element) -> Nic:
    return Nic(**{field: _text(elem, tag) for tag, field in _NIC_FIELDS.items()})


def decode_vm_template(vm_64: str | bytes) -> str:
    """Decode a base64 encoded VM template."""
    try:
        return base64.b64decode(vm_64, validate=False).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f'Invalid base64 VM template: {e}') from e


def read_vm_xml(
    vm_xml: str,
    xpath_filter: str = DRIVER_DEFAULTS.xpath_filter,
) -> VirtualMachine:
    """Parse a ``<VM>`` document into a :class:`VirtualMachine`.

    *xpath_filter* is an ElementTree path expression, relative to the
    ``<VM>`` element, selecting the NICs the driver manages.
    """
    try:
        root = xml.etree.ElementTree.fromstring(vm_xml)
    except xml.etree.ElementTree.ParseError as e:
        raise ValueError(f'Invalid VM template XML: {e}') from e

    vm_id = _text(root, 'ID')
    if not vm_id:
        raise ValueError('VM template has no ID')

    try:
        nic_elems = root.findall(xpath_filter)
    except SyntaxError as e:
        raise ValueError(f'Invalid NIC filter {xpath_filter!r}: {e}') from e

    nics = []
    for elem in nic_elems:
        nic = _parse_nic(elem)
        if not nic.nic_id:
            logger.warning('Skipping NIC without NIC_ID in VM %s', vm_id)
            continue
        nics.append(nic)

    attach_nic_id = None
    for elem in root.findall('TEMPLATE/NIC'):
        if _is_yes(_text(elem, 'ATTACH')) and _is_yes(_text(elem, 'NFDHCPD')):
            attach_nic_id = _text(elem, 'NIC_ID') or None
            break

    logger.debug(
        'VM %s: %d managed NIC(s), attach NIC %s', vm_id, len(nics), attach_nic_id
    )
    return VirtualMachine(vm_id=vm_id, nics=tuple(nics), attach_nic_id=attach_nic_id)


def read_vm_template(
    vm_64: str | bytes,
    xpath_filter: str = DRIVER_DEFAULTS.xpath_filter,
) -> VirtualMachine:
    """Decode and parse a base64 encoded VM template."""
    return read_vm_xml(decode_vm_template(vm_64), xpath_filter)
