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

"""Unit tests for reading OpenNebula VM templates."""

import base64

import pytest

from dhcpfabrik.core import Nic, read_vm_template, read_vm_xml

from .conftest import make_nic, make_vm_xml


def test_reads_managed_nics():
    vm = read_vm_xml(make_vm_xml('7', [make_nic(0), make_nic(1)]))
    assert vm.vm_id == '7'
    assert vm.attach_nic_id is None
    assert vm.nics == (
        Nic(
            nic_id='0',
            tap='tap0',
            mac='02:00:0a:00:00:01',
            ip='10.0.0.1',
            network_address='10.0.0.0',
            network_mask='255.255.255.0',
            gateway='10.0.0.254',
            dns='8.8.8.8',
        ),
        Nic(
            nic_id='1',
            tap='tap1',
            mac='02:00:0a:00:00:02',
            ip='10.0.0.2',
            network_address='10.0.0.0',
            network_mask='255.255.255.0',
            gateway='10.0.0.254',
            dns='8.8.8.8',
        ),
    )


def test_skips_nics_without_nfdhcpd():
    xml = make_vm_xml(
        '7', [make_nic(0, NFDHCPD='NO'), make_nic(1), make_nic(2, NFDHCPD='')]
    )
    vm = read_vm_xml(xml)
    assert [nic.nic_id for nic in vm.nics] == ['1']


def test_custom_filter():
    xml = make_vm_xml('7', [make_nic(0, NFDHCPD='NO'), make_nic(1)])
    vm = read_vm_xml(xml, 'TEMPLATE/NIC')
    assert [nic.nic_id for nic in vm.nics] == ['0', '1']


def test_attach_nic_id():
    xml = make_vm_xml('7', [make_nic(0), make_nic(1, ATTACH='YES')])
    vm = read_vm_xml(xml)
    assert vm.attach_nic_id == '1'
    assert vm.get_nic('1').tap == 'tap1'


def test_attach_requires_nfdhcpd():
    xml = make_vm_xml('7', [make_nic(0), make_nic(1, ATTACH='YES', NFDHCPD='NO')])
    vm = read_vm_xml(xml)
    assert vm.attach_nic_id is None


def test_missing_optional_fields():
    xml = make_vm_xml('7', [make_nic(0, GATEWAY='', DNS='')])
    nic = read_vm_xml(xml).nics[0]
    assert nic.gateway == ''
    assert nic.dns == ''


def test_nic_without_id_is_skipped():
    xml = make_vm_xml('7', [make_nic(0, NIC_ID=''), make_nic(1)])
    vm = read_vm_xml(xml)
    assert [nic.nic_id for nic in vm.nics] == ['1']


def test_base64_template():
    vm_64 = base64.b64encode(make_vm_xml('42').encode()).decode()
    vm = read_vm_template(vm_64)
    assert vm.vm_id == '42'
    assert vm.get_nic('0').tap == 'tap0'
    assert vm.get_nic('9') is None


def test_invalid_xml():
    with pytest.raises(ValueError, match='Invalid VM template XML'):
        read_vm_xml('<VM><ID>7</ID>')


def test_missing_vm_id():
    with pytest.raises(ValueError, match='no ID'):
        read_vm_xml('<VM><TEMPLATE/></VM>')


def test_invalid_filter():
    with pytest.raises(ValueError, match='Invalid NIC filter'):
        read_vm_xml(make_vm_xml(), 'TEMPLATE/NIC[')


def test_invalid_base64():
    with pytest.raises(ValueError, match='base64'):
        read_vm_template('abc')
