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

"""CLI entry point for the nfdhcpd driver, called from the VNM hooks."""

import argparse
import logging
import sys
from pathlib import Path

import dhcpfabrik
from dhcpfabrik.core import DhcpFabricError, load_config, read_vm_xml
from dhcpfabrik.driver import NfdhcpdDriver

__author__ = 'Linuxfabrik GmbH, Zurich/Switzerland'

DESCRIPTION = """Activates or deactivates nfdhcpd DHCP interception for the NICs of a
VM. Reads the base64 encoded VM template from stdin unless --file is given."""

ACTIONS = ('activate', 'deactivate', 'status')

_LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='dhcpfabrik-nfdhcpd',
        description=DESCRIPTION,
    )

    parser.add_argument(
        'action',
        choices=ACTIONS,
        help='what to do with the managed NICs of the VM',
    )

    parser.add_argument(
        '-c',
        '--config',
        default=None,
        dest='CONFIG',
        help='path to the YAML configuration file. '
        'Default: /etc/dhcpfabrik/nfdhcpd.yml if it exists',
    )

    parser.add_argument(
        '-f',
        '--file',
        default=None,
        dest='FILE',
        help='read the VM template as plain XML from this file instead of stdin',
    )

    parser.add_argument(
        '-n',
        '--nic-id',
        default=None,
        dest='NIC_ID',
        help='only handle the NIC with this ID (NIC attach/detach)',
    )

    parser.add_argument(
        '--xpath-filter',
        default=None,
        dest='XPATH_FILTER',
        help='path expression selecting the managed NICs in the VM template',
    )

    parser.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=0,
        dest='VERBOSE',
        help='verbose output (repeat for higher verbosity)',
    )

    parser.add_argument(
        '-V',
        '--version',
        action='version',
        version=f'%(prog)s: v{dhcpfabrik.__version__} by {__author__}',
    )

    return parser.parse_args(argv)


def _print_status(driver, nic_id):
    snapshot = driver.rule_store.snapshot()
    managed = set()
    for status in driver.status(nic_id, snapshot):
        managed.add(status.chain)
        if status.active:
            state = 'active'
        elif status.chain_present or status.linked or status.binding_file_present:
            state = 'partial'
        else:
            state = 'inactive'
        print(f'{status.nic_id}\t{status.chain}\t{state}')

    if nic_id is None:
        for chain in driver.owned_chains(snapshot):
            if chain not in managed:
                print(f'-\t{chain}\tstale')


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=_LOG_LEVELS[min(args.VERBOSE, len(_LOG_LEVELS) - 1)],
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        config = load_config(args.CONFIG)
        xpath_filter = args.XPATH_FILTER or config.xpath_filter
        if args.FILE:
            vm_xml = Path(args.FILE).read_text(encoding='utf-8')
            driver = NfdhcpdDriver(read_vm_xml(vm_xml, xpath_filter), config)
        else:
            driver = NfdhcpdDriver.from_template(sys.stdin.read(), config, xpath_filter)
    except (OSError, ValueError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1

    try:
        if args.action == 'status':
            _print_status(driver, args.NIC_ID)
        elif args.action == 'activate':
            driver.activate(args.NIC_ID)
        else:
            driver.deactivate(args.NIC_ID)
    except (DhcpFabricError, OSError) as e:
        print(
            f'Error: {args.action} failed for VM {driver.vm.vm_id}: {e}',
            file=sys.stderr,
        )
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
