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

"""Shared pytest fixtures: an in-memory iptables mangle table and VM templates."""

import subprocess
from xml.sax.saxutils import escape

import pytest

from dhcpfabrik.core.options import DriverDefaults

BUILTIN_CHAINS = ('PREROUTING', 'INPUT', 'FORWARD', 'OUTPUT', 'POSTROUTING')


class FakeIptables:
    """Stateful stand-in for ``iptables -t mangle``.

    Installed in place of ``subprocess.run``. Supports the operations
    the driver uses with the error behaviour of the real tool: creating
    an existing chain, deleting a missing rule, or removing a chain that
    is still referenced all fail with exit status 1.
    """

    def __init__(self) -> None:
        self.rules: dict[str, list[list[str]]] = {c: [] for c in BUILTIN_CHAINS}
        self.user_chains: list[str] = []
        self.calls: list[str] = []
        self._fail_patterns: list[str] = []

    # -- Test helpers --

    def fail_when(self, pattern: str) -> None:
        """Make every command containing *pattern* exit with status 1."""
        self._fail_patterns.append(pattern)

    def clear_failures(self) -> None:
        self._fail_patterns.clear()

    def add_chain(self, chain: str) -> None:
        self.user_chains.append(chain)
        self.rules[chain] = []

    def add_rule(self, chain: str, spec: str) -> None:
        self.rules[chain].append(spec.split())

    def bootstrap(self, global_chain: str = 'opennebula') -> None:
        self.add_chain(global_chain)
        self.add_rule('PREROUTING', f'-j {global_chain}')
        self.add_rule(global_chain, '-j ACCEPT')

    def chain_rules(self, chain: str) -> list[str]:
        return [' '.join(spec) for spec in self.rules.get(chain, [])]

    def state(self, global_chain: str = 'opennebula'):
        return frozenset(self.user_chains), tuple(self.chain_rules(global_chain))

    def count(self, fragment: str) -> int:
        return sum(1 for call in self.calls if fragment in call)

    def dump(self) -> str:
        lines = [f'-P {chain} ACCEPT' for chain in BUILTIN_CHAINS]
        lines += [f'-N {chain}' for chain in self.user_chains]
        for chain in (*BUILTIN_CHAINS, *self.user_chains):
            lines += [f'-A {chain} {" ".join(spec)}' for spec in self.rules[chain]]
        return '\n'.join(lines) + '\n'

    # -- subprocess.run replacement --

    def __call__(self, argv, capture_output=False, text=False, check=False):
        line = ' '.join(argv)
        self.calls.append(line)

        def result(returncode=0, stdout='', stderr=''):
            return subprocess.CompletedProcess(argv, returncode, stdout, stderr)

        if any(pattern in line for pattern in self._fail_patterns):
            return result(1, stderr='iptables: injected failure.\n')

        assert argv[0] == 'iptables', f'unexpected tool: {argv[0]}'
        args = list(argv[1:])
        assert args[:2] == ['-t', 'mangle'], f'unexpected table: {line}'
        op, rest = args[2], args[3:]

        no_chain = result(1, stderr='iptables: No chain/target/match by that name.\n')

        if op == '-S':
            return result(stdout=self.dump())

        chain = rest[0]
        if op == '-N':
            if chain in self.rules:
                return result(1, stderr='iptables: Chain already exists.\n')
            self.add_chain(chain)
            return result()

        if chain not in self.rules:
            return no_chain

        if op in ('-A', '-I'):
            spec = rest[1:]
            position = 0
            if op == '-I' and spec and spec[0].isdigit():
                position = int(spec[0]) - 1
                spec = spec[1:]
            if '-j' in spec:
                target = spec[spec.index('-j') + 1]
                if not target.isupper() and target not in self.rules:
                    return no_chain
            if op == '-A':
                self.rules[chain].append(spec)
            else:
                self.rules[chain].insert(position, spec)
            return result()

        if op == '-D':
            spec = rest[1:]
            if spec not in self.rules[chain]:
                return result(
                    1,
                    stderr='iptables: Bad rule '
                    '(does a matching rule exist in that chain?).\n',
                )
            self.rules[chain].remove(spec)
            return result()

        if op == '-F':
            self.rules[chain] = []
            return result()

        if op == '-X':
            if chain in BUILTIN_CHAINS:
                return result(1, stderr='iptables: Invalid argument.\n')
            if self.rules[chain]:
                return result(1, stderr='iptables: Directory not empty.\n')
            for specs in self.rules.values():
                for spec in specs:
                    if '-j' in spec and spec[spec.index('-j') + 1] == chain:
                        return result(1, stderr='iptables: Too many links.\n')
            del self.rules[chain]
            self.user_chains.remove(chain)
            return result()

        raise AssertionError(f'unsupported iptables call: {line}')


@pytest.fixture()
def iptables(monkeypatch):
    """Replace iptables with an in-memory mangle table."""
    fake = FakeIptables()
    monkeypatch.setattr('dhcpfabrik.platforms.iptables._commands.subprocess.run', fake)
    return fake


@pytest.fixture()
def datapath(tmp_path):
    path = tmp_path / 'opennebula-nfdhcpd'
    path.mkdir()
    return path


@pytest.fixture()
def config(tmp_path, datapath):
    """Driver configuration pointing at temporary paths."""
    return DriverDefaults(
        binding_files_datapath=str(datapath),
        lock_file=str(tmp_path / 'vnm.lock'),
        commands={'iptables': 'iptables'},
    )


_NIC_DEFAULTS = {
    'NETWORK_ADDRESS': '10.0.0.0',
    'NETWORK_MASK': '255.255.255.0',
    'GATEWAY': '10.0.0.254',
    'DNS': '8.8.8.8',
    'NFDHCPD': 'YES',
}


def make_nic(nic_id: int, **fields) -> dict:
    """Return the template elements of NIC *nic_id* (tap<id>, 10.0.0.<id+1>)."""
    nic = {
        'NIC_ID': str(nic_id),
        'TARGET': f'tap{nic_id}',
        'MAC': f'02:00:0a:00:00:{nic_id + 1:02x}',
        'IP': f'10.0.0.{nic_id + 1}',
        **_NIC_DEFAULTS,
    }
    nic.update({k: v for k, v in fields.items() if v is not None})
    return {k: v for k, v in nic.items() if v != ''}


def make_vm_xml(vm_id: str = '7', nics: list[dict] | None = None) -> str:
    """Build a minimal OpenNebula ``<VM>`` document."""
    if nics is None:
        nics = [make_nic(0)]
    parts = [f'<VM><ID>{vm_id}</ID><NAME>one-{vm_id}</NAME><TEMPLATE>']
    for nic in nics:
        parts.append('<NIC>')
        parts += [f'<{k}>{escape(v)}</{k}>' for k, v in nic.items()]
        parts.append('</NIC>')
    parts.append('</TEMPLATE></VM>')
    return ''.join(parts)
