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

"""nfdhcpd driver: per-NIC DHCP interception chains in the mangle table.

Layout of the table once two NICs are active::

    PREROUTING
      -j opennebula
    opennebula
      -m physdev --physdev-in tap1 -j one-7-1-nfdhcpd
      -m physdev --physdev-in tap0 -j one-7-0-nfdhcpd
      -j ACCEPT
    one-7-0-nfdhcpd
      -m physdev --physdev-in tap0 -p udp --dport bootps -j NFQUEUE --queue-num 42

The global chain is created on first use and never removed. Per-NIC
chains, their linking rules, and the binding files come and go with
the NICs. The table is shared by every VM on the host and iptables has
no transactions, so each entry point reads the current state afresh
and runs under a host-wide file lock.
"""

from __future__ import annotations

import contextlib
import dataclasses
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import filelock

from dhcpfabrik.core import (
    CommandError,
    DeactivationError,
    LockError,
    read_vm_template,
)
from dhcpfabrik.core.options import DriverDefaults
from dhcpfabrik.driver._binding_file import BindingFile
from dhcpfabrik.platforms.iptables import (
    Commands,
    Rule,
    RuleStore,
    TableSnapshot,
    get_binding_file_name,
    get_nic_chain_name,
    parse_nic_chain_name,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from dhcpfabrik.core import Nic, VirtualMachine

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class NicStatus:
    nic_id: str
    chain: str
    chain_present: bool
    linked: bool
    binding_file_present: bool

    @property
    def active(self) -> bool:
        return self.chain_present and self.linked and self.binding_file_present


class NfdhcpdDriver:
    """Activates and deactivates nfdhcpd for the managed NICs of a VM."""

    DRIVER = 'NFDHCPD'

    def __init__(
        self,
        vm: VirtualMachine,
        config: DriverDefaults | None = None,
    ) -> None:
        self.vm = vm
        self.config = config if config is not None else DriverDefaults()
        self.rule_store = RuleStore(self.config.table, self.config.commands)

    @classmethod
    def from_template(
        cls,
        vm_64: str | bytes,
        config: DriverDefaults | None = None,
        xpath_filter: str | None = None,
    ) -> NfdhcpdDriver:
        """Create a driver from a base64 encoded VM template."""
        config = config if config is not None else DriverDefaults()
        vm = read_vm_template(vm_64, xpath_filter or config.xpath_filter)
        return cls(vm, config)

    # -- Locking --

    @contextlib.contextmanager
    def lock(self) -> Iterator[None]:
        """Hold the host-wide driver lock for the duration of the block."""
        if not self.config.locking:
            yield
            return

        lock = filelock.FileLock(
            self.config.lock_file, timeout=self.config.lock_timeout
        )
        try:
            lock.acquire()
        except filelock.Timeout as e:
            raise LockError(
                f'Timed out after {self.config.lock_timeout}s waiting for '
                f'lock {self.config.lock_file}'
            ) from e
        except OSError as e:
            raise LockError(f'Cannot acquire lock {self.config.lock_file}: {e}') from e

        try:
            yield
        finally:
            lock.release()

    # -- Naming --

    def chain_name(self, nic: Nic) -> str:
        return get_nic_chain_name(
            self.config.chain_prefix,
            self.vm.vm_id,
            nic.nic_id,
            self.config.chain_suffix,
        )

    def binding_file_path(self, nic: Nic) -> Path:
        name = get_binding_file_name(
            self.config.chain_prefix, self.vm.vm_id, nic.nic_id
        )
        return Path(self.config.binding_files_datapath) / name

    def eligible_nics(self, target_nic_id: str | None = None) -> list[Nic]:
        """Return the NICs an activate/deactivate call operates on.

        A NIC hot-plug event restricts the call to the attached NIC,
        either given explicitly or taken from the VM template.
        """
        nic_id = target_nic_id if target_nic_id is not None else self.vm.attach_nic_id
        if nic_id is None:
            return list(self.vm.nics)
        nic = self.vm.get_nic(str(nic_id))
        return [nic] if nic is not None else []

    def owned_chains(self, snapshot: TableSnapshot) -> list[str]:
        """Return all per-NIC chains in *snapshot* that belong to this VM."""
        owned = []
        for chain in snapshot.chains:
            ids = parse_nic_chain_name(
                chain, self.config.chain_prefix, self.config.chain_suffix
            )
            if ids is not None and ids[0] == self.vm.vm_id:
                owned.append(chain)
        return sorted(owned)

    # -- Helpers --

    def _commands(self) -> Commands:
        return Commands(self.config.commands)

    def _iptables(self, commands: Commands, args: str) -> None:
        commands.add('iptables', f'-t {self.config.table} {args}')

    def _link_rules(self, snapshot: TableSnapshot, chain: str) -> list[Rule]:
        """Return the rules of the global chain that jump to *chain*."""
        rules = snapshot.rules_in(self.config.global_chain)
        if self.config.legacy_rule_match:
            return [rule for rule in rules if chain in rule.spec]
        return [rule for rule in rules if rule.references(chain)]

    def _bootstrap(self, snapshot: TableSnapshot) -> None:
        """Create the global chain, its PREROUTING jump, and its final ACCEPT.

        Each part is checked on its own, so a bootstrap interrupted
        halfway is completed by the next run.
        """
        global_chain = self.config.global_chain
        commands = self._commands()

        if not snapshot.has_chain(global_chain):
            self._iptables(commands, f'-N {global_chain}')

        if not any(
            rule.target == global_chain for rule in snapshot.rules_in('PREROUTING')
        ):
            self._iptables(commands, f'-A PREROUTING -j {global_chain}')

        if not any(
            rule.target == 'ACCEPT' and not rule.match
            for rule in snapshot.rules_in(global_chain)
        ):
            self._iptables(commands, f'-A {global_chain} -j ACCEPT')

        if commands:
            logger.info('Bootstrapping global chain %s', global_chain)
            commands.run()

    # -- Entry points --

    def activate(self, target_nic_id: str | None = None) -> None:
        """Set up the binding file and chains for every eligible NIC.

        Aborts on the first failing command. Running it again is safe:
        leftovers of an interrupted run are flushed and relinked.
        """
        with self.lock():
            snapshot = self.rule_store.snapshot()
            self._bootstrap(snapshot)

            for nic in self.eligible_nics(target_nic_id):
                self._activate_nic(nic, snapshot)

    def _activate_nic(self, nic: Nic, snapshot: TableSnapshot) -> None:
        logger.info(
            'Activating nfdhcpd on VM %s NIC %s (%s, %s)',
            self.vm.vm_id,
            nic.nic_id,
            nic.tap,
            nic.mac,
        )

        binding_file = BindingFile(
            hostname=f'{self.config.chain_prefix}-{self.vm.vm_id}',
            indev=nic.tap,
            mac=nic.mac,
            ip=nic.ip,
            network_address=nic.network_address,
            network_mask=nic.network_mask,
            gateway=nic.gateway,
            nameservers=nic.dns,
            mtu=self.config.mtu,
        )
        binding_file.save(self.binding_file_path(nic))

        chain = self.chain_name(nic)
        commands = self._commands()

        if snapshot.has_chain(chain):
            logger.info('Chain %s left over from an earlier run, flushing it', chain)
            self._iptables(commands, f'-F {chain}')
        else:
            self._iptables(commands, f'-N {chain}')

        for rule in self._link_rules(snapshot, chain):
            self._iptables(commands, f'-D {rule.spec}')

        self._iptables(
            commands,
            f'-A {chain} -m physdev --physdev-in {nic.tap} -p udp --dport bootps '
            f'-j NFQUEUE --queue-num {self.config.nfqueue_queue_num}',
        )
        self._iptables(
            commands,
            f'-I {self.config.global_chain} -m physdev --physdev-in {nic.tap} '
            f'-j {chain}',
        )

        commands.run()

    def deactivate(self, target_nic_id: str | None = None) -> None:
        """Remove chains, linking rules, and binding files of eligible NICs.

        Missing chains and files are skipped. A failing step does not stop
        the remaining steps or NICs; all failures are raised together as
        :class:`DeactivationError` at the end.
        """
        with self.lock():
            snapshot = self.rule_store.snapshot()
            errors: list[CommandError | OSError] = []

            for nic in self.eligible_nics(target_nic_id):
                for e in self._deactivate_nic(nic, snapshot):
                    logger.error(
                        'Deactivating VM %s NIC %s failed: %s',
                        self.vm.vm_id,
                        nic.nic_id,
                        e,
                    )
                    errors.append(e)

            if errors:
                raise DeactivationError(errors)

    def _deactivate_nic(
        self, nic: Nic, snapshot: TableSnapshot
    ) -> list[CommandError | OSError]:
        """Tear down one NIC and return what failed.

        Each linking rule is deleted on its own. ``-X`` only depends on
        the ``-F`` of the same chain.
        """
        logger.info('Deactivating nfdhcpd on VM %s NIC %s', self.vm.vm_id, nic.nic_id)

        chain = self.chain_name(nic)
        batches = []

        for rule in self._link_rules(snapshot, chain):
            commands = self._commands()
            self._iptables(commands, f'-D {rule.spec}')
            batches.append(commands)

        if snapshot.has_chain(chain):
            commands = self._commands()
            self._iptables(commands, f'-F {chain}')
            self._iptables(commands, f'-X {chain}')
            batches.append(commands)

        errors: list[CommandError | OSError] = []
        for commands in batches:
            try:
                commands.run()
            except CommandError as e:
                errors.append(e)

        try:
            self.binding_file_path(nic).unlink(missing_ok=True)
        except OSError as e:
            errors.append(e)

        return errors

    def status(
        self,
        target_nic_id: str | None = None,
        snapshot: TableSnapshot | None = None,
    ) -> list[NicStatus]:
        """Report the current state of every eligible NIC.

        Pass *snapshot* to evaluate several queries against the same dump.
        """
        if snapshot is None:
            snapshot = self.rule_store.snapshot()
        result = []
        for nic in self.eligible_nics(target_nic_id):
            chain = self.chain_name(nic)
            result.append(
                NicStatus(
                    nic_id=nic.nic_id,
                    chain=chain,
                    chain_present=snapshot.has_chain(chain),
                    linked=bool(self._link_rules(snapshot, chain)),
                    binding_file_present=self.binding_file_path(nic).exists(),
                )
            )
        return result
