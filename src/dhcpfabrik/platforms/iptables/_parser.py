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

"""Parser for ``iptables -S`` output.

The dump is line oriented::

    -P PREROUTING ACCEPT
    -N one-7-0-nfdhcpd
    -A opennebula -m physdev --physdev-in tap0 -j one-7-0-nfdhcpd

``-N`` lines declare user-defined chains, ``-A`` lines list the rules
of a chain in order. Lines that do not fit this grammar are skipped,
since the exact output differs between iptables versions.
"""

from __future__ import annotations

import dataclasses
import logging
import shlex

logger = logging.getLogger(__name__)

_TARGET_FLAGS = frozenset({'-j', '--jump', '-g', '--goto'})


@dataclasses.dataclass(frozen=True)
class Rule:
    """One rule of a chain.

    ``spec`` is the verbatim text following ``-A`` in the dump, so the
    rule can be deleted again with ``-D <spec>``.
    """

    table: str
    chain: str
    match: tuple[str, ...]
    target: str
    target_args: tuple[str, ...]
    spec: str

    @property
    def line(self) -> str:
        return f'-A {self.spec}'

    def references(self, chain: str) -> bool:
        """Whether this rule lives in *chain* or jumps to it."""
        return chain in (self.chain, self.target)


@dataclasses.dataclass(frozen=True)
class TableSnapshot:
    """Chains and rules of one table at the time of the dump."""

    table: str
    chains: frozenset[str] = frozenset()
    rules: tuple[Rule, ...] = ()

    def has_chain(self, chain: str) -> bool:
        return chain in self.chains

    def rules_in(self, chain: str) -> tuple[Rule, ...]:
        return tuple(rule for rule in self.rules if rule.chain == chain)


def parse_rule(spec: str, table: str) -> Rule | None:
    """Parse the part of an ``-A`` line after the flag.

    Returns None if *spec* cannot be tokenized.
    """
    try:
        tokens = shlex.split(spec)
    except ValueError:
        return None
    if not tokens:
        return None

    chain, rest = tokens[0], tokens[1:]
    target = ''
    target_args: list[str] = []
    match = rest
    for i, token in enumerate(rest):
        if token in _TARGET_FLAGS and i + 1 < len(rest):
            match = rest[:i]
            target = rest[i + 1]
            target_args = rest[i + 2 :]
            break

    return Rule(
        table=table,
        chain=chain,
        match=tuple(match),
        target=target,
        target_args=tuple(target_args),
        spec=spec,
    )


def parse_dump(text: str, table: str) -> TableSnapshot:
    """Parse the complete ``-S`` output of *table*."""
    chains: set[str] = set()
    rules: list[Rule] = []

    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith('-P '):
            continue

        flag, _, rest = line.partition(' ')
        rest = rest.strip()

        if flag == '-N' and rest and ' ' not in rest:
            chains.add(rest)
            continue

        if flag == '-A':
            rule = parse_rule(rest, table)
            if rule is not None:
                rules.append(rule)
                continue

        logger.debug(
            'Skipping unrecognized line %d of %s dump: %s', lineno, table, line
        )

    return TableSnapshot(table=table, chains=frozenset(chains), rules=tuple(rules))
