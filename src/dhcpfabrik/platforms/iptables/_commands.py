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

"""Ordered batch of external commands, executed fail-fast."""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import NamedTuple

from dhcpfabrik.core._errors import CommandError
from dhcpfabrik.core.options import DEFAULT_COMMANDS

logger = logging.getLogger(__name__)


class Command(NamedTuple):
    tool: str
    args: str


class Commands:
    """Accumulates ``(tool, args)`` pairs and runs them in order.

    *command_table* maps a tool key such as ``iptables`` to the command
    prefix actually executed, e.g. ``sudo -n iptables --wait``.
    """

    def __init__(self, command_table: dict[str, str] | None = None) -> None:
        self._table = dict(DEFAULT_COMMANDS if command_table is None else command_table)
        self._commands: list[Command] = []

    def add(self, tool: str, args: str) -> None:
        if tool not in self._table:
            raise ValueError(f'Unknown tool: {tool}')
        self._commands.append(Command(tool, args))

    def __bool__(self) -> bool:
        return bool(self._commands)

    def _render(self, cmd: Command) -> str:
        return f'{self._table[cmd.tool]} {cmd.args}'.strip()

    def run(self) -> str:
        """Run all commands and return their concatenated stdout.

        Stops at the first command that exits non-zero and raises
        :class:`CommandError` for it. Later commands are not run.
        """
        output = []
        for cmd in self._commands:
            line = self._render(cmd)
            argv = shlex.split(self._table[cmd.tool]) + shlex.split(cmd.args)
            logger.debug('Running: %s', line)
            try:
                proc = subprocess.run(
                    argv,
                    capture_output=True,
                    text=True,
                    check=False,
                )
            except OSError as e:
                raise CommandError(line, 127, str(e)) from e

            if proc.returncode != 0:
                raise CommandError(
                    line, proc.returncode, (proc.stdout or '') + (proc.stderr or '')
                )
            output.append(proc.stdout or '')

        return ''.join(output)
