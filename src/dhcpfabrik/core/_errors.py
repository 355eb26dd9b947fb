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

"""Exception types raised by the driver and its helpers."""

from __future__ import annotations


class DhcpFabricError(Exception):
    """Base class for all errors reported to the host driver framework."""


class CommandError(DhcpFabricError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, output: str = '') -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        msg = f"Command '{command}' failed with exit status {returncode}"
        if output.strip():
            msg += f': {output.strip()}'
        super().__init__(msg)


class LockError(DhcpFabricError):
    """The host-wide driver lock could not be acquired."""


class DeactivationError(DhcpFabricError):
    """One or more NICs could not be fully deactivated.

    Deactivation is best effort: every step of every NIC is attempted,
    and the collected failures (``CommandError`` from iptables,
    ``OSError`` from removing binding files) are reported together
    afterwards.
    """

    def __init__(self, errors: list[CommandError | OSError]) -> None:
        self.errors = list(errors)
        first = self.errors[0] if self.errors else None
        msg = f'{len(self.errors)} step(s) failed during deactivation'
        if first is not None:
            msg += f', first: {first}'
        super().__init__(msg)
