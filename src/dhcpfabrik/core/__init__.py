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

from ._config import DEFAULT_CONFIG_FILE, config_from_dict, load_config
from ._errors import CommandError, DeactivationError, DhcpFabricError, LockError
from ._vm import Nic, VirtualMachine
from ._xml_reader import decode_vm_template, read_vm_template, read_vm_xml

__all__ = [
    'DEFAULT_CONFIG_FILE',
    'CommandError',
    'DeactivationError',
    'DhcpFabricError',
    'LockError',
    'Nic',
    'VirtualMachine',
    'config_from_dict',
    'decode_vm_template',
    'load_config',
    'read_vm_template',
    'read_vm_xml',
]
