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

"""Legacy key migration for backward compatibility.

The OpenNebula nfdhcpd VNM driver was configured by editing class constants.
Configuration files written by people carrying those settings over
tend to use the constant names, so they are mapped to the canonical
keys on load.
"""

from dhcpfabrik.core.options._keys import DriverOption

# Format: {'legacy_key': CanonicalKey}
LEGACY_KEY_MAP: dict[str, str] = {
    'GLOBAL_CHAIN': DriverOption.GLOBAL_CHAIN,
    'NFQUEUE_QUEUE_NUM': DriverOption.NFQUEUE_QUEUE_NUM,
    'BINDING_FILES_DATAPATH': DriverOption.BINDING_FILES_DATAPATH,
    'XPATH_FILTER': DriverOption.XPATH_FILTER,
}


def migrate_options(options: dict | None) -> dict:
    """Migrate legacy option keys to canonical keys.

    Args:
        options: The raw options dict from the configuration file.

    Returns:
        A new dict with legacy keys replaced by canonical keys.
        If both a legacy and a canonical key are present, the
        canonical one wins.
    """
    if not options:
        return {}

    result = {}
    for key, value in options.items():
        canonical_key = LEGACY_KEY_MAP.get(key)
        if canonical_key is None:
            result[key] = value
        elif canonical_key not in options:
            result[canonical_key] = value

    return result
