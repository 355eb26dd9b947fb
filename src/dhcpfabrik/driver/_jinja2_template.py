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

"""Jinja2 templates shipped in ``resources/templates/<driver>/``.

nfdhcpd parses the files rendered from these templates, so only the
packaged templates are used. There is no per-user override.
"""

from __future__ import annotations

import functools

import jinja2


@functools.cache
def _get_environment(driver: str) -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.PackageLoader('dhcpfabrik', f'resources/templates/{driver}'),
        undefined=jinja2.StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class Jinja2Template:
    """A packaged template of one driver."""

    def __init__(self, driver: str, template_name: str) -> None:
        self._template = _get_environment(driver).get_template(template_name)

    def render(self, context: dict) -> str:
        return self._template.render(context)
