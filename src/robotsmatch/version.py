# SPDX-License-Identifier: BSD-3-Clause

"""Version of the installed C{robotsmatch} distribution."""

from __future__ import annotations

import importlib.metadata

VERSION_STRING = importlib.metadata.version("robotsmatch")
