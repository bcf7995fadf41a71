# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Static catalog data shipped with pyverify."""

from .builtin_macros import BUILTIN_CATALOG

__all__ = ["BUILTIN_CATALOG"]
