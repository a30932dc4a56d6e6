# SPDX-License-Identifier: MIT
"""Toolchain descriptor types."""
