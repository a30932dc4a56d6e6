# SPDX-License-Identifier: MIT
"""Core of bscf: configuration expansion, command generation, caching, building."""
