# SPDX-License-Identifier: MIT
"""Host detection and tool discovery."""
