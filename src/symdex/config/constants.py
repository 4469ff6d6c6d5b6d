"""Configuration constants.

Values here are wire-format contracts shared with SCIP consumers and must NOT be
user-configurable. For configurable values, see models.py.
"""

# =============================================================================
# Symbol String Grammar
# =============================================================================

LOCAL_SYMBOL_PREFIX = "local "
"""Scope marker of file-local symbols, followed by the decimal local index."""

CONSTRUCTOR_NAME = "<constructor>"
"""Method descriptor name of every explicit class constructor."""

COUNTER_START = 0
"""First value handed out by a fresh Counter."""

# =============================================================================
# Occurrence Roles
# =============================================================================

SYMBOL_ROLE_DEFINITION = 0x1
"""Bit 0 of Occurrence.symbol_roles."""

# =============================================================================
# Tool Metadata
# =============================================================================

TOOL_NAME = "symdex"
TOOL_VERSION = "0.1.0"
