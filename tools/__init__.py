# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool wrappers.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between MCP clients and core/.  It:
#     1. Declares each tool's name, description and typed parameters
#     2. Hands the supplied arguments to core.dispatcher.Dispatcher
#     3. Turns the OperationResult into an MCP text response (or isError)
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT validate business rules (that's core/validation.py)
#   - They do NOT build HTTP requests (that's core/builder.py)
#   - They do NOT format results (that's core/normalizer.py)
# =============================================================================
