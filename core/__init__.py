# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL request/response logic for the kweenkl adapter.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any protocol framework.
#   Every module here can be imported and exercised in a bare Python REPL
#   (or a test) with a stubbed HTTP transport and no MCP session at all.
#
# THE PIPELINE (one tool call, start to finish):
#   dispatcher  →  validation  →  builder  →  transport  →  normalizer
#
#   Each stage is a small module with one job.  The dispatcher is the only
#   one that knows about the others.
# =============================================================================
