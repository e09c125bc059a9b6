"""Core business objects: models and CSV reading/writing.

This module is framework-agnostic. It has no dependency on the hook
registry, the database, or the MCP server.
"""
