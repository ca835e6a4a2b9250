"""Lootbox - discover and cache capabilities from a fleet of MCP servers.

Connects to the servers named in an ``.mcp.json`` file over stdio, streamable
HTTP or SSE, tracks which of them are reachable, and caches each server's tool
and resource schemas for downstream consumers.
"""

__version__ = "0.1.0"
