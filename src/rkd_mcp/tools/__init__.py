"""MCP tool definitions for RKD MCP Server."""
