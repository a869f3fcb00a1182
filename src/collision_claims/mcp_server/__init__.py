"""MCP server exposing claim tools over stdio."""
