"""MCP server exposing the manual Hub override tools."""
