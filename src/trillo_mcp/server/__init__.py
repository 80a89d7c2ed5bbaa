"""MCP server - tool-call adapter over the service layer."""
