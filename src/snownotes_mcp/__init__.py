"""MCP tool server for snownotes."""
