"""Character creator backend: storage, exports, HTTP API and MCP tools."""
