"""MemoryKeeper - birthdays, anniversaries and other recurring dates.

Records are kept in a local key-value table, listed by how soon they
come round, exported as CSV/TXT, and can get an AI-drafted greeting.

Components:
- config: Application settings
- recurrence: Next-occurrence and elapsed-year arithmetic
- view: Filtered, urgency-ordered view of the record set
- schemas: Record entity and Pydantic request/response schemas
- database: SQLAlchemy key-value table and session management
- crud: Key-value reads/writes and record set encoding
- store: Session-owned record store (add/update/remove/view)
- exporters: CSV and TXT exports
- wish_generator: Greeting drafts via the Gemini API
- api_server: FastAPI REST API (MCP tools mounted under /mcp)
- mcp_server: MCP server with tools for AI agents

Usage:
    python main.py
    python mcp_server.py   # standalone MCP (stdio or sse)
"""

__version__ = "1.0.0"
__author__ = "Mayur"
__description__ = "Recurring personal date tracker with MCP integration"
