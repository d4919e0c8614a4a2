"""
snownotes: a small local note-taking app.

Provides:
- A note store with create/list/edit/delete and timestamp tracking
- SQLite persistence (or an in-memory store for previews)
- A terminal UI and MCP tools on top of the store
"""

__version__ = "0.1.0"
