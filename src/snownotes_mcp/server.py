"""
MCP Server for snownotes.

Exposes the note store as tools for MCP clients.
"""

import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from snownotes.config import load_config
from snownotes.errors import AmbiguousIdError, NotFoundError, PersistenceError
from snownotes.log import setup_logging
from snownotes.store import NoteStore, open_store
from snownotes.surfacing import Colors, format_id, format_note, format_note_list

logger = logging.getLogger("snownotes.mcp")

# Create MCP server
server = Server("snownotes")

_store: NoteStore | None = None


def get_store() -> NoteStore:
    """Open the note store on first use."""
    global _store
    if _store is None:
        _store = open_store()
    return _store


def set_store(store: NoteStore | None) -> None:
    """Replace the store used by the tools."""
    global _store
    _store = store


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="snownotes_list",
            description="List all notes, most recently modified first.",
            inputSchema={
                "type": "object",
                "properties": {
                    "show_created": {
                        "type": "boolean",
                        "description": "Include creation dates (default: false)",
                        "default": False,
                    },
                },
            },
        ),
        Tool(
            name="snownotes_get",
            description="Read a single note by ID (or unique ID prefix).",
            inputSchema={
                "type": "object",
                "properties": {
                    "note_id": {
                        "type": "string",
                        "description": "The note ID",
                    },
                },
                "required": ["note_id"],
            },
        ),
        Tool(
            name="snownotes_add",
            description="Create a note. Omitted fields get placeholder text.",
            inputSchema={
                "type": "object",
                "properties": {
                    "title": {
                        "type": "string",
                        "description": "Note title",
                    },
                    "body": {
                        "type": "string",
                        "description": "Note text",
                    },
                },
            },
        ),
        Tool(
            name="snownotes_edit",
            description="Change the title and/or body of a note.",
            inputSchema={
                "type": "object",
                "properties": {
                    "note_id": {
                        "type": "string",
                        "description": "The note ID",
                    },
                    "title": {
                        "type": "string",
                        "description": "New title (optional)",
                    },
                    "body": {
                        "type": "string",
                        "description": "New body (optional)",
                    },
                },
                "required": ["note_id"],
            },
        ),
        Tool(
            name="snownotes_delete",
            description="Delete one or more notes permanently.",
            inputSchema={
                "type": "object",
                "properties": {
                    "note_ids": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "IDs of the notes to delete",
                    },
                },
                "required": ["note_ids"],
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "snownotes_list":
            return await tool_list(arguments)
        elif name == "snownotes_get":
            return await tool_get(arguments)
        elif name == "snownotes_add":
            return await tool_add(arguments)
        elif name == "snownotes_edit":
            return await tool_edit(arguments)
        elif name == "snownotes_delete":
            return await tool_delete(arguments)
        else:
            return _text(f"Unknown tool: {name}")
    except NotFoundError as e:
        return _text(str(e))
    except PersistenceError as e:
        logger.warning("Tool %s could not persist: %s", name, e)
        return _text(f"Error: could not save ({e})")
    except AmbiguousIdError as e:
        return _text(f"Error: {e}")


async def tool_list(args: dict) -> list[TextContent]:
    """List notes."""
    store = get_store()
    return _text(format_note_list(store.list(), show_created=bool(args.get("show_created", False))))


async def tool_get(args: dict) -> list[TextContent]:
    """Read one note."""
    note_id = args.get("note_id", "").strip()
    if not note_id:
        return _text("Error: No note_id provided")

    store = get_store()
    return _text(format_note(store.get(store.resolve(note_id))))


async def tool_add(args: dict) -> list[TextContent]:
    """Create a note."""
    store = get_store()
    note = store.create(args.get("title"), args.get("body"))
    return _text(f"Added: {note.id}")


async def tool_edit(args: dict) -> list[TextContent]:
    """Edit a note."""
    note_id = args.get("note_id", "").strip()
    if not note_id:
        return _text("Error: No note_id provided")

    title = args.get("title")
    body = args.get("body")
    if title is None and body is None:
        return _text("Error: Provide title and/or body")

    store = get_store()
    full_id = store.resolve(note_id)
    before = store.get(full_id)
    note = store.update(full_id, title=title, body=body)

    if note is before:
        return _text(f"No changes: {format_id(full_id)}")
    return _text(f"Updated: {format_id(full_id)}")


async def tool_delete(args: dict) -> list[TextContent]:
    """Delete notes."""
    note_ids = [nid.strip() for nid in args.get("note_ids", []) if nid.strip()]
    if not note_ids:
        return _text("Error: No note_ids provided")

    store = get_store()
    resolved = []
    missing = []
    for note_id in note_ids:
        try:
            resolved.append(store.resolve(note_id))
        except NotFoundError:
            missing.append(note_id)

    resolved = list(dict.fromkeys(resolved))
    if resolved:
        store.delete_many(resolved)

    lines = [f"Deleted {len(resolved)} note(s)"]
    if missing:
        lines.append(str(NotFoundError(missing)))
    return _text("\n".join(lines))


def configure() -> dict:
    """Load config and set up logging, as the CLI does. Output is never colored."""
    config = load_config()
    setup_logging(config["logging"]["level"])
    Colors.configured = False
    return config


async def main():
    """Run the MCP server."""
    config = configure()
    if _store is None:
        set_store(open_store(config))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run() -> None:
    """Console script entry point."""
    import asyncio
    asyncio.run(main())


if __name__ == "__main__":
    run()
