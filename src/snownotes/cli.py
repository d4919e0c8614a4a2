"""
CLI for snownotes.

Minimal CLI using stdlib argument handling for fast startup.
Subcommands are imported lazily to avoid startup overhead.

Usage:
    snownotes list                  # List notes
    snownotes add "Title" "Body"    # Add a note
    snownotes --help                # Show help
"""

import sys

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PERSISTENCE = 2

SAMPLE_BODY = "Generated for testing. Edit or delete me."


def print_help() -> None:
    """Print help message."""
    print("""snownotes - a small local note-taking app

Commands:
    snownotes list [--created]          List notes (newest edit first)
    snownotes show <id>                 Show a note
    snownotes add [title] [body]        Add a note (placeholders if omitted)
    snownotes edit <id> [--title T] [--body B]
                                        Edit a note (--body - reads stdin)
    snownotes rm <id> [<id>...]         Delete notes
    snownotes stats                     Show database statistics
    snownotes health                    Check configuration and storage
    snownotes settings                  Show display preferences
    snownotes hints [--reset]           Show or reset onboarding hint state

Debug:
    snownotes debug generate [N]        Add N sample notes (default 5)
    snownotes debug reset [--yes]       Delete ALL notes

Options:
    snownotes --help, -h                Show this help
    snownotes --version, -v             Show version

IDs can be shortened to any unique prefix (the list shows 8 characters).

Examples:
    snownotes add "Groceries" "Milk, eggs"
    snownotes edit 3f9a1c2e --body "Milk, eggs, bread"
    snownotes list --created
    snownotes rm 3f9a1c2e""")


def print_version() -> None:
    """Print version."""
    from snownotes import __version__
    print(f"snownotes {__version__}")


def _error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _load():
    """
    Load config, set up logging and colors, and open the store.

    Returns (config, store).
    """
    from snownotes.config import load_config
    from snownotes.log import setup_logging
    from snownotes.store import open_store
    from snownotes.surfacing import Colors

    config = load_config()
    setup_logging(config["logging"]["level"])
    Colors.configured = bool(config["display"].get("color", True))
    return config, open_store(config)


def _hint_tracker(config, store):
    from snownotes.hints import HintTracker

    tracker = HintTracker(store.backend, enabled=bool(config["hints"].get("enabled", True)))
    if config["hints"].get("reset_on_launch"):
        tracker.reset()
    return tracker


def _show_hints(config, store) -> None:
    """Print due editor hints and record that they were shown."""
    from snownotes.hints import format_hint

    tracker = _hint_tracker(config, store)
    for hint in tracker.eligible():
        print(format_hint(hint), file=sys.stderr)
        tracker.mark_shown(hint.id)


def _run(command, *args) -> int:
    """Run a command body, mapping store errors to exit codes."""
    from snownotes.config import ConfigError
    from snownotes.errors import AmbiguousIdError, NotFoundError, PersistenceError

    try:
        return command(*args)
    except NotFoundError as e:
        _error(str(e))
        return EXIT_ERROR
    except PersistenceError as e:
        _error(f"Could not save: {e}")
        return EXIT_PERSISTENCE
    except (ConfigError, AmbiguousIdError) as e:
        _error(str(e))
        return EXIT_ERROR


def cmd_list(args: list[str]) -> int:
    """List notes."""
    from snownotes.surfacing import format_note_list

    config, store = _load()
    show_created = "--created" in args or "-c" in args or bool(config["display"]["show_created"])

    print(format_note_list(store.list(), show_created=show_created))
    return EXIT_OK


def cmd_show(args: list[str]) -> int:
    """Show a single note."""
    from snownotes.surfacing import format_note

    if not args:
        print("Usage: snownotes show <id>", file=sys.stderr)
        return EXIT_ERROR

    config, store = _load()
    note = store.get(store.resolve(args[0]))
    print(format_note(note))
    _show_hints(config, store)
    return EXIT_OK


def cmd_add(args: list[str]) -> int:
    """Add a note."""
    from snownotes.surfacing import format_id

    config, store = _load()
    title = args[0] if len(args) > 0 else None
    body = " ".join(args[1:]) if len(args) > 1 else None

    note = store.create(title, body)
    print(f"Added: {format_id(note.id)}  {note.title}")
    _show_hints(config, store)
    return EXIT_OK


def cmd_edit(args: list[str]) -> int:
    """Edit a note's title and/or body."""
    from snownotes.hints import EDIT_BODY, EDIT_TITLE
    from snownotes.surfacing import format_id

    if not args:
        print("Usage: snownotes edit <id> [--title T] [--body B]", file=sys.stderr)
        return EXIT_ERROR

    title = None
    body = None

    # Parse arguments
    i = 1
    while i < len(args):
        arg = args[i]
        if arg in ("--title", "-t") and i + 1 < len(args):
            title = args[i + 1]
            i += 2
        elif arg in ("--body", "-b") and i + 1 < len(args):
            body = args[i + 1]
            i += 2
        else:
            i += 1

    if body == "-":
        body = sys.stdin.read()

    if title is None and body is None:
        print("Nothing to change. Pass --title and/or --body.", file=sys.stderr)
        return EXIT_ERROR

    config, store = _load()
    note_id = store.resolve(args[0])
    before = store.get(note_id)
    note = store.update(note_id, title=title, body=body)

    tracker = _hint_tracker(config, store)
    if title is not None:
        tracker.invalidate(EDIT_TITLE.id)
    if body is not None:
        tracker.invalidate(EDIT_BODY.id)

    if note is before:
        print(f"No changes: {format_id(note_id)}")
    else:
        print(f"Updated: {format_id(note_id)}  {note.title}")
    return EXIT_OK


def cmd_rm(args: list[str]) -> int:
    """Delete one or more notes."""
    from snownotes.errors import NotFoundError
    from snownotes.surfacing import format_id

    if not args:
        print("Usage: snownotes rm <id> [<id>...]", file=sys.stderr)
        return EXIT_ERROR

    config, store = _load()

    note_ids = []
    missing = []
    for raw in args:
        try:
            note_ids.append(store.resolve(raw))
        except NotFoundError:
            missing.append(raw)

    if note_ids:
        store.delete_many(note_ids)
        for note_id in dict.fromkeys(note_ids):
            print(f"Deleted: {format_id(note_id)}")

    if missing:
        raise NotFoundError(missing)
    return EXIT_OK


def cmd_stats() -> int:
    """Show database statistics."""
    from snownotes.surfacing import format_stats

    config, store = _load()
    print(format_stats(store.backend.get_stats()))
    return EXIT_OK


def cmd_health() -> int:
    """Show health report."""
    from snownotes.health import format_health_report, run_health_check

    print(format_health_report(run_health_check()))
    return EXIT_OK


def cmd_settings() -> int:
    """Show effective display and hint preferences."""
    from snownotes.config import get_config_path, load_config

    config = load_config()
    print("snownotes Settings")
    print("-" * 30)
    print(f"Config file: {get_config_path()}")
    print(f"Storage:     {config['store']['backend']} ({config['snownotes']['home']})")
    print(f"Display creation date on list: {'on' if config['display']['show_created'] else 'off'}")
    print(f"Colors:      {'on' if config['display']['color'] else 'off'}")
    print(f"Hints:       {'on' if config['hints']['enabled'] else 'off'}")
    print("\nChange these in the [display] and [hints] sections of the config file.")
    return EXIT_OK


def cmd_hints(args: list[str]) -> int:
    """Show or reset hint state."""
    from snownotes.hints import HINTS

    config, store = _load()
    tracker = _hint_tracker(config, store)

    if "--reset" in args:
        tracker.reset()
        print("Hints reset. They will show again.")
        return EXIT_OK

    for hint_id, state in tracker.status().items():
        hint = HINTS[hint_id]
        due = "due" if tracker.should_show(hint_id) else "done"
        limit = hint.max_display_count if hint.max_display_count is not None else "∞"
        print(f"{hint_id:12}  {due:4}  shown {state['display_count']}/{limit}  {hint.title}")
    return EXIT_OK


def cmd_debug(args: list[str]) -> int:
    """Debug helpers: generate sample notes, wipe all data."""
    if not args or args[0] not in ("generate", "reset"):
        print("Usage: snownotes debug generate [N] | debug reset [--yes]", file=sys.stderr)
        return EXIT_ERROR

    if args[0] == "generate":
        count = 5
        if len(args) > 1:
            try:
                count = int(args[1])
            except ValueError:
                _error(f"Not a number: {args[1]}")
                return EXIT_ERROR
        if count < 1:
            _error("Count must be at least 1")
            return EXIT_ERROR

        config, store = _load()
        start = len(store) + 1
        for n in range(start, start + count):
            store.create(f"Sample Note {n}", SAMPLE_BODY)
        print(f"Generated {count} notes.")
        return EXIT_OK

    # reset
    if "--yes" not in args:
        if not sys.stdin.isatty():
            _error("Refusing to delete all notes without --yes")
            return EXIT_ERROR
        answer = input("Delete ALL notes? This cannot be undone. [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted.")
            return EXIT_OK

    config, store = _load()
    count = len(store)
    store.delete_all()
    print(f"Deleted {count} notes.")
    return EXIT_OK


def main() -> int:
    """
    Main entry point.

    Parses the first argument and dispatches to a command.
    """
    args = sys.argv[1:]

    if not args:
        return _run(cmd_list, [])

    first_arg = args[0]

    if first_arg in ("--help", "-h", "help"):
        print_help()
        return EXIT_OK

    if first_arg in ("--version", "-v", "version"):
        print_version()
        return EXIT_OK

    commands = {
        "list": lambda: cmd_list(args[1:]),
        "ls": lambda: cmd_list(args[1:]),
        "show": lambda: cmd_show(args[1:]),
        "add": lambda: cmd_add(args[1:]),
        "edit": lambda: cmd_edit(args[1:]),
        "rm": lambda: cmd_rm(args[1:]),
        "stats": cmd_stats,
        "health": cmd_health,
        "settings": cmd_settings,
        "hints": lambda: cmd_hints(args[1:]),
        "debug": lambda: cmd_debug(args[1:]),
    }

    if first_arg not in commands:
        _error(f"Unknown command: {first_arg}")
        print("Run `snownotes --help` for usage.", file=sys.stderr)
        return EXIT_ERROR

    return _run(commands[first_arg])


if __name__ == "__main__":
    sys.exit(main())
