"""
Health check module for snownotes.

Reports status of configuration, storage and hints.
"""

from pathlib import Path

from snownotes.config import DB_FILENAME, ConfigError, get_config_path, load_config


def check_config() -> tuple[str, str]:
    """Check config file status."""
    config_path = get_config_path()
    if not config_path.exists():
        return "✓", "Defaults (no config.toml)"

    try:
        load_config()
        return "✓", f"OK ({config_path})"
    except ConfigError as e:
        return "✗", f"Error: {e}"


def check_database() -> tuple[str, str]:
    """Check database status."""
    try:
        config = load_config()
    except ConfigError:
        return "-", "N/A (config invalid)"

    if config["store"]["backend"] == "memory":
        return "!", "In-memory store (notes are not saved)"

    db_path = Path(config["snownotes"]["home"]).expanduser() / DB_FILENAME
    if not db_path.exists():
        return "✓", "Not created yet (no notes)"

    try:
        from snownotes.db import Database
        db = Database(db_path)
        stats = db.get_stats()
        return "✓", f"OK ({stats['total_notes']} notes)"
    except Exception as e:
        return "✗", f"Error: {e}"


def check_hints() -> tuple[str, str]:
    """Check onboarding hint state."""
    try:
        config = load_config()
    except ConfigError:
        return "-", "N/A"

    if not config["hints"].get("enabled", True):
        return "-", "Disabled"

    db_path = Path(config["snownotes"]["home"]).expanduser() / DB_FILENAME
    if config["store"]["backend"] == "memory" or not db_path.exists():
        return "✓", "All pending"

    try:
        from snownotes.db import Database
        from snownotes.hints import HintTracker

        tracker = HintTracker(Database(db_path))
        due = tracker.eligible()
        if not due:
            return "✓", "All seen"
        return "✓", f"{len(due)} pending"
    except Exception as e:
        return "✗", f"Error: {e}"


def run_health_check() -> dict[str, tuple[str, str]]:
    """Run all health checks."""
    return {
        "Config": check_config(),
        "Database": check_database(),
        "Hints": check_hints(),
    }


def format_health_report(checks: dict[str, tuple[str, str]]) -> str:
    """Format health check results."""
    lines = ["snownotes Health Check", "-" * 40]

    for name, (status, message) in checks.items():
        lines.append(f"{status} {name}: {message}")

    return "\n".join(lines)
