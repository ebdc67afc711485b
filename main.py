"""
RemoteControlServer - configuration entry point.

Loads config.xml from the per-user application data directory, optionally
prints or rewrites it. The server window and transport layers receive the
same Settings instance created here.
"""
import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication

from rcserver.logging.logger import get_logger, setup_logging
from rcserver.logging.status_log import StatusLog
from rcserver.settings import LoadResult, Settings
from versioning import APP_NAME, APP_ORGANIZATION, APP_VERSION

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rcserver", description="Remote Control server settings")
    parser.add_argument("--debug", "-d", action="store_true", help="Debug logging with console output")
    parser.add_argument("--verbose", action="store_true", help="Verbose debug logging")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory holding config.xml (default: platform app data directory)")
    parser.add_argument("--show", action="store_true", help="Print the loaded settings")
    parser.add_argument("--save", action="store_true",
                        help="Write the loaded settings back, creating config.xml on first run")
    parser.add_argument("--reset", action="store_true", help="Restore defaults and save")
    return parser


def ensure_application() -> QCoreApplication:
    """Return the running Qt application, creating a core one if needed."""
    QCoreApplication.setApplicationName(APP_NAME)
    QCoreApplication.setOrganizationName(APP_ORGANIZATION)
    QCoreApplication.setApplicationVersion(APP_VERSION)
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([sys.argv[0]])
    return app


def format_settings(settings: Settings) -> str:
    lines = []
    for key, value in settings.as_dict().items():
        if isinstance(value, list):
            lines.append(f"{key}:")
            lines.extend(f"  - {item}" for item in value)
        else:
            lines.append(f"{key} = {value}")
    return "\n".join(lines)


def _report_loaded(result: LoadResult) -> None:
    if result.file_read:
        logger.info("Settings loaded from %s", result.path)
    else:
        logger.info("No config file at %s, running with defaults", result.path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the settings tool."""
    args = build_parser().parse_args(argv)
    debug_mode = args.debug or os.getenv("RCSERVER_DEBUG", "").strip().lower() in ("1", "true", "on", "yes")

    ensure_application()
    status_log = StatusLog()
    log_dir = args.config_dir / "logs" if args.config_dir is not None else None
    setup_logging(debug=debug_mode, verbose=args.verbose, log_dir=log_dir, status_log=status_log)

    logger.info("%s %s starting", APP_NAME, APP_VERSION)

    settings = Settings(config_dir=args.config_dir)
    settings.settings_loaded.connect(_report_loaded)
    settings.load_settings()

    if args.reset:
        # Seeded lists so the written file matches a first run
        settings.reset_to_defaults(seed_lists=True)
    if args.reset or args.save:
        settings.save_settings()

    if args.show:
        print(format_settings(settings))

    return 0


if __name__ == "__main__":
    sys.exit(main())
