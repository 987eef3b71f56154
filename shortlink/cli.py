"""
Command-line entry point for the shortlink service.

Usage:
    shortlink serve [--host HOST] [--port PORT]
    shortlink export <path>
"""

import argparse
import logging
import sys

import uvicorn

from shortlink import crud, database
from shortlink.config import load_settings

logger = logging.getLogger("shortlink")


def configure_logging(settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


def serve(args) -> int:
    settings = load_settings()
    configure_logging(settings)
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Starting shortlink on %s:%d", host, port)
    uvicorn.run("shortlink.main:create_app", factory=True, host=host, port=port, log_level=settings.log_level.lower())
    return 0


def export(args) -> int:
    settings = load_settings()
    configure_logging(settings)
    engine = database.make_engine(settings.database_url)
    database.init_db(engine)
    with database.make_session_factory(engine)() as db:
        count = crud.export_links(db, args.path)
    engine.dispose()
    print(f"Exported {count} links to {args.path}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="shortlink",
        description="URL shortener service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", help="Bind address (default: $HOST or 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, help="Listen port (default: $PORT or 8080)")
    serve_parser.set_defaults(func=serve)

    export_parser = subparsers.add_parser("export", help="Write all links to a JSON file")
    export_parser.add_argument("path", help="Output file")
    export_parser.set_defaults(func=export)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
