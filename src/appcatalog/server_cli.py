"""CLI entry point for the app catalog API server."""

import argparse
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="appcatalog-server",
        description="App catalog API server",
    )
    parser.add_argument("--host", default=None, help="Bind host (default: APPCATALOG_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: APPCATALOG_PORT or 8080)")
    parser.add_argument(
        "--local",
        action="store_true",
        help="Local dev mode: SQLite database file, schema created on startup",
    )
    args = parser.parse_args(argv)

    if args.local:
        os.environ["APPCATALOG_LOCAL_MODE"] = "1"

    import uvicorn

    from appcatalog.config import Settings

    current = Settings()
    uvicorn.run(
        "appcatalog.main:app",
        host=args.host or current.host,
        port=args.port or current.port,
    )


if __name__ == "__main__":
    main()
