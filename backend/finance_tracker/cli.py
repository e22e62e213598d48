import argparse
import logging
import webbrowser

import uvicorn

from .config import DATA_DIR


def main():
    parser = argparse.ArgumentParser(description="Finance Tracker")
    parser.add_argument("--port", type=int, default=8000, help="Port to run on")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--no-browser", action="store_true", help="Don't open browser")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--debug", action="store_true", help="Log refresh notifications")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    url = f"http://{args.host}:{args.port}"

    print("\n" + "=" * 50)
    print("  Finance Tracker")
    print("=" * 50)
    print(f"\n  URL:  {url}/docs")
    print(f"  Data: {DATA_DIR}\n")
    print("  Press Ctrl+C to stop the server\n")
    print("=" * 50 + "\n")

    if not args.no_browser:
        webbrowser.open(f"{url}/docs")

    uvicorn.run(
        "finance_tracker.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if args.debug else "info",
    )
