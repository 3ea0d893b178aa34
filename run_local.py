#!/usr/bin/env python3
"""
Local development server runner.

Runs the webhook application using uvicorn. Point the Postmates
webhook configuration (or a tunnel to this machine) at
http://<host>:<port>/webhooks/postmates.

Usage:
    python run_local.py
    python run_local.py --port 8000
    python run_local.py --reload  # Auto-reload on code changes
"""

import argparse
from pathlib import Path

import uvicorn

project_root = Path(__file__).parent


def main():
    parser = argparse.ArgumentParser(
        description="Run the delivery tracker webhook application locally with uvicorn"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes (recommended for development)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level for uvicorn (default: info)"
    )

    args = parser.parse_args()

    if not (project_root / ".env").exists():
        print("WARNING: .env file not found, using environment variables and defaults.")
        print("See .env.example for the available settings.")

    print("=" * 60)
    print("Starting Postmates Delivery Tracker (Local Development)")
    print("=" * 60)
    print(f"Webhook: http://{args.host}:{args.port}/webhooks/postmates")
    print(f"Health:  http://{args.host}:{args.port}/health")
    print("=" * 60)

    # a single worker: the event queues live in this process
    uvicorn.run(
        "postmates_tracker.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        reload_dirs=[str(project_root / "src")] if args.reload else None
    )


if __name__ == "__main__":
    main()
