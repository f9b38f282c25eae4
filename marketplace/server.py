"""
Server Entry Point

Usage:
    Development:  marketplace-api --dev
    Production:   marketplace-api
    Gunicorn:     marketplace-api --gunicorn
"""

import argparse
import os
import subprocess

import uvicorn

from marketplace.config import get_settings

APP = "marketplace.main:app"


def run_dev_server(port: int) -> None:
    """Run development server with auto-reload."""
    uvicorn.run(
        APP,
        host=get_settings().api_host,
        port=port,
        reload=True,
        reload_dirs=["marketplace"],
        log_level="debug",
    )


def run_prod_server(port: int) -> None:
    """Run production server with Uvicorn directly."""
    settings = get_settings()
    uvicorn.run(
        APP,
        host=settings.api_host,
        port=port,
        workers=int(os.getenv("WORKERS", 4)),
        log_level=settings.monitoring.log_level.lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
    )


def run_gunicorn() -> None:
    """Run with Gunicorn using ``gunicorn.conf.py``."""
    subprocess.run(["gunicorn", APP, "-c", "gunicorn.conf.py"], check=True)


def main() -> None:
    parser = argparse.ArgumentParser(description="Marketplace API Server")
    parser.add_argument("--dev", action="store_true", help="Run in development mode with auto-reload")
    parser.add_argument("--gunicorn", action="store_true", help="Run with Gunicorn (production)")
    parser.add_argument("--port", type=int, default=None, help="Port to run on (default: API_PORT)")
    args = parser.parse_args()

    port = args.port or get_settings().api_port

    if args.dev:
        run_dev_server(port)
    elif args.gunicorn:
        os.environ["BIND"] = f"{get_settings().api_host}:{port}"
        run_gunicorn()
    else:
        run_prod_server(port)


if __name__ == "__main__":
    main()
