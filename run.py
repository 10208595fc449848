#!/usr/bin/env python3
from __future__ import annotations

"""
Mandir forms launcher.

- Local dev:           ./run.py --env development
- No reloader:         ./run.py --env development --no-reload
- Production (proxy):  ENV=production TRUST_PROXY=1 ./run.py --env production --no-reload
- Gunicorn:            gunicorn "wsgi:app"
"""

import argparse
import logging
import os

from dotenv import load_dotenv

log = logging.getLogger("mandir_forms.run")


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run the mandir forms service")
    p.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    p.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    p.add_argument("--env", choices=["development", "testing", "production"], help="Runtime environment")
    p.add_argument("--no-reload", action="store_true", help="Disable Werkzeug reloader (default: enabled in development).")
    p.add_argument("--trust-proxy", action="store_true", default=None, help="Trust X-Forwarded-* headers.")
    return p.parse_args()


def main() -> None:
    load_dotenv(override=False)
    args = parse_args()

    if args.env:
        os.environ["ENV"] = args.env
    if args.trust_proxy:
        os.environ["TRUST_PROXY"] = "1"

    from mandir_forms import create_app

    app = create_app(args.env)
    env = app.config.get("ENV", "development")

    if env == "production" and not args.no_reload:
        log.warning("Reloader is on in production; pass --no-reload")

    app.run(
        host=args.host,
        port=args.port,
        debug=bool(app.config.get("DEBUG")),
        use_reloader=not args.no_reload and env != "production",
    )


if __name__ == "__main__":
    main()
