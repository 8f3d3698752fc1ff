#!/usr/bin/env python3
"""
CredGate -- Minimal credential service: register, log in, authorize.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --port 3000
  python main.py --reload

Environment variables (see core/config.py for the full list):
  SECRET_KEY            Token signing secret (>= 32 chars). If unset, a built-in
                        development secret is used -- UNSAFE for production.
  TOKEN_EXPIRE_SECONDS  Token lifetime. Default 3600.
  BCRYPT_ROUNDS         bcrypt cost factor. Default 10.
  HOST / PORT           Listen address. Defaults 127.0.0.1 / 3000.
"""

import argparse

import uvicorn

from core.config import get_settings


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="credgate",
        description="CredGate -- account registration, password login and bearer-token authorization.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Listen port (default: {settings.port})")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (development only; discards all accounts on each reload)",
    )
    return parser


def main(argv=None) -> None:
    args = _build_parser().parse_args(argv)
    print(f"  CredGate listening on http://{args.host}:{args.port}")
    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
