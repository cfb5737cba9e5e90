"""
opsecret CLI — entry point for all operations.

Usage:
    opsecret serve              # Start the secret extension HTTP service
    opsecret get NAME PATH      # Resolve one secret and print its value
    opsecret status             # Show effective configuration
    opsecret version            # Show version
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from opsecret.config import Config, get_config
from opsecret.errors import OpSecretError

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="opsecret",
        description="opsecret — CI secret extension backed by 1Password Connect.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP service")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: from DRONE_BIND)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: from DRONE_BIND)")

    # get
    get_parser = subparsers.add_parser("get", help="Resolve one secret and print it")
    get_parser.add_argument("name", help="Secret name")
    get_parser.add_argument("path", help="vault/item[/field]")

    # status
    subparsers.add_parser("status", help="Show effective configuration")

    # version
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from opsecret import __version__

        print(f"opsecret {__version__}")
        return 0

    if args.command == "serve":
        return _cmd_serve(args)
    elif args.command == "get":
        return _cmd_get(args)
    elif args.command == "status":
        return _cmd_status(args)
    else:
        parser.print_help()
        return 0


def _configure_logging(cfg: Config) -> None:
    logging.basicConfig(
        level=logging.DEBUG if cfg.debug else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def _load_config() -> Config | None:
    try:
        cfg = get_config()
        cfg.validate()
    except OpSecretError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None
    return cfg


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from opsecret.api.server import create_app

    cfg = _load_config()
    if cfg is None:
        return 1
    _configure_logging(cfg)

    host = args.host or cfg.host
    port = args.port or cfg.port
    logging.getLogger(__name__).info("server listening on address %s:%d", host, port)
    uvicorn.run(create_app(cfg), host=host, port=port, log_level="debug" if cfg.debug else "warning")
    return 0


def _cmd_get(args: argparse.Namespace) -> int:
    from opsecret.resolver import SecretResolver
    from opsecret.vault.client import ConnectClient
    from opsecret.vault.models import SecretRequest

    try:
        cfg = get_config()
    except OpSecretError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    _configure_logging(cfg)

    async def _resolve() -> str:
        async with ConnectClient(
            cfg.connect.host, cfg.connect.token, timeout=cfg.connect.timeout
        ) as client:
            secret = await SecretResolver(client).resolve(
                SecretRequest(name=args.name, path=args.path)
            )
            return secret.data

    try:
        value = asyncio.run(_resolve())
    except OpSecretError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(value)
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    from opsecret import __version__

    try:
        cfg = get_config()
    except OpSecretError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"opsecret v{__version__}")
    print()
    print(f"  Bind:        {cfg.bind}")
    print(f"  Debug:       {'on' if cfg.debug else 'off'}")
    print(f"  Secret:      {'set' if cfg.secret else 'MISSING'}")
    print(f"  Connect:     {cfg.connect.host or 'MISSING'}")
    print(f"  Token:       {'set' if cfg.connect.token else 'MISSING'}")
    print(f"  Timeout:     {cfg.connect.timeout:g}s")

    try:
        cfg.validate()
    except OpSecretError as e:
        print()
        print(f"  Config invalid — {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
