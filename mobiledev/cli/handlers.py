import argparse
import asyncio
import json
import logging
import sys

from ..constants import APP_NAME, APP_VERSION
from ..container import build_container
from ..settings import load_settings


def build_parser():
    parser = argparse.ArgumentParser(
        prog="mobiledev",
        description="Read-only mobile debugging tools for MCP clients",
    )
    parser.add_argument("--config", default=None, help="Path to config.json")
    parser.add_argument("--adb", dest="adb_path", default=None, help="Path to adb")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    parser.add_argument(
        "--version", action="version", version="{} {}".format(APP_NAME, APP_VERSION)
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("stdio", help="Serve tools over MCP stdio (default)")

    http_parser = subparsers.add_parser("http", help="Serve tools over HTTP")
    http_parser.add_argument("--host", default=None, help="Bind address")
    http_parser.add_argument("--port", type=int, default=None, help="Bind port")

    subparsers.add_parser("status", help="Show license status")

    activate_parser = subparsers.add_parser("activate", help="Activate a license key")
    activate_parser.add_argument("license_key", help="License key")

    subparsers.add_parser("tools", help="List tools available for the current tier")

    call_parser = subparsers.add_parser("call", help="Call a single tool and print the result")
    call_parser.add_argument("name", help="Tool name")
    call_parser.add_argument(
        "--args", dest="arguments", default="{}", help="Tool arguments as a JSON object"
    )
    return parser


def configure_logging(level):
    # stdout carries the MCP protocol, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_json(payload):
    print(json.dumps(payload, indent=2))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings(args.config)
    if args.adb_path:
        settings.adb_path = args.adb_path
    configure_logging(args.log_level or settings.log_level)
    container = build_container(settings)
    command = args.command or "stdio"

    if command == "stdio":
        from ..mcp_server import serve_stdio

        asyncio.run(serve_stdio(container))
        return 0
    if command == "http":
        import uvicorn

        from ..server import create_app

        uvicorn.run(
            create_app(container),
            host=args.host or settings.http_host,
            port=args.port or settings.http_port,
        )
        return 0
    if command == "status":
        _print_json(container.license.status())
        return 0
    if command == "activate":
        result = container.license.activate(args.license_key)
        _print_json(result)
        return 0 if result.get("success") else 1
    if command == "tools":
        tier = container.license.resolve().tier
        for spec in container.dispatcher.list_tools(tier):
            print("{:<26} {}".format(spec.name, spec.tier.value))
        return 0
    if command == "call":
        try:
            arguments = json.loads(args.arguments)
        except json.JSONDecodeError as exc:
            parser.error("--args must be JSON: {}".format(exc))
        if not isinstance(arguments, dict):
            parser.error("--args must be a JSON object")
        result = container.dispatcher.call(args.name, arguments)
        _print_json(result.to_dict())
        return 1 if result.is_error else 0
    parser.error("unknown command: {}".format(command))
    return 2
