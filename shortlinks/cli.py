#!/usr/bin/env python3
"""
Command-line interface for the short link registry.

Usage:
    shortlinks shorten <url> [--custom-code CODE] [--validity MINUTES]
    shortlinks get <short_code>
    shortlinks visit <short_code> [--source SOURCE]
    shortlinks list
    shortlinks sweep
    shortlinks stats
    shortlinks logs [--limit N]
    shortlinks clear-logs
    shortlinks health

Storage location and other settings come from the environment (see
``shortlinks.config.Config``).
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from .app import Application, create_application
from .config import Config, load_config
from .errors import ShortLinkError
from .storage.models import ShortLinkRecord


class ShortLinksCLI:
    """Command-line interface for the registry."""

    def __init__(self, application: Application):
        """Initialize CLI."""
        self.app = application
        self.registry = application.registry

    def _record_json(self, record: ShortLinkRecord) -> dict:
        data = record.to_dict()
        data["status"] = self.registry.expiry_status(record)
        return data

    def _print(self, payload: dict) -> None:
        print(json.dumps(payload, indent=2, ensure_ascii=False))

    def _print_error(self, error: str, kind: Optional[str] = None) -> int:
        payload = {"success": False, "error": error}
        if kind:
            payload["kind"] = kind
        print(json.dumps(payload, indent=2), file=sys.stderr)
        return 1

    def shorten(self, url: str, custom_code: Optional[str] = None, validity: Optional[int] = None) -> int:
        """Shorten a URL."""
        try:
            record = self.registry.create_short_url(url, custom_code, validity)
        except ShortLinkError as e:
            return self._print_error(e.message, e.kind)

        self._print({
            "success": True,
            "short_code": record.short_code,
            "short_url": record.short_url,
            "original_url": record.original_url,
            "expires_at": record.expires_at.isoformat(),
            "message": f"Successfully shortened URL to: {record.short_url}",
        })
        return 0

    def get(self, short_code: str) -> int:
        """Show a record without recording a click."""
        record = self.registry.get_by_short_code(short_code)
        if record is None:
            return self._print_error(f"Short code '{short_code}' not found", "NotFound")

        self._print({"success": True, "expired": self.registry.is_expired(record), **self._record_json(record)})
        return 0

    async def visit(self, short_code: str, source: str = "direct") -> int:
        """Follow a short link, recording a click."""
        try:
            original_url = await self.registry.resolve(short_code, source=source)
        except ShortLinkError as e:
            return self._print_error(e.message, e.kind)

        self._print({"success": True, "short_code": short_code, "original_url": original_url})
        return 0

    def list_urls(self) -> int:
        """List all records, newest first."""
        records = self.registry.get_all()
        self._print({
            "success": True,
            "count": len(records),
            "urls": [self._record_json(r) for r in records],
        })
        return 0

    def sweep(self) -> int:
        """Delete expired records."""
        deleted = self.registry.sweep_expired()
        self._print({"success": True, "deleted": deleted})
        return 0

    def stats(self) -> int:
        """Show registry statistics."""
        self._print({"success": True, **self.registry.get_statistics().model_dump()})
        return 0

    def logs(self, limit: Optional[int] = None) -> int:
        """Show recent event log entries."""
        entries = self.app.event_log.get_entries(limit)
        self._print({"success": True, "count": len(entries), "logs": entries})
        return 0

    def clear_logs(self) -> int:
        """Clear the event log."""
        cleared = self.app.event_log.clear()
        self._print({"success": cleared})
        return 0 if cleared else 1

    def health(self) -> int:
        """Check storage health."""
        health = self.registry.health_check()
        self._print({"success": health["overall"], **health})
        return 0 if health["overall"] else 1

    async def cleanup(self) -> None:
        """Cleanup resources."""
        await self.registry.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlinks",
        description="Create short links and inspect their click analytics",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    shorten = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten.add_argument("url", help="URL to shorten")
    shorten.add_argument("--custom-code", help="Custom short code (alphanumeric, max 20)")
    shorten.add_argument("--validity", type=int, help="Validity in minutes")

    get = subparsers.add_parser("get", help="Show a short link")
    get.add_argument("short_code")

    visit = subparsers.add_parser("visit", help="Follow a short link and record a click")
    visit.add_argument("short_code")
    visit.add_argument("--source", default="direct", help="Click source tag")

    subparsers.add_parser("list", help="List all short links")
    subparsers.add_parser("sweep", help="Delete expired short links")
    subparsers.add_parser("stats", help="Show statistics")

    logs = subparsers.add_parser("logs", help="Show event log")
    logs.add_argument("--limit", type=int, default=20, help="Number of entries")

    subparsers.add_parser("clear-logs", help="Clear event log")
    subparsers.add_parser("health", help="Check storage health")

    return parser


async def run(args: argparse.Namespace, config: Config) -> int:
    cli = ShortLinksCLI(create_application(config))
    try:
        if args.command == "shorten":
            return cli.shorten(args.url, args.custom_code, args.validity)
        if args.command == "get":
            return cli.get(args.short_code)
        if args.command == "visit":
            return await cli.visit(args.short_code, args.source)
        if args.command == "list":
            return cli.list_urls()
        if args.command == "sweep":
            return cli.sweep()
        if args.command == "stats":
            return cli.stats()
        if args.command == "logs":
            return cli.logs(args.limit)
        if args.command == "clear-logs":
            return cli.clear_logs()
        if args.command == "health":
            return cli.health()
        raise SystemExit(f"Unknown command: {args.command}")
    finally:
        await cli.cleanup()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    overrides = {"log_level": "DEBUG"} if args.verbose else {}
    config = load_config(**overrides)
    return asyncio.run(run(args, config))


if __name__ == "__main__":
    sys.exit(main())
