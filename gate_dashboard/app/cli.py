"""Convenience CLI for running one dashboard query and inspecting the derived views."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import date
from typing import List, Optional

from gate_dashboard.app.factory import build_service
from gate_dashboard.app.logging_setup import setup_logging
from gate_dashboard.app.settings import load_settings
from gate_dashboard.core.errors import FetchError, MissingDateRange


def build_arg_parser() -> argparse.ArgumentParser:
    today = date.today().isoformat()
    parser = argparse.ArgumentParser(description="Query every gate and print the dashboard views.")
    parser.add_argument("--start", type=str, default=today, help="Start date, YYYY-MM-DD (default: today)")
    parser.add_argument("--stop", type=str, default=today, help="Stop date, YYYY-MM-DD (default: today)")
    parser.add_argument("--page", type=int, default=1, help="Table page to print (default: 1)")
    parser.add_argument("--base-url", type=str, default=None, help="Override the vehicle count API base URL")
    parser.add_argument("--log-format", choices=["text", "json"], default=None, help="Logging format")
    return parser


def _dump(obj: object) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.log_format:
        overrides["log_format"] = args.log_format
    settings = load_settings(**overrides)
    setup_logging(settings)

    service = build_service(settings)
    try:
        asyncio.run(service.query(args.start, args.stop))
    except MissingDateRange as exc:
        print(f"Error: {exc.user_message}", file=sys.stderr)
        return 2
    except FetchError as exc:
        print(f"Error: {exc.user_message}", file=sys.stderr)
        return 1
    finally:
        service.close()

    view = service.view(args.page)
    print(f"Cameras loaded: {view.camera_count}")
    print("Totals:")
    print(_dump({name: item.model_dump(by_alias=True) for name, item in view.totals.items()}))
    print("Chart:")
    print(_dump(view.chart.model_dump()))
    print("Gates:")
    print(_dump([group.model_dump(by_alias=True) for group in view.gates]))
    print(f"Rows page {view.page.page_number}/{max(view.page.total_pages, 1)}:")
    print(_dump([row.model_dump() for row in view.page.rows]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
