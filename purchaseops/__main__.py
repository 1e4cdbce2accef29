from __future__ import annotations

import argparse
import json
import sys

from dotenv import load_dotenv

from purchaseops.client import ReportClient
from purchaseops.columns import COLUMNS
from purchaseops.config import api_base_url, configure_logging, repo_root
from purchaseops.export import write_export
from purchaseops.ga4 import init_ga4_client
from purchaseops.render import render_page
from purchaseops.report import ReportInputs, build_purchase_report
from purchaseops.util import default_date_range
from purchaseops.view import ClientViewState, ViewStatus, apply_search, go_to_page, load_report, toggle_sort


def _print(obj: object) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def _load_view(args: argparse.Namespace) -> ClientViewState:
    state = ClientViewState()
    with ReportClient(args.api_url) as client:
        load_report(state, client.fetch, args.start_date, args.end_date)
    if state.status is ViewStatus.POPULATED:
        if args.search:
            apply_search(state, args.search)
        if args.sort:
            toggle_sort(state, args.sort)
            if args.desc:
                toggle_sort(state, args.sort)
        go_to_page(state, args.page)
    return state


def main(argv: list[str]) -> int:
    default_start, default_end = default_date_range()
    parser = argparse.ArgumentParser(prog="purchaseops", description="GA4 purchase source report tools.")
    parser.add_argument("--log-level", type=str, default=None)

    sub = parser.add_subparsers(dest="cmd", required=True)

    report = sub.add_parser("report", help="Query GA4 directly and print the report JSON.")
    report.add_argument("--start-date", type=str, default=default_start)
    report.add_argument("--end-date", type=str, default=default_end)
    report.add_argument("--property-id", type=str, default=None)
    report.add_argument("--out", type=str, default="", help="Optional output file path (written as UTF-8).")

    keys = [c.key for c in COLUMNS]
    for name, help_text in (
        ("dashboard", "Fetch from the API and render the dashboard view as HTML."),
        ("export", "Fetch from the API and export the filtered view as CSV."),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--api-url", type=str, default=api_base_url())
        p.add_argument("--start-date", type=str, default=default_start)
        p.add_argument("--end-date", type=str, default=default_end)
        p.add_argument("--search", type=str, default="")
        p.add_argument("--sort", type=str, default="", choices=["", *keys])
        p.add_argument("--desc", action="store_true", help="Sort descending.")
        p.add_argument("--page", type=int, default=1)
        if name == "dashboard":
            p.add_argument("--out", type=str, default="dashboard.html")
        else:
            p.add_argument("--out-dir", type=str, default=".")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.cmd == "report":
        inputs = ReportInputs(start_date=args.start_date, end_date=args.end_date, property_id=args.property_id)
        result = build_purchase_report(init_ga4_client(), inputs)
        payload = json.dumps(result, indent=2, ensure_ascii=False)
        if args.out:
            with open(args.out, "w", encoding="utf-8", newline="\n") as f:
                f.write(payload)
        print(payload)
        return 0

    state = _load_view(args)
    if state.status is ViewStatus.ERROR:
        print(state.error_message, file=sys.stderr)
        return 1

    if args.cmd == "dashboard":
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(render_page(state))
        _print({"status": state.status.value, "rows": len(state.filtered_rows), "page": state.current_page, "out": args.out})
        return 0

    if args.cmd == "export":
        path = write_export(state, args.out_dir)
        _print({"rows": len(state.filtered_rows), "written_to": str(path) if path else None})
        return 0

    return 1


def run() -> int:
    load_dotenv(repo_root() / ".env")
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(run())
