#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from urllib.parse import quote_plus

from sfdc.capture import (
    CaptureConfig,
    CaptureSession,
    CsvFormatter,
    HTTPClient,
    HTTPRequest,
    InMemorySink,
    default_filename,
)
from sfdc.capture.runtime.reconstruction import ReconstructionProgress


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a SOQL query, capture the first page and fetch the rest")
    p.add_argument("instance_url", help="e.g. https://mydomain.my.salesforce.com")
    p.add_argument("access_token")
    p.add_argument("soql", nargs="?", default="SELECT Id, Name FROM Account")
    p.add_argument("--api-version", default="59.0")
    p.add_argument("--out-dir", type=Path, default=Path("."))
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


def print_progress(progress: ReconstructionProgress) -> None:
    total = progress.total_row_count if progress.total_row_count is not None else "?"
    print(f"  page {progress.page_index + 1}: {progress.rows_fetched}/{total} rows")


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    sink = InMemorySink()
    formatter = CsvFormatter()
    session = CaptureSession(
        HTTPClient(base_url=args.instance_url.rstrip("/")),
        config=CaptureConfig(flush_delay=1.0),
        sinks=[sink],
        formatter=formatter,
    )
    try:
        # The "host" request: the session observes it like any other exchange
        url = f"/services/data/v{args.api_version}/query?q={quote_plus(args.soql)}"
        response = await session.transport.send(
            HTTPRequest(method="GET", url=url, headers={"Authorization": f"Bearer {args.access_token}"})
        )
        if not response.ok:
            print(f"Query failed with HTTP {response.status}: {response.text()[:200]}")
            return

        result = await asyncio.wait_for(sink.get(), timeout=5.0)
        print(
            f"Captured {result.returned_row_count} of {result.total_row_count} rows "
            f"({result.completion.value}), {result.column_count} columns"
        )

        if result.can_fetch_all:
            print("Result is limited, fetching remaining pages:")
            result = await session.fetch_all(result, on_progress=print_progress)

        path = args.out_dir / default_filename(result)
        path.write_text(session.export(result), encoding="utf-8")
        print(f"Wrote {result.returned_row_count} rows to {path}")
    finally:
        await session.close()


if __name__ == "__main__":
    asyncio.run(main())
