#!/usr/bin/env python3
"""Back up every stored transaction as JSON and CSV files."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from dishka import Scope

from app.deps import create_container
from app.services.export import ExportResult, TransactionExporter

LOGGER = logging.getLogger("export_transactions")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export all transactions to timestamped JSON and CSV backups."
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("public") / "backups",
        help="Directory receiving the backup files (default: public/backups).",
    )
    return parser.parse_args()


async def run(output: Path) -> ExportResult:
    container = create_container()
    try:
        async with container(scope=Scope.REQUEST) as request_container:
            exporter = await request_container.get(TransactionExporter)
            return await exporter(output)
    finally:
        await container.close()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    args = parse_args()
    result = asyncio.run(run(args.output))
    LOGGER.info(
        "Exported %d transactions to:\n- %s\n- %s",
        result.count,
        result.json_path,
        result.csv_path,
    )


if __name__ == "__main__":
    main()
