import argparse
import asyncio
import json
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from stockcount.core.logging import setup_logging
from stockcount.services.app_state import ViewStateController
from stockcount.services.export_service import (
    backup_filename,
    build_backup,
    csv_filename,
    inventory_csv,
)
from stockcount.services.remote_store import RemoteStoreGateway


def parse_args():
    parser = argparse.ArgumentParser(
        description="Download the current counts as CSV and/or a JSON backup."
    )
    parser.add_argument("--out", default=".", help="Directory to write files into.")
    parser.add_argument("--backup", action="store_true", help="Also write a JSON backup.")
    return parser.parse_args()


async def export(out_dir: Path, with_backup: bool):
    async with RemoteStoreGateway.from_settings() as gateway:
        controller = ViewStateController(gateway)
        if not await controller.reload_all():
            raise SystemExit("Export failed: could not load data from the remote store.")

        csv_path = out_dir / csv_filename()
        csv_path.write_text(inventory_csv(controller.state.inventory), encoding="utf-8-sig")
        print(f"{len(controller.state.inventory)} records written to {csv_path}")

        if with_backup:
            backup_path = out_dir / backup_filename()
            backup_path.write_text(
                json.dumps(build_backup(controller.state), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            print(f"Backup written to {backup_path}")


def main():
    setup_logging()
    args = parse_args()
    out_dir = Path(args.out)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SystemExit(f"Export failed: {exc}") from exc
    asyncio.run(export(out_dir, args.backup))


if __name__ == "__main__":
    main()
