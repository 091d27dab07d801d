"""Convert local JPEG/PNG files to CMYK TIFF through a running converter API.

Usage:
    python -m app.cli photo.jpg logo.png --output-dir out/
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from app.config import CLIENT_TIMEOUT, CONVERTER_URL
from app.uploads.display import format_file_size, status_label
from app.uploads.models import ItemStatus
from app.uploads.session import UploadSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert JPEG/PNG images to CMYK TIFF")
    parser.add_argument("files", nargs="+", help="JPEG or PNG files to convert")
    parser.add_argument("--server", default=CONVERTER_URL, help=f"Converter API base URL (default: {CONVERTER_URL})")
    parser.add_argument("--output-dir", default=".", help="Directory for converted TIFF files")
    parser.add_argument("--timeout", type=float, default=CLIENT_TIMEOUT, help="Per-request timeout in seconds")
    return parser


async def run(files: list[str], server: str, output_dir: Path, timeout: float, session: Optional[UploadSession] = None) -> int:
    async with (session or UploadSession(base_url=server, timeout=timeout)) as session:
        _, rejected = session.add_files(files)
        for name in rejected:
            print(f"{name}: skipped (only JPG, JPEG and PNG files are accepted)")
        if not session.items:
            return 1

        await session.convert_all()

        failed = 0
        for item in session.items:
            line = f"{item.name} [{format_file_size(item.size)}]: {status_label(item.status)}"
            if item.status == ItemStatus.COMPLETED:
                dest = session.download(item, output_dir)
                meta = item.metadata
                line += f" -> {dest} ({meta.width} x {meta.height}, {meta.format}, {format_file_size(meta.size)})"
            elif item.status == ItemStatus.ERROR:
                failed += 1
                line += f" ({item.error})"
            print(line)
        session.clear_all()
        return 1 if failed else 0


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args.files, args.server, Path(args.output_dir), args.timeout))


if __name__ == "__main__":
    sys.exit(main())
