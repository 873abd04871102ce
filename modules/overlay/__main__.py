from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from utils.app_settings import load_settings

from .errors import LayoutValidationError, OverlayError
from .rasterizer import Rasterizer
from .renderer import OverlayRenderer
from .validators import load_layout


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Stamp field values onto page 1 of a template PDF")
    parser.add_argument("--pdf", required=True, help="Template PDF")
    parser.add_argument("--layout", required=True, help="template_data JSON file")
    parser.add_argument("--values", dest="values_file", help="JSON object of field id -> value")
    parser.add_argument("--out", dest="out_file", help="Output PDF path (defaults to the configured filename)")
    parser.add_argument("--base64", action="store_true", help="Print the base64 payload instead of writing a file")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    settings = load_settings()
    renderer = OverlayRenderer(
        rasterizer=Rasterizer(scale=settings.raster_scale, jpeg_quality=settings.jpeg_quality)
    )
    values = json.loads(Path(args.values_file).read_text(encoding="utf-8")) if args.values_file else {}

    try:
        layout = load_layout(Path(args.layout).read_text(encoding="utf-8"))
        source = Path(args.pdf).read_bytes()
        if args.base64:
            print(renderer.render_and_encode(source, layout, values))
            return 0
        pdf_bytes = renderer.render(source, layout, values)
    except (LayoutValidationError, OverlayError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    out_path = Path(args.out_file or settings.default_filename)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(pdf_bytes)
    return 0


if __name__ == "__main__":
    sys.exit(main())
