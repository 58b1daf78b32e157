from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable

from ports.vision import Rect
from shared.config.loader import load_shot_settings

from apps.shot.compose import ShotApp, build_app
from apps.shot.settings import ShotSettings


def _parse_rect(text: str) -> Rect:
    try:
        return Rect.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _glue_rect_value(argv: list[str]) -> list[str]:
    # "--rect -10,5,20,30" would read the value as an option; pass it as "--rect=..."
    out: list[str] = []
    it = iter(argv)
    for arg in it:
        if arg == "--rect":
            value = next(it, None)
            if value is None:
                out.append(arg)
            elif value.startswith("-") and value[1:2].isdigit():
                out.append(f"--rect={value}")
            else:
                out.extend((arg, value))
        else:
            out.append(arg)
    return out


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="clearshot",
        description="Screenshot with the real alpha channel of translucent windows.",
    )
    ap.add_argument(
        "--rect",
        type=_parse_rect,
        metavar="L,T,W,H",
        help="Region in virtual-screen pixels (default: the configured monitor).",
    )
    ap.add_argument("--monitor", type=int, help="Monitor index; 0 is the whole virtual screen.")
    ap.add_argument("--delay", type=float, metavar="SECONDS", help="Wait before the shot.")
    ap.add_argument("--out", help="PNG file or directory (default: Pictures folder).")
    ap.add_argument("--profile", help="Config profile under configs/profiles.")
    ap.add_argument("--no-dpi-aware", action="store_true", help="Keep the default DPI scaling.")
    ap.add_argument("--json", action="store_true", help="Print the shot report as JSON.")
    ap.add_argument("--quiet", action="store_true", help="Reduce console output.")
    return ap


def main(
    argv: list[str] | None = None,
    build: Callable[[ShotSettings], ShotApp] = build_app,
) -> int:
    args = build_parser().parse_args(_glue_rect_value(sys.argv[1:] if argv is None else argv))

    try:
        settings = load_shot_settings(profile=args.profile)
        if args.monitor is not None:
            settings.capture.monitor = max(0, args.monitor)
        if args.no_dpi_aware:
            settings.dpi_aware = False

        logging.basicConfig(
            level=logging.WARNING if args.quiet else getattr(logging, settings.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        app = build(settings)
        report = app.run(rect=args.rect, out=args.out, delay_s=args.delay)
    except RuntimeError as ex:  # ShotError, bad profile, no platform support, PNG errors
        print(f"[shot] fatal: {ex}", file=sys.stderr)
        return 1

    if args.json:
        print(report.model_dump_json())
    elif not args.quiet:
        print(
            f"[shot] {report.width}x{report.height} at ({report.left},{report.top}) "
            f"opaque={report.opaque_pixels} transparent={report.transparent_pixels} "
            f"translucent={report.translucent_pixels} -> {report.path}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
