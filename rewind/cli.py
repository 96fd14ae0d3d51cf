"""Unified CLI entry point for rewind."""

import argparse
import logging
import sys

from rewind.settings import Settings, snake_case


def _add_seed_arg(parser):
    parser.add_argument("-seed", "--seed", type=int, default=None,
                        help="Random seed for reproducibility")


def _add_output_arg(parser, required=True):
    parser.add_argument("-o", "--output", required=required,
                        help="Output file path")


def _add_settings_args(p):
    p.add_argument("--settings", type=str, default=None,
                   help="Settings JSON (snake_case or camelCase keys)")
    p.add_argument("--set", dest="overrides", action="append", default=[],
                   metavar="NAME=VALUE", help="Override one setting, e.g. --set zigZag=6")
    p.add_argument("--max-size", type=int, default=1000,
                   help="Cap the longer side of the source image")
    p.add_argument("--resolution", type=parse_resolution, default=None, metavar="WxH",
                   help="Fit the source to this resolution")
    p.add_argument("--fit", choices=["contain", "cover", "stretch"], default="contain",
                   help="How --resolution fits the source")
    _add_seed_arg(p)


def _add_loop_args(p):
    p.add_argument("--frames", type=int, default=None, help="Frames per cycle")
    p.add_argument("--cycle", type=float, default=None, help="Cycle length in virtual seconds")
    p.add_argument("--delay", type=float, default=None,
                   help="Frame delay in ms (default: play the cycle in real time)")


def _parse_value(text: str):
    if text.lower() in ("none", "null"):
        return None
    try:
        return int(text)
    except ValueError:
        return float(text)


def parse_overrides(pairs: list[str]) -> dict:
    """``["zigZag=6", "seed=3"]`` -> ``{"zig_zag": 6, "seed": 3}``."""
    overrides = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"Expected NAME=VALUE, got {pair!r}")
        overrides[snake_case(name.strip())] = _parse_value(value.strip())
    return overrides


def load_settings(args) -> Settings:
    """Settings file (or defaults), then --set overrides, then the loop flags."""
    settings = Settings.load(args.settings) if getattr(args, "settings", None) else Settings()
    d = settings.to_dict()
    d.update(parse_overrides(getattr(args, "overrides", [])))
    if getattr(args, "seed", None) is not None:
        d["seed"] = args.seed
    if getattr(args, "frames", None) is not None:
        d["frame_count"] = args.frames
    if getattr(args, "cycle", None) is not None:
        d["cycle_length"] = args.cycle
    if getattr(args, "delay", None) is not None:
        d["frame_delay_ms"] = args.delay
    return Settings.from_dict(d)


def parse_resolution(text: str) -> tuple[int, int]:
    """``"640x480"`` -> ``(640, 480)``."""
    try:
        w, h = (int(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WxH, got {text!r}")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"Resolution must be positive, got {text!r}")
    return w, h


def _load_source(args):
    from rewind.media import fit_to_resolution, load_image
    from rewind.raster import RasterBuffer
    source = load_image(args.input, max_dimension=args.max_size)
    if args.resolution is not None:
        source = RasterBuffer.from_array(fit_to_resolution(source.data, args.resolution, args.fit))
        source.data.flags.writeable = False
    return source


def cmd_still(args):
    """Render one frame at a fixed virtual time."""
    from rewind.export import export_still
    settings = load_settings(args)
    export_still(_load_source(args), settings, args.output, t=args.time)
    print(f"Still (t={args.time:g}) -> {args.output}")


def cmd_gif(args):
    """Render one animation cycle to a looping GIF."""
    from rewind.export import export_gif
    settings = load_settings(args)
    export_gif(_load_source(args), settings, args.output)
    print(f"GIF ({settings.frame_count} frames) -> {args.output}")


def cmd_video(args):
    """Render one animation cycle to a video file."""
    from rewind.export import export_video
    settings = load_settings(args)
    export_video(_load_source(args), settings, args.output, loop=not args.no_loop)
    print(f"Video ({settings.frame_count} frames) -> {args.output}")


def cmd_preview(args):
    """Run the live renderer for a fixed number of frames."""
    from rewind.encode import encode_png
    from rewind.live import LiveRenderer
    settings = load_settings(args)
    last = {}

    def keep(frame, t):
        last["frame"], last["t"] = frame, t

    live = LiveRenderer(_load_source(args), settings, on_frame=keep, fps=args.fps)
    count = live.run(max_frames=args.count)
    print(f"Previewed {count} frames (last t={last.get('t', 0.0):.3f})")
    if args.output and "frame" in last:
        with open(args.output, "wb") as f:
            f.write(encode_png(last["frame"].data))
        print(f"Last frame -> {args.output}")


def cmd_settings(args):
    """Write a settings file (defaults plus overrides)."""
    settings = load_settings(args)
    settings.save(args.output)
    print(f"Settings -> {args.output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rewind",
        description="VHS / glitch effect stack for still images, with GIF and video export",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- still ---
    p = subparsers.add_parser("still", help="Render a single frame to PNG")
    p.add_argument("input", help="Input image")
    p.add_argument("-t", "--time", type=float, default=0.0, help="Virtual time of the frame")
    _add_settings_args(p)
    _add_output_arg(p)
    p.set_defaults(func=cmd_still)

    # --- gif ---
    p = subparsers.add_parser("gif", help="Render one loop to an animated GIF")
    p.add_argument("input", help="Input image")
    _add_loop_args(p)
    _add_settings_args(p)
    _add_output_arg(p)
    p.set_defaults(func=cmd_gif)

    # --- video ---
    p = subparsers.add_parser("video", help="Render one loop to video (.mp4)")
    p.add_argument("input", help="Input image")
    _add_loop_args(p)
    p.add_argument("--no-loop", action="store_true",
                   help="Don't repeat the first frame at the end")
    _add_settings_args(p)
    _add_output_arg(p)
    p.set_defaults(func=cmd_video)

    # --- preview ---
    p = subparsers.add_parser("preview", help="Run the live renderer headless")
    p.add_argument("input", help="Input image")
    p.add_argument("-n", "--count", type=int, default=30, help="Frames to render")
    p.add_argument("--fps", type=float, default=30.0)
    _add_settings_args(p)
    _add_output_arg(p, required=False)
    p.set_defaults(func=cmd_preview)

    # --- settings ---
    p = subparsers.add_parser("settings", help="Write a settings JSON file")
    p.add_argument("--settings", type=str, default=None, help="Start from this settings file")
    p.add_argument("--set", dest="overrides", action="append", default=[],
                   metavar="NAME=VALUE")
    _add_seed_arg(p)
    _add_loop_args(p)
    _add_output_arg(p)
    p.set_defaults(func=cmd_settings)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    args.func(args)


if __name__ == "__main__":
    main()
