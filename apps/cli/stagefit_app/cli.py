"""CLI entrypoints for sizing, importing, and adapting stage bitmaps."""

from __future__ import annotations

import argparse
import asyncio
import json
import mimetypes
from dataclasses import asdict
from pathlib import Path

from stagefit_core import BitmapAdapter, configure_logging, load_config, save_config
from stagefit_core.config import AppConfig
from stagefit_geometry import (
    FrameSize,
    StageContext,
    get_backdrop_resized_width_height,
    get_resized_width_height,
    legacy_double,
)
from stagefit_raster import BitmapError, SourceAsset, binary_to_data_uri, data_uri_to_binary


POLICIES = ("stage", "backdrop", "legacy")


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _frame(text: str) -> FrameSize:
    try:
        return FrameSize.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _number(text: str) -> float:
    value = float(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {text}")
    return int(value) if value.is_integer() else value


def _config_file(args: argparse.Namespace) -> Path | None:
    return Path(args.config).expanduser() if args.config else None


def _stage(args: argparse.Namespace, cfg: AppConfig) -> StageContext:
    stage = cfg.stage_context()
    if getattr(args, "stage", None) is not None:
        stage.set_native_size(args.stage)
    return stage


def _content_type(path: Path, override: str | None) -> str:
    if override:
        return override
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "image/png"


def cmd_size(args: argparse.Namespace) -> int:
    cfg = load_config(_config_file(args))
    stage = _stage(args, cfg)
    if args.policy == "legacy":
        plan = legacy_double(args.width, args.height)
    elif args.policy == "backdrop":
        frame = args.frame or stage.native_size
        plan = get_backdrop_resized_width_height(args.width, args.height, frame.width, frame.height, stage)
    else:
        plan = get_resized_width_height(args.width, args.height, stage)

    width, height = plan.pixel_size
    _print_json(
        {
            "policy": args.policy,
            "stage": str(stage.native_size),
            "source": {"width": args.width, "height": args.height},
            "plan": asdict(plan),
            "pixels": {"width": width, "height": height},
        }
    )
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    cfg = load_config(_config_file(args))
    adapter = BitmapAdapter(stage=_stage(args, cfg), output_content_type=cfg.imports.output_content_type)
    source = Path(args.input)
    data = source.read_bytes()
    content_type = _content_type(source, args.content_type)

    if args.policy == "legacy":
        result = asyncio.run(adapter.convert_resolution1_bitmap(binary_to_data_uri(data, content_type)))
        output = data_uri_to_binary(result)
    elif args.policy == "backdrop":
        output = asyncio.run(adapter.import_backdrop_bitmap(data, content_type))
    else:
        output = asyncio.run(adapter.import_bitmap(data, content_type))

    target = Path(args.output)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(output)
    _print_json({"success": True, "policy": args.policy, "output": str(target), "bytes": len(output)})
    return 0


def cmd_adapt(args: argparse.Namespace) -> int:
    cfg = load_config(_config_file(args))
    adapter = BitmapAdapter(stage=cfg.stage_context())
    source = Path(args.input)
    content_type = _content_type(source, args.content_type)
    asset = SourceAsset(
        data=source.read_bytes(),
        content_type=content_type,
        data_format=source.suffix.lstrip(".").lower() or "png",
    )

    artifacts = asyncio.run(adapter.adapt_multiple_stage_sizes(asset, args.frame))

    out_dir = Path(args.out_dir).expanduser() if args.out_dir else source.parent
    out_dir.mkdir(parents=True, exist_ok=True)
    for artifact in artifacts:
        (out_dir / artifact.name).write_bytes(artifact.data)

    _print_json(
        {
            "success": True,
            "out_dir": str(out_dir),
            "frames": [str(f) for f in args.frame],
            "artifacts": [{"name": a.name, "content_type": a.content_type, "bytes": len(a.data)} for a in artifacts],
        }
    )
    return 0


def cmd_config_show(args: argparse.Namespace) -> int:
    cfg = load_config(_config_file(args))
    _print_json(asdict(cfg))
    return 0


def cmd_config_set_stage(args: argparse.Namespace) -> int:
    cfg = load_config(_config_file(args))
    stage = cfg.stage_context()
    try:
        value: object = list(FrameSize.parse(args.size).as_tuple())
    except ValueError:
        value = args.size
    applied = stage.set_native_size(value)
    if applied:
        cfg.stage.width = stage.native_size.width
        cfg.stage.height = stage.native_size.height
        save_config(cfg, _config_file(args))
    _print_json({"applied": applied, "stage": str(stage.native_size)})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stagefit", description="Fit bitmaps to the stage resolution")
    parser.add_argument("--config", default=None, help="Optional path to config.json")
    sub = parser.add_subparsers(dest="command", required=True)

    size_cmd = sub.add_parser("size", help="Print the size a bitmap would be resized to")
    size_cmd.add_argument("width", type=_number)
    size_cmd.add_argument("height", type=_number)
    size_cmd.add_argument("--policy", choices=POLICIES, default="stage")
    size_cmd.add_argument("--frame", type=_frame, default=None, help="Backdrop frame as WIDTHxHEIGHT")
    size_cmd.add_argument("--stage", type=_frame, default=None, help="Stage size override as WIDTHxHEIGHT")
    size_cmd.set_defaults(func=cmd_size)

    import_cmd = sub.add_parser("import", help="Import a bitmap file with a sizing policy")
    import_cmd.add_argument("input")
    import_cmd.add_argument("output")
    import_cmd.add_argument("--policy", choices=POLICIES, default="stage")
    import_cmd.add_argument("--content-type", default=None, help="Input MIME type; guessed from extension")
    import_cmd.add_argument("--stage", type=_frame, default=None, help="Stage size override as WIDTHxHEIGHT")
    import_cmd.set_defaults(func=cmd_import)

    adapt_cmd = sub.add_parser("adapt", help="Adapt a backdrop to several stage sizes")
    adapt_cmd.add_argument("input")
    adapt_cmd.add_argument("--frame", type=_frame, action="append", required=True, help="WIDTHxHEIGHT, repeatable")
    adapt_cmd.add_argument("--out-dir", default=None)
    adapt_cmd.add_argument("--content-type", default=None, help="Input MIME type; guessed from extension")
    adapt_cmd.set_defaults(func=cmd_adapt)

    config_cmd = sub.add_parser("config", help="Inspect or update stored settings")
    config_sub = config_cmd.add_subparsers(dest="config_cmd", required=True)
    show_cmd = config_sub.add_parser("show", help="Print current settings")
    show_cmd.set_defaults(func=cmd_config_show)
    set_stage_cmd = config_sub.add_parser("set-stage", help="Store a new stage native size")
    set_stage_cmd.add_argument("size", help="WIDTHxHEIGHT")
    set_stage_cmd.set_defaults(func=cmd_config_set_stage)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg_file = _config_file(args)
    cfg = load_config(cfg_file)
    log_directory = None
    if cfg_file is not None:
        log_directory = cfg_file.parent / "logs"
        log_directory.mkdir(parents=True, exist_ok=True)
    configure_logging(
        keep_files=cfg.logging.keep_files,
        console=False,
        level=cfg.logging.level,
        directory=log_directory,
    )

    try:
        return int(args.func(args))
    except BitmapError as exc:
        _print_json({"success": False, "error": str(exc)})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
