import argparse
import json
from pathlib import Path
from typing import Any

from . import __version__
from .api import resolve_record, search_monsters
from .env import Settings, load_env
from .errors import MissingRecordIdentity, StatBlockError
from .logger import get_logger
from .mapping import merge_stat_block
from .schema import validate_record
from .storage import load_record, load_template, save_document


def convert_record(record: Any, template_path: Path, output_dir: Path) -> Path:
    """Merge a record into the template and write the result. Nothing is written on failure."""
    logger = get_logger()
    for warning in validate_record(record) if record is not None else []:
        logger.warning("Record shape warning", detail=warning)

    template = load_template(template_path)
    document = merge_stat_block(template, record)
    path = save_document(output_dir, document)
    logger.info("Stat block written", name=document["name"], path=str(path))
    return path


def _run(action) -> None:
    """Run a command body, turning any failure into an exit message instead of a traceback."""
    try:
        action()
    except MissingRecordIdentity as e:
        get_logger().error("Merge aborted: no monster record", error=str(e))
        raise SystemExit(str(e))
    except StatBlockError as e:
        get_logger().error("Command failed", error_type=type(e).__name__, error=str(e))
        raise SystemExit(str(e))
    except Exception as e:
        get_logger().error("Command failed", error_type=type(e).__name__, error=str(e))
        raise SystemExit(f"Error: {e}")
    finally:
        get_logger().log_metrics_summary()


def cmd_convert(args: argparse.Namespace) -> None:
    settings: Settings = args.settings
    query = args.query
    if not query:
        query = input(
            "Enter the API link for the monster stat block or type the name "
            "of a monster and find the closest match: "
        )
    if not query.strip():
        raise SystemExit("No monster name or link given.")

    def action():
        record = resolve_record(query, api_base=settings.api_base, timeout=settings.timeout)
        path = convert_record(record, Path(args.template), Path(args.output_dir))
        print(f"Modified stat block saved as {path}")

    _run(action)


def cmd_merge(args: argparse.Namespace) -> None:
    record_path = Path(args.record)
    if not record_path.exists():
        raise SystemExit(f"Record file not found: {record_path}")

    def action():
        record = load_record(record_path)
        path = convert_record(record, Path(args.template), Path(args.output_dir))
        print(f"Modified stat block saved as {path}")

    _run(action)


def cmd_search(args: argparse.Namespace) -> None:
    settings: Settings = args.settings

    def action():
        candidates = search_monsters(args.name, api_base=settings.api_base, timeout=settings.timeout)
        if not candidates:
            print("No monsters found with that name")
            return
        for index, monster in enumerate(candidates, start=1):
            print(f"{index}. {monster.get('monstername')} (id: {monster.get('monster_id')})")

    _run(action)


def cmd_validate(args: argparse.Namespace) -> None:
    record_path = Path(args.record)
    if not record_path.exists():
        raise SystemExit(f"Record file not found: {record_path}")
    try:
        record = load_record(record_path)
    except json.JSONDecodeError as e:
        raise SystemExit(f"Invalid JSON: {e}")
    errors = validate_record(record)
    if errors:
        print("Warnings:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="statblock", description="SW2.5 monster to Foundry stat block converter")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level.upper(),
        help=f"Log level (default: {settings.log_level})",
    )
    parser.set_defaults(settings=settings)

    subparsers = parser.add_subparsers(dest="command")

    cnv = subparsers.add_parser("convert", help="Look up a monster by link or name and write its stat block")
    cnv.add_argument("query", nargs="?", help="API link or monster name (prompted for when omitted)")
    cnv.add_argument("--template", default=settings.template, help=f"Stat block template JSON (default: {settings.template})")
    cnv.add_argument("--output-dir", default=settings.output_dir, help=f"Output directory (default: {settings.output_dir})")
    cnv.set_defaults(func=cmd_convert)

    mrg = subparsers.add_parser("merge", help="Merge a saved monster record JSON into the template")
    mrg.add_argument("--record", required=True, help="Path to monster record JSON")
    mrg.add_argument("--template", default=settings.template, help=f"Stat block template JSON (default: {settings.template})")
    mrg.add_argument("--output-dir", default=settings.output_dir, help=f"Output directory (default: {settings.output_dir})")
    mrg.set_defaults(func=cmd_merge)

    srch = subparsers.add_parser("search", help="List monsters matching a name")
    srch.add_argument("name", help="Monster name to search for")
    srch.set_defaults(func=cmd_search)

    val = subparsers.add_parser("validate", help="Check the shape of a saved monster record JSON")
    val.add_argument("--record", required=True, help="Path to monster record JSON")
    val.set_defaults(func=cmd_validate)

    return parser


def main(argv=None):
    # Load .env if present (STATBLOCK_API_BASE, STATBLOCK_TIMEOUT, etc.)
    load_env()
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    get_logger().set_level(args.log_level)

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
