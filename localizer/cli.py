"""
Command line interface

Subcommands:
- extract      parse source files and print (or register) candidate strings
- replace      rewrite source files with translation calls
- sync-keys    propagate keys from the base locale
- sync-file    propagate every key of a base-locale document
- ensure-keys  create missing base-locale keys, then propagate them
- fix-parens   repair split parentheticals left by rewriting
- diagnose     parse diagnostic messages
- serve        run the HTTP API

The exit status is 1 when any file or document failed.
"""

import argparse
import asyncio
import json
import sys
from typing import Dict, List, Optional, Tuple

from localizer import __version__
from localizer.config import load_config, load_ignore_config, resolve_paths
from localizer.core.store import read_locale_tree
from localizer.core.sync import SyncOptions, SyncResult, ensure_keys, sync_file, sync_keys
from localizer.diagnostics import diagnostic_to_dict, parse_diagnostic
from localizer.exceptions import LocalizerError
from localizer.keys import KeyMap, compile_key_pattern
from localizer.logger import get_logger
from localizer.normalizer import find_paren_issues, fix_paren_values, issue_keys, normalize_files
from localizer.parsers import ParseOptions
from localizer.pipeline import assign_from_extraction, collect_source_files, extract_files, rewrite_files
from localizer.replacers import ReplaceOptions

logger = get_logger(__name__)


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _report_failures(failures: List[Dict[str, str]]) -> int:
    for failure in failures:
        print(f"FAILED {failure['path']}: {failure['error']}", file=sys.stderr)
    return 1 if failures else 0


def _context(args) -> Tuple[dict, object]:
    config = load_config(args.project)
    return config, resolve_paths(config, args.project)


def _source_paths(args, config, paths) -> List:
    if args.paths:
        return list(args.paths)
    return collect_source_files(paths.src_root, config.get("source_extensions"))


def cmd_extract(args) -> int:
    config, paths = _context(args)
    options = ParseOptions(load_ignore_config(config, args.project), compile_key_pattern(config))
    batch = extract_files(_source_paths(args, config, paths), paths.project_root, options, config.get("max_workers") or 4)
    if args.register:
        from localizer.core.schema import initialize_database

        initialize_database()
        assigned = assign_from_extraction(batch, config.get("commons_namespace") or "Commons")
        print(f"Registered {len(assigned)} new keys", file=sys.stderr)
    _print_json(batch.to_dict())
    return _report_failures(batch.failures)


def _load_key_map(args, config, paths) -> KeyMap:
    commons = config.get("commons_namespace") or "Commons"
    if args.from_locale:
        tree = read_locale_tree(paths.translations_root, config.get("base_locale") or "en")
        return KeyMap.from_locale_tree(tree, commons_namespace=commons)
    from localizer.core.schema import initialize_database

    initialize_database()
    return KeyMap.from_registry(commons_namespace=commons)


def cmd_replace(args) -> int:
    config, paths = _context(args)
    key_map = _load_key_map(args, config, paths)
    options = ReplaceOptions.from_config(config, load_ignore_config(config, args.project))
    batch = rewrite_files(
        _source_paths(args, config, paths), key_map, paths.project_root, options,
        dry_run=args.dry_run, max_workers=config.get("max_workers") or 4,
    )
    for path in batch.changed_files:
        print(f"{'would update' if args.dry_run else 'updated'} {path}")
    unresolved = sum(len(texts) for texts in batch.unresolved.values())
    print(f"{batch.change_count} replacements in {len(batch.changed_files)} files; {unresolved} strings without a key")
    return _report_failures(batch.failures)


def _sync_options(args, config) -> SyncOptions:
    return SyncOptions.from_config(
        config,
        locales=args.locales.split(",") if args.locales else None,
        overwrite_targets=args.overwrite_targets or None,
        timeout=args.timeout,
        force=getattr(args, "force", False) or None,
    )


def _print_sync(result: SyncResult) -> int:
    for path in result.files:
        print(f"wrote {path}")
    print(str(result))
    if result.cancelled:
        print("sync stopped before finishing", file=sys.stderr)
    return _report_failures(result.failures)


def cmd_sync_keys(args) -> int:
    config, paths = _context(args)
    result = asyncio.run(sync_keys(paths.translations_root, args.keys, _sync_options(args, config)))
    return _print_sync(result)


def cmd_sync_file(args) -> int:
    config, paths = _context(args)
    result = asyncio.run(sync_file(paths.translations_root, args.file, _sync_options(args, config)))
    return _print_sync(result)


def _parse_assignments(items: List[str]) -> Tuple[List[str], Dict[str, str]]:
    keys, values = [], {}
    for item in items:
        key, sep, value = item.partition("=")
        keys.append(key)
        if sep:
            values[key] = value
    return keys, values


def cmd_ensure_keys(args) -> int:
    config, paths = _context(args)
    keys, values = _parse_assignments(args.keys)
    result = asyncio.run(ensure_keys(paths.translations_root, keys, values, _sync_options(args, config)))
    return _print_sync(result)


def cmd_fix_parens(args) -> int:
    config, paths = _context(args)
    base_locale = config.get("base_locale") or "en"
    issues = find_paren_issues(paths.translations_root, base_locale)
    for issue in issues:
        print(f"- [{issue.locale}] {issue.key}: {issue.value}")
    files = args.paths or collect_source_files(paths.src_root, (".js", ".jsx", ".ts", ".tsx"))
    report = normalize_files(files, issue_keys(issues) if not args.all_keys else None)
    for path in report.changed_files:
        print(f"updated {path}")
    if args.apply_values:
        for path in fix_paren_values(paths.translations_root, base_locale):
            print(f"updated {path}")
    print(f"{report.repair_count} repairs in {len(report.changed_files)} files")
    return _report_failures(report.failures)


def cmd_diagnose(args) -> int:
    messages = args.messages or [line.rstrip("\n") for line in sys.stdin if line.strip()]
    parsed = [{"message": m, "parsed": diagnostic_to_dict(parse_diagnostic(m))} for m in messages]
    _print_json(parsed)
    return 0 if all(entry["parsed"] for entry in parsed) else 1


def cmd_serve(args) -> int:
    from localizer.web import create_app

    app = create_app(args.project)
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="localizer", description="Extract, key and sync UI strings")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--project", default=None, help="Project root (default: $LOCALIZER_PROJECT_ROOT or cwd)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("extract", help="List translatable strings")
    p.add_argument("paths", nargs="*", help="Files to parse (default: every source file)")
    p.add_argument("--register", action="store_true", help="Assign and store keys in the registry")
    p.set_defaults(func=cmd_extract)

    p = sub.add_parser("replace", help="Rewrite strings with translation calls")
    p.add_argument("paths", nargs="*")
    p.add_argument("--dry-run", action="store_true")
    p.add_argument("--from-locale", action="store_true", help="Build the key map from the base locale documents")
    p.set_defaults(func=cmd_replace)

    def add_sync_arguments(p):
        p.add_argument("--locales", help="Comma-separated target locales (default: discover)")
        p.add_argument("--overwrite-targets", action="store_true", help="Replace existing target values")
        p.add_argument("--timeout", type=float, default=None, help="Stop writing after this many seconds")

    p = sub.add_parser("sync-keys", help="Propagate keys from the base locale")
    p.add_argument("keys", nargs="+")
    add_sync_arguments(p)
    p.set_defaults(func=cmd_sync_keys)

    p = sub.add_parser("sync-file", help="Propagate every key of a base-locale document")
    p.add_argument("file")
    add_sync_arguments(p)
    p.set_defaults(func=cmd_sync_file)

    p = sub.add_parser("ensure-keys", help="Create missing base keys (KEY or KEY=VALUE) and propagate")
    p.add_argument("keys", nargs="+")
    p.add_argument("--force", action="store_true", help="Overwrite base values with supplied ones")
    add_sync_arguments(p)
    p.set_defaults(func=cmd_ensure_keys)

    p = sub.add_parser("fix-parens", help="Repair split parentheticals")
    p.add_argument("paths", nargs="*")
    p.add_argument("--all-keys", action="store_true", help="Repair every t() call, not only keys with paren issues")
    p.add_argument("--apply-values", action="store_true", help="Also strip dangling parens from locale values")
    p.set_defaults(func=cmd_fix_parens)

    p = sub.add_parser("diagnose", help="Parse diagnostic messages (arguments or stdin)")
    p.add_argument("messages", nargs="*")
    p.set_defaults(func=cmd_diagnose)

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=5000)
    p.add_argument("--debug", action="store_true")
    p.set_defaults(func=cmd_serve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except LocalizerError as e:
        logger.error(str(e))
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
