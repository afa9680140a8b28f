#!/usr/bin/env python3
"""OneTab archive command line.

Commands:
- import   Parse a DevTools JSON export or the extension's LevelDB store and
           merge it into the master record
- export   Write the master record as Markdown, one file per month/week/day
           (or a single consolidated file)
- search   Query tabs by text, regex, domain and date range
- domains  Show the most frequent domains
- script   Print the DevTools snippet that exports OneTab's storage
- copy-db  Copy a LevelDB store without its LOCK file
- info     Show configuration and default locations
- debug    list-keys / dump for a LevelDB store

Env:
- ONETAB_CONFIG_PATH: JSON file merged over the built-in defaults
- ONETAB_VERBOSE: 1/true/yes to log progress on stderr
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

from .config import extension_id_for, merge_cfg
from .dates import date_only
from .errors import InvalidExportError, StoreAccessError
from .ingest import leveldb
from .ingest.merge import count_new_groups, merge
from .ingest.normalize import parse_export
from .ingest.storage import load_json_payload, load_master, save_master, write_json, write_text
from .log import log, set_verbose
from .models import MasterData, SourceInfo
from .renderer.buckets import GROUP_BY_CHOICES
from .renderer.renderer import export_periods, export_single_file
from .search.formatting import (
    describe_predicates,
    domain_counts,
    format_domain_counts,
    format_results_as_markdown,
    format_results_for_console,
    query_label,
    results_envelope,
)
from .search.query import SearchPredicates, has_predicates, search

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

EXTRACTION_SCRIPT = r"""(async function() {
  // OneTab 1.86+ keeps its data in chrome.storage.local
  if (typeof chrome === 'undefined' || !chrome.storage || !chrome.storage.local) {
    console.error('chrome.storage.local not available: run this on the OneTab page');
    return;
  }
  const data = await chrome.storage.local.get(null);
  if (!data.state) {
    console.error('No state found in extension storage. Keys:', Object.keys(data));
    return;
  }
  let state = data.state;
  if (typeof state === 'string') state = JSON.parse(state);
  let tabGroups = state.tabGroups;
  if (typeof tabGroups === 'string') tabGroups = JSON.parse(tabGroups);
  if (!Array.isArray(tabGroups)) {
    console.error('tabGroups is not an array:', typeof tabGroups);
    return;
  }
  const exportData = {
    state: { tabGroups: tabGroups },
    _meta: {
      exportedAt: new Date().toISOString(),
      version: data.lastSeenVersion || 'unknown',
      source: 'extension-storage-export'
    }
  };
  console.log('Found', tabGroups.length, 'tab groups');
  const blob = new Blob([JSON.stringify(exportData, null, 2)], { type: 'application/json' });
  const url = URL.createObjectURL(blob);
  const a = document.createElement('a');
  a.href = url;
  a.download = 'onetab-export-' + new Date().toISOString().slice(0, 10) + '.json';
  a.click();
  URL.revokeObjectURL(url);
})();"""


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on", "y"}


def load_cfg(path: Optional[str]) -> Dict:
    if not path:
        return merge_cfg(None, None)
    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    return merge_cfg(json.loads(p.read_text(encoding="utf-8")), None)


def _err(msg: str) -> None:
    print(msg, file=sys.stderr)


def _print_summary(master: MasterData) -> None:
    stats = master.stats
    print("")
    print("📊 Summary:")
    print(f"   Total groups: {stats.total_groups}")
    print(f"   Total tabs:   {stats.total_tabs}")
    print(
        f"   Date range:   {date_only(stats.date_range.earliest)} to {date_only(stats.date_range.latest)}"
    )


def _print_import_help(cfg: Dict, default_copy: Path) -> None:
    _err("No input source specified")
    _err("")
    _err("Please provide one of the following:")
    _err("  1. JSON export from DevTools:   onetab import --input onetab-export.json")
    _err("  2. LevelDB copy:                onetab copy-db <store> ./leveldb-copy")
    _err("                                  onetab import --leveldb ./leveldb-copy")
    _err(f"  3. Or place a LevelDB copy at:  {default_copy}")
    _err("")
    _err("Browser LevelDB locations:")
    for browser in ("edge", "chrome"):
        _err(f"  {browser}: {_store_location_hint(cfg, browser)}")


def _store_location_hint(cfg: Dict, browser: str) -> str:
    local_app_data = os.environ.get("LOCALAPPDATA") or "%LOCALAPPDATA%"
    return str(
        leveldb.default_store_path(
            browser,
            extension_id_for(cfg, browser),
            profile=str(cfg.get("browserProfile") or "Default"),
            local_app_data=local_app_data,
        )
    )


def cmd_import(args: argparse.Namespace, cfg: Dict) -> int:
    print("🔄 OneTab Import")
    print("")
    browser = args.browser or cfg["defaultBrowser"]
    source = SourceInfo(
        browser=browser if browser in cfg.get("knownBrowsers", []) else "unknown",
        extension_id=args.extension_id or extension_id_for(cfg, browser),
        extraction_method="devtools",
    )
    output = Path(args.output or cfg["masterJson"]).expanduser().resolve()

    if args.input:
        input_path = Path(args.input).expanduser().resolve()
        if not input_path.exists():
            _err(f"Input file not found: {input_path}")
            return EXIT_FAILURE
        print(f"📂 Reading JSON from: {input_path}")
        incoming = parse_export(load_json_payload(input_path), source)
    else:
        store = Path(args.leveldb or cfg["leveldbCopy"]).expanduser().resolve()
        if not store.exists():
            if args.leveldb:
                _err(f"LevelDB directory not found: {store}")
                _err("Tip: copy the store first with `onetab copy-db <store> ./leveldb-copy`")
            else:
                _print_import_help(cfg, store)
            return EXIT_FAILURE
        print(f"📂 Reading LevelDB from: {store}")
        incoming = leveldb.parse_store(store, source, cfg)

    print(f"✅ Parsed {incoming.stats.total_groups} groups with {incoming.stats.total_tabs} tabs")

    master = incoming
    if output.exists():
        print("📂 Found existing master data, merging...")
        existing = load_master(output)
        added = count_new_groups(existing, incoming)
        master = merge(existing, incoming)
        if added > 0:
            print(f"✅ Added {added} new groups")
        else:
            print("ℹ️  No new groups to add")

    master = save_master(output, master)
    print(f"💾 Saved to: {output}")
    _print_summary(master)
    return EXIT_OK


def cmd_export(args: argparse.Namespace, cfg: Dict) -> int:
    print("📝 OneTab Export to Markdown")
    print("")
    input_path = Path(args.input or cfg["masterJson"]).expanduser().resolve()
    print(f"📂 Loading from: {input_path}")
    master = load_master(input_path)

    if args.single:
        out = args.output or str(Path(cfg["outputDir"]) / cfg["singleFileName"])
        path = export_single_file(master, Path(out).expanduser().resolve(), cfg)
        print(f"✅ Exported to: {path}")
        return EXIT_OK

    group_by = args.group_by or cfg["defaultGroupBy"]
    out_dir = Path(args.output or cfg["outputDir"]).expanduser().resolve()
    summary = export_periods(master, out_dir, group_by, args.date_from, args.date_to, cfg)

    if args.date_from or args.date_to:
        print(f"📅 Filtered to date range: {args.date_from or 'start'} to {args.date_to or 'now'}")
        print(f"   {summary['groups']} groups match")
    if not summary["files"]:
        print("⚠️  No groups to export")
        return EXIT_OK

    for path in summary["files"]:
        print(f"   📄 {path}")
    print("")
    print(f"✅ Exported {len(summary['files'])} Markdown file(s) to: {out_dir}")
    print("")
    print("📊 Summary:")
    print(f"   Groups exported: {summary['groups']}")
    print(f"   Tabs exported:   {summary['tabs']}")
    print(f"   Files created:   {len(summary['files'])}")
    print(f"   Grouped by:      {group_by}")
    return EXIT_OK


def cmd_search(args: argparse.Namespace, cfg: Dict) -> int:
    print("🔍 OneTab Search")
    print("")
    predicates = SearchPredicates(
        query=args.query,
        title_pattern=args.title_pattern,
        url_pattern=args.url_pattern,
        domain=args.domain,
        date_from=args.date_from,
        date_to=args.date_to,
    )
    if not has_predicates(predicates):
        _err("No search criteria specified")
        _err("")
        _err("Examples:")
        _err('  onetab search --query "github"')
        _err('  onetab search --domain "stackoverflow.com"')
        _err('  onetab search --url-pattern "youtube\\.com/watch"')
        _err('  onetab search --query "react" --from 2025-01')
        return EXIT_USAGE

    print(f"Search: {', '.join(describe_predicates(predicates))}")
    master = load_master(Path(args.input or cfg["masterJson"]).expanduser().resolve())
    results = search(master, predicates)
    print(f"✅ Found {len(results)} matches")
    print("")

    label = query_label(predicates)
    if args.format == "json":
        out = args.output or f"search-results-{int(time.time() * 1000)}.json"
        write_json(out, results_envelope(results, label))
        print(f"💾 Saved to: {out}")
    elif args.format == "markdown":
        out = args.output or f"search-results-{int(time.time() * 1000)}.md"
        write_text(out, format_results_as_markdown(results, label))
        print(f"💾 Saved to: {out}")
    else:
        print(format_results_for_console(results))
    return EXIT_OK


def cmd_domains(args: argparse.Namespace, cfg: Dict) -> int:
    master = load_master(Path(args.input or cfg["masterJson"]).expanduser().resolve())
    limit = args.limit if args.limit is not None else int(cfg.get("domainsLimit", 50))
    print(format_domain_counts(domain_counts(master), limit=limit))
    return EXIT_OK


def cmd_script(args: argparse.Namespace, cfg: Dict) -> int:
    print("📋 DevTools Extraction Script")
    print("")
    print("Run this in your browser DevTools console on the OneTab page:")
    print("")
    print("─" * 60)
    print(EXTRACTION_SCRIPT)
    print("─" * 60)
    print("")
    print("Then import the downloaded file:")
    print("  onetab import --input onetab-export-YYYY-MM-DD.json")
    return EXIT_OK


def cmd_copy_db(args: argparse.Namespace, cfg: Dict) -> int:
    dest = args.dest or cfg["leveldbCopy"]
    copied = leveldb.copy_store(args.src, dest, cfg)
    print(f"✅ Copied {len(copied)} file(s) to: {Path(dest).resolve()}")
    return EXIT_OK


def cmd_info(args: argparse.Namespace, cfg: Dict) -> int:
    print("📋 OneTab Importer Configuration")
    print("")
    print("Default Extension IDs:")
    for browser in ("edge", "chrome"):
        print(f"  {browser}: {extension_id_for(cfg, browser)}")
    print("")
    print("Default Paths:")
    print(f"  Master JSON:  {cfg['masterJson']}")
    print(f"  Output Dir:   {cfg['outputDir']}")
    print(f"  LevelDB Copy: {cfg['leveldbCopy']}")
    print("")
    print("Browser LevelDB Locations (Windows):")
    for browser in ("edge", "chrome"):
        print(f"  {browser}: {_store_location_hint(cfg, browser)}")
    return EXIT_OK


def cmd_debug_list_keys(args: argparse.Namespace, cfg: Dict) -> int:
    keys = leveldb.list_keys(args.path)
    print("Keys in LevelDB:")
    for key in keys:
        print(f"  {key}")
    print("")
    print(f"Total: {len(keys)} keys")
    return EXIT_OK


def cmd_debug_dump(args: argparse.Namespace, cfg: Dict) -> int:
    data = leveldb.dump_store(args.path)
    if args.output:
        write_json(args.output, data)
        print(f"✅ Dumped to: {args.output}")
    else:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="onetab", description="Archive, search and export OneTab tab groups.")
    parser.add_argument("--config", help="JSON config merged over the defaults")
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress to stderr")
    sub = parser.add_subparsers(dest="command", metavar="command")

    p = sub.add_parser("import", help="Import OneTab data from a JSON export or LevelDB")
    p.add_argument("-i", "--input", help="JSON file from the DevTools export")
    p.add_argument("-l", "--leveldb", help="LevelDB directory path")
    p.add_argument("-b", "--browser", choices=["edge", "chrome"], help="browser type")
    p.add_argument("-e", "--extension-id", help="custom extension id")
    p.add_argument("-o", "--output", help="master JSON path")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("export", help="Export master data to Markdown")
    p.add_argument("-i", "--input", help="master JSON path")
    p.add_argument("-o", "--output", help="output directory (or file with --single)")
    p.add_argument("-g", "--group-by", choices=GROUP_BY_CHOICES, help="period size")
    p.add_argument("--from", dest="date_from", help="YYYY, YYYY-MM, YYYY-MM-DD or ISO 8601")
    p.add_argument("--to", dest="date_to", help="YYYY, YYYY-MM, YYYY-MM-DD or ISO 8601")
    p.add_argument("--single", action="store_true", help="one consolidated file")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("search", help="Search tabs")
    p.add_argument("-q", "--query", help="text matched against title, URL and domain")
    p.add_argument("-u", "--url-pattern", help="URL regex")
    p.add_argument("-t", "--title-pattern", help="title regex")
    p.add_argument("-d", "--domain", help="domain filter")
    p.add_argument("--from", dest="date_from", help="YYYY, YYYY-MM, YYYY-MM-DD or ISO 8601")
    p.add_argument("--to", dest="date_to", help="YYYY, YYYY-MM, YYYY-MM-DD or ISO 8601")
    p.add_argument("-f", "--format", choices=["console", "json", "markdown"], default="console")
    p.add_argument("-i", "--input", help="master JSON path")
    p.add_argument("-o", "--output", help="file for json/markdown results")
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("domains", help="List the most frequent domains")
    p.add_argument("-i", "--input", help="master JSON path")
    p.add_argument("-n", "--limit", type=int, help="number of domains to show")
    p.set_defaults(func=cmd_domains)

    p = sub.add_parser("script", help="Print the DevTools extraction script")
    p.set_defaults(func=cmd_script)

    p = sub.add_parser("copy-db", help="Copy a LevelDB store, skipping its LOCK file")
    p.add_argument("src", help="extension store directory")
    p.add_argument("dest", nargs="?", help="destination directory")
    p.set_defaults(func=cmd_copy_db)

    p = sub.add_parser("info", help="Show configuration and paths")
    p.set_defaults(func=cmd_info)

    debug = sub.add_parser("debug", help="Debug utilities").add_subparsers(dest="debug_command", metavar="command")
    p = debug.add_parser("list-keys", help="List all keys in a LevelDB store")
    p.add_argument("path")
    p.set_defaults(func=cmd_debug_list_keys)
    p = debug.add_parser("dump", help="Dump all data from a LevelDB store")
    p.add_argument("path")
    p.add_argument("-o", "--output", help="output JSON file")
    p.set_defaults(func=cmd_debug_dump)

    return parser


def main(argv: List[str]) -> int:
    parser = build_parser()
    args = parser.parse_args(argv[1:])
    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    set_verbose(args.verbose or _env_flag("ONETAB_VERBOSE"))
    try:
        cfg = load_cfg(args.config or os.environ.get("ONETAB_CONFIG_PATH"))
        log(f"command: {args.command}")
        return args.func(args, cfg)
    except FileNotFoundError as exc:
        _err(f"❌ {exc}")
        if "Master data" in str(exc):
            _err("Tip: run import first:  onetab import --input your-export.json")
        return EXIT_FAILURE
    except OSError as exc:
        target = exc.filename or "file"
        _err(f"❌ Could not access {target}: {exc.strerror or exc}")
        _err("Check that the path is a regular file (not a directory) and that you can read and write it.")
        return EXIT_FAILURE
    except InvalidExportError as exc:
        _err(f"❌ {exc}")
        return EXIT_FAILURE
    except StoreAccessError as exc:
        _err(f"❌ {exc}")
        return EXIT_FAILURE
    except json.JSONDecodeError as exc:
        _err(f"❌ Not valid JSON: {exc}")
        return EXIT_FAILURE
    except UnicodeDecodeError as exc:
        _err(f"❌ Not valid UTF-8 text: {exc}")
        return EXIT_FAILURE
    except ValueError as exc:
        # unparsable --from/--to values
        _err(f"❌ {exc}")
        return EXIT_USAGE


def run() -> None:
    raise SystemExit(main(sys.argv))


if __name__ == "__main__":
    run()
