#!/usr/bin/env python3
from __future__ import annotations
import os
import sys
import argparse
import asyncio
import shutil
import json
import re
from typing import List, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from src.models.connection import ConnectionRecord
from src.models.detail import DetailView, PageReport
from src.models.entry import PageSecurityEntry
from src.models.events import event_from_dict, PageEvent
from src.models.exceptions import CertBadgeException, ConfigurationException
from src.models.settings import MonitorConfig
from src.core.assets import GlyphAssetSource
from src.core.classifier import classify
from src.core.composer import DetailViewComposer
from src.core.dispatcher import SecurityEventDispatcher
from src.core.presenter import DetailViewPresenter
from src.core.providers import RecordedHandshakeProvider
from src.core.renderer import IconStateRenderer
from src.core.store import SecurityRecordStore
from src.utils.logger import setup_logging, get_logger
from src.utils.output_formatter import ResultSerializer
from config.constants import DEFAULT_ICON_PATHS, EXIT_CODES, get_version

logger = get_logger("cli")

HELP_THEME = {
    "accent": "bright_cyan",
    "desc": "grey70",
    "section": "bright_yellow",
    "paren": "white",
}

TITLE = "certbadge - TLS connection trust badge and certificate inspector"

RECORD_PAGE_ID = "record"


class WideFormatter(argparse.RawTextHelpFormatter):
    def __init__(self, prog):
        width = shutil.get_terminal_size((100, 20)).columns
        super().__init__(prog, max_help_position=32, width=max(90, min(width, 140)))

def _opt_metavar(action: argparse.Action) -> str:
    if action.option_strings:
        left = ", ".join(action.option_strings)
        if action.metavar:
            left += f" {action.metavar}"
        return left
    return action.metavar or action.dest

def _style_parens_rich(text: "Text", color: str) -> None:
    s = text.plain
    for m in re.finditer(r"\([^)]*\)", s):
        text.stylize(color, m.start(), m.end())

def _rich_print_help_aligned(parser: argparse.ArgumentParser, title: str) -> None:
    console = Console()
    width = console.size.width
    console.print(Text(title, style=f"bold {HELP_THEME['accent']}"))

    all_lefts = []
    for g in parser._action_groups:
        for a in g._group_actions:
            all_lefts.append(_opt_metavar(a))
    left_w = max((len(s) for s in all_lefts), default=24)
    left_w = max(22, min(left_w, 36))

    for group in parser._action_groups:
        actions = list(group._group_actions)
        if not actions:
            continue
        console.print(f"[{HELP_THEME['section']}]{group.title}[/]")
        table = Table(box=None, show_header=False, pad_edge=False, padding=(0, 1))
        table.add_column("opt", style=f"bold {HELP_THEME['accent']}", no_wrap=True, min_width=left_w, max_width=left_w)
        rem = max(20, width - left_w - 4)
        table.add_column("desc", style=HELP_THEME["desc"], overflow="fold", min_width=rem, max_width=rem)
        for a in actions:
            t_desc = Text(a.help or "", style=HELP_THEME["desc"])
            _style_parens_rich(t_desc, HELP_THEME["paren"])
            table.add_row(_opt_metavar(a).ljust(left_w), t_desc)
        console.print(table)
        console.print()


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)

def _load_events(path: str) -> List[PageEvent]:
    events: List[PageEvent] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                events.append(event_from_dict(json.loads(line)))
            except (json.JSONDecodeError, CertBadgeException) as e:
                logger.warning(f"Skipping event on line {line_num}: {e}")
    return events


class CertBadgeCLI:
    def __init__(self):
        self.parser = self._create_parser()
        self.config: MonitorConfig | None = None
        self.assets: Optional[GlyphAssetSource] = None

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description=TITLE, formatter_class=WideFormatter, add_help=False, usage=argparse.SUPPRESS,)
        info = parser.add_argument_group("Information Options")
        info.add_argument("-h", "--help", action="store_true", help="Show this help message and exit")
        info.add_argument("-V", "--version", action="store_true", help="Show version information and exit")

        inp = parser.add_argument_group("Input Options")
        inp.add_argument("record", nargs="?", help="Recorded security info JSON for one connection")
        inp.add_argument("--url", help="URL the record was captured for (enables the freshness and HTTP checks)")
        inp.add_argument("--events", help="Replay a JSONL page event log through the dispatcher")
        inp.add_argument("--records", help="JSON object mapping request ids to recorded security info (used with --events)")
        inp.add_argument("--page", help="Only report this page id (with --events)")

        badge = parser.add_argument_group("Badge Options")
        badge.add_argument("--theme", choices=sorted(DEFAULT_ICON_PATHS), help="Theme of the default icon (default: light)")
        badge.add_argument("--glyph-light", help="Path or URL of the light badge glyph")
        badge.add_argument("--glyph-dark", help="Path or URL of the dark badge glyph")
        badge.add_argument("--keep-stale-badge", action="store_true", help="Keep the badge after client-side navigation to another origin")

        out = parser.add_argument_group("Output Options")
        out.add_argument("--json", action="store_true", help="Emit reports as JSON")
        out.add_argument("-o", "--output", help="Write reports to file")
        out.add_argument("--quiet", action="store_true", help="Suppress log messages")
        out.add_argument("--verbose", action="store_true", help="Debug logging")
        out.add_argument("--log-file", help="Also write logs to this file (rotated)")
        return parser

    def parse_arguments(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        return self.parser.parse_args(argv)

    def show_help(self) -> None:
        _rich_print_help_aligned(self.parser, TITLE)

    def _create_config(self, args: argparse.Namespace) -> MonitorConfig:
        config = MonitorConfig.from_env(
            theme=args.theme,
            log_level="DEBUG" if args.verbose else None,
            log_file=args.log_file,
        )
        if args.glyph_light:
            config.glyph_paths["light"] = args.glyph_light
        if args.glyph_dark:
            config.glyph_paths["dark"] = args.glyph_dark
        if args.keep_stale_badge:
            config.invalidate_stale_badge = False
        config.validate()
        return config

    def _create_renderer(self, config: MonitorConfig) -> IconStateRenderer:
        self.assets = GlyphAssetSource(
            config.glyph_paths,
            timeout=config.asset_timeout,
            max_retries=config.asset_retries,
        )
        return IconStateRenderer(self.assets, theme=config.theme, size=config.badge_size)

    async def _inspect_record(self, args: argparse.Namespace, renderer: IconStateRenderer) -> List[PageReport]:
        self.assets.start()
        record = ConnectionRecord.from_dict(_load_json(args.record))

        if args.url:
            store = SecurityRecordStore()
            store.capture(RECORD_PAGE_ID, record, None, args.url)
            view = DetailViewPresenter(store).present(RECORD_PAGE_ID, args.url)
        else:
            entry = PageSecurityEntry(page_id=RECORD_PAGE_ID, record=record, origin_url="")
            view = DetailView(model=DetailViewComposer().compose(entry))

        # one-shot report: draw the badge with whatever glyphs end up loading
        await self.assets.wait()
        badge = renderer.render(classify(record))
        return [PageReport(page_id=RECORD_PAGE_ID, url=args.url, badge=badge.to_dict(), view=view)]

    async def _replay_events(self, args: argparse.Namespace, renderer: IconStateRenderer) -> List[PageReport]:
        self.assets.start()
        provider = RecordedHandshakeProvider.from_file(args.records) if args.records else RecordedHandshakeProvider({})
        store = SecurityRecordStore()
        dispatcher = SecurityEventDispatcher(store, provider, renderer, config=self.config)
        presenter = DetailViewPresenter(store)

        events = _load_events(args.events)
        logger.debug(f"Replaying {len(events)} events")
        for event in events:
            await dispatcher.dispatch(event)
            await asyncio.sleep(0)
        await dispatcher.drain()
        # badges drawn before a glyph arrived are redrawn by the dispatcher
        await self.assets.wait()

        reports: List[PageReport] = []
        for page_id in dispatcher.known_pages():
            if args.page is not None and str(page_id) != args.page:
                continue
            url = dispatcher.page_url(page_id)
            badge = dispatcher.badge(page_id)
            reports.append(PageReport(
                page_id=page_id,
                url=url,
                badge=badge.to_dict() if badge else renderer.render(None).to_dict(),
                view=presenter.present(page_id, url),
            ))
        logger.debug(f"Replay stats: {dispatcher.stats}")
        return reports

    def _write_output(self, reports: List[PageReport], args: argparse.Namespace) -> None:
        serializer = ResultSerializer()
        fmt = "json" if args.json else "text"
        if args.output:
            d = os.path.dirname(args.output)
            if d and not os.path.exists(d):
                os.makedirs(d, exist_ok=True)
            with open(args.output, "w", encoding="utf-8") as f:
                serializer.serialize_to_file(reports, f, fmt)
            logger.debug(f"Reports written to: {args.output}")
            return
        if args.json:
            serializer.serialize_to_file(reports, sys.stdout, "json")
        else:
            serializer.print_reports(reports)

    def run(self, args: argparse.Namespace) -> int:
        if not args.record and not args.events:
            logger.error("Provide a recorded security info file or --events")
            return EXIT_CODES["USAGE_ERROR"]

        try:
            self.config = self._create_config(args)
        except ConfigurationException as e:
            logger.error(f"Invalid configuration: {e}")
            return EXIT_CODES["CONFIG_ERROR"]

        setup_logging(
            level=self.config.log_level,
            log_file=self.config.log_file,
            enable_console=not args.quiet,
        )

        renderer = self._create_renderer(self.config)
        try:
            if args.events:
                reports = asyncio.run(self._replay_events(args, renderer))
            else:
                reports = asyncio.run(self._inspect_record(args, renderer))
            self._write_output(reports, args)
            return EXIT_CODES["SUCCESS"]
        except (OSError, json.JSONDecodeError, CertBadgeException) as e:
            logger.error(f"Cannot process input: {e}")
            return EXIT_CODES["INPUT_ERROR"]
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            return EXIT_CODES["UNKNOWN_ERROR"]
        finally:
            if self.assets:
                self.assets.close()

def main(argv: Optional[List[str]] = None):
    cli = CertBadgeCLI()
    args = cli.parse_arguments(argv)

    if args.help:
        cli.show_help()
        sys.exit(EXIT_CODES["SUCCESS"])

    if args.version:
        c = Console()
        c.print(f"[bold {HELP_THEME['accent']}]certbadge[/] v{get_version()}")
        sys.exit(EXIT_CODES["SUCCESS"])

    sys.exit(cli.run(args))


if __name__ == "__main__":
    main()
