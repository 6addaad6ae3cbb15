"""Command-line entry point: ``wmt --image-url ... --page-url ...``.

Prints the analysis result (or the settings reply) as JSON on stdout; logs go
to stderr as structured JSON lines.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass

from . import config
from .logging import configure_logging, jlog, logging_context, set_global_context
from .messages import handle_message
from .scrapers import page_data_from_html
from .settings import SAUCENAO_KEY, SettingsStore
from .versioning import SCRIPT_NAME, get_scraper_version


@dataclass(frozen=True)
class CliArgs:
    image_url: str | None
    page_url: str | None
    page_data_path: str | None
    page_html_path: str | None
    settings_path: str
    save_saucenao_key: str | None
    show_settings: bool
    debug_html: bool


def validate_args(args: argparse.Namespace) -> None:
    if args.save_saucenao_key is None and not args.show_settings and not args.image_url:
        raise ValueError("--image-url is required unless managing settings")
    if args.page_data and args.page_html:
        raise ValueError("--page-data and --page-html are mutually exclusive")


def parse_args(argv: list[str] | None = None) -> CliArgs:
    p = argparse.ArgumentParser(description="Find the probable creator of an image")
    p.add_argument("--image-url", help="URL of the image (data: URLs skip the remote engines)")
    p.add_argument("--page-url", help="URL of the page the image was found on")
    p.add_argument("--page-data", help="Path to a JSON page snapshot (metaTags, jsonLd, nearbyLinks, pageTitle, canonical)")
    p.add_argument("--page-html", help="Path to the saved HTML of the page; a snapshot is built from it")
    p.add_argument("--settings-path", default=config.DEFAULT_SETTINGS_PATH)
    p.add_argument("--save-saucenao-key", metavar="KEY", help="Store a SauceNAO API key and exit")
    p.add_argument("--show-settings", action="store_true", help="Print stored settings and exit")
    p.add_argument(
        "--debug-html",
        action="store_true",
        default=config.DEBUG_HTML,
        help="Save the rendered HTML of every automated search tab under media/debug.",
    )
    ns = p.parse_args(argv)
    try:
        validate_args(ns)
    except ValueError as exc:
        p.error(str(exc))
    return CliArgs(
        image_url=ns.image_url,
        page_url=ns.page_url,
        page_data_path=ns.page_data,
        page_html_path=ns.page_html,
        settings_path=ns.settings_path,
        save_saucenao_key=ns.save_saucenao_key,
        show_settings=ns.show_settings,
        debug_html=ns.debug_html,
    )


def load_page_data(args: CliArgs) -> dict | None:
    if args.page_data_path:
        with open(args.page_data_path, encoding="utf-8") as fh:
            return json.load(fh)
    if args.page_html_path:
        with open(args.page_html_path, encoding="utf-8") as fh:
            return page_data_from_html(fh.read(), args.page_url).to_dict()
    return None


async def run(args: CliArgs) -> dict:
    """Execute one request for the supplied CLI arguments and return the reply."""

    settings = SettingsStore(args.settings_path)
    if args.save_saucenao_key is not None:
        return await handle_message({"action": "saveSettings", SAUCENAO_KEY: args.save_saucenao_key}, settings=settings)
    if args.show_settings:
        return await handle_message({"action": "getSettings"}, settings=settings)
    try:
        page_data = load_page_data(args)
    except (OSError, ValueError) as exc:
        jlog("error", event="page_data_load_error", error=str(exc))
        return {"ok": False, "error": f"could not load page data: {exc}"}
    msg = {
        "action": "analyze",
        "imageUrl": args.image_url,
        "pageUrl": args.page_url,
        "pageData": page_data,
    }
    return await handle_message(msg, settings=settings, debug_html=args.debug_html)


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    set_global_context(app="wmt_scraper")
    version = get_scraper_version()
    with logging_context(script=SCRIPT_NAME, scraper_version=version):
        args = parse_args(argv)
        reply = asyncio.run(run(args))
    json.dump(reply, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0 if reply.get("ok", True) else 1


__all__ = ["CliArgs", "load_page_data", "main", "parse_args", "run"]
