import asyncio
import json

import pytest

from wmt_scraper.cli import load_page_data, main, parse_args
from wmt_scraper.messages import handle_message
from wmt_scraper.models import AnalysisResult, CandidateRecord, SearchLink
from wmt_scraper.settings import SettingsError, SettingsStore


def _store(tmp_path):
    return SettingsStore(str(tmp_path / "conf" / "settings.json"))


def test_settings_round_trip(tmp_path):
    store = _store(tmp_path)
    assert asyncio.run(handle_message({"action": "getSettings"}, settings=store)) == {"sauceNaoKey": ""}
    reply = asyncio.run(handle_message({"action": "saveSettings", "sauceNaoKey": "  abc  "}, settings=store))
    assert reply == {"ok": True}
    assert asyncio.run(handle_message({"action": "getSettings"}, settings=store)) == {"sauceNaoKey": "abc"}


def test_corrupt_settings_file_reads_as_empty(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert SettingsStore(str(path)).sauce_nao_key() == ""


def test_unwritable_settings_raise(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    store = SettingsStore(str(blocker / "settings.json"))
    with pytest.raises(SettingsError):
        store.save_sauce_nao_key("k")
    reply = asyncio.run(handle_message({"action": "saveSettings", "sauceNaoKey": "k"}, settings=store))
    assert reply["ok"] is False


def test_analyze_message_passes_snapshot_and_serializes(tmp_path):
    seen = {}

    async def fake_analyze(image_url, page_url, page_data, **kwargs):
        seen.update(image_url=image_url, page_url=page_url, page_data=page_data, kwargs=kwargs)
        rec = CandidateRecord(source="SauceNAO", method="saucenao", confidence=72, author="Rin", index_name="Pixiv Images")
        return AnalysisResult(platform=None, results=[rec], search_links=[SearchLink("IQDB", "https://iqdb.org/?url=x", "#7a5af8")])

    msg = {
        "action": "analyze",
        "imageUrl": "https://img.example.com/a.png",
        "pageUrl": "https://blog.example.com/p",
        "pageData": {"metaTags": {"author": "Rin"}, "jsonLd": [], "nearbyLinks": [], "pageTitle": "", "canonical": None},
    }
    reply = asyncio.run(handle_message(msg, settings=_store(tmp_path), analyzer=fake_analyze, debug_html=True))
    assert reply["ok"] is True
    assert seen["page_data"].meta_tags["author"] == "Rin"
    assert seen["kwargs"]["debug_html"] is True
    data = reply["data"]
    assert data["results"][0]["indexName"] == "Pixiv Images"
    assert data["results"][0]["displayHandle"] is None
    assert data["searchLinks"] == [{"label": "IQDB", "url": "https://iqdb.org/?url=x", "color": "#7a5af8"}]


def test_analyze_errors_become_error_replies(tmp_path):
    async def broken(*args, **kwargs):
        raise RuntimeError("boom")

    store = _store(tmp_path)
    assert asyncio.run(handle_message({"action": "analyze"}, settings=store))["ok"] is False
    reply = asyncio.run(handle_message({"action": "analyze", "imageUrl": "https://i/a.png"}, settings=store, analyzer=broken))
    assert reply == {"ok": False, "error": "boom"}
    assert asyncio.run(handle_message({"action": "dance"}, settings=store)) == {"ok": False, "error": "unknown action: dance"}


def test_parse_args_requires_image_url_unless_managing_settings():
    args = parse_args(["--image-url", "https://i/a.png", "--page-url", "https://p"])
    assert args.image_url == "https://i/a.png"
    assert not args.debug_html
    assert parse_args(["--show-settings"]).show_settings
    with pytest.raises(SystemExit):
        parse_args([])
    with pytest.raises(SystemExit):
        parse_args(["--image-url", "x", "--page-data", "a.json", "--page-html", "a.html"])


def test_load_page_data_from_html_file(tmp_path):
    page = tmp_path / "page.html"
    page.write_text('<html><head><meta name="author" content="Ada"><title>T</title></head></html>', encoding="utf-8")
    args = parse_args(["--image-url", "https://i/a.png", "--page-url", "https://blog.example.com/", "--page-html", str(page)])
    data = load_page_data(args)
    assert data["metaTags"] == {"author": "Ada"}
    assert data["pageTitle"] == "T"


def test_main_manages_settings(tmp_path, capsys):
    path = str(tmp_path / "settings.json")
    assert main(["--settings-path", path, "--save-saucenao-key", "k9"]) == 0
    assert json.loads(capsys.readouterr().out) == {"ok": True}
    assert main(["--settings-path", path, "--show-settings"]) == 0
    assert json.loads(capsys.readouterr().out) == {"sauceNaoKey": "k9"}


def test_unreadable_page_data_becomes_error_reply(tmp_path, capsys):
    broken = tmp_path / "page.json"
    broken.write_text("{not json", encoding="utf-8")
    base = ["--settings-path", str(tmp_path / "s.json"), "--image-url", "https://i/a.png"]
    assert main(base + ["--page-data", str(broken)]) == 1
    reply = json.loads(capsys.readouterr().out)
    assert reply["ok"] is False
    assert reply["error"].startswith("could not load page data")
    assert main(base + ["--page-data", str(tmp_path / "missing.json")]) == 1
    assert json.loads(capsys.readouterr().out)["ok"] is False
