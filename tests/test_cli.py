"""Tests for command-line parsing and config resolution (no Qt involved)."""

import json

import pytest

from region_annote import __version__
from region_annote.cli import build_parser, main, resolve_config


@pytest.fixture(autouse=True)
def isolated_cwd(temp_dir, monkeypatch):
    monkeypatch.chdir(temp_dir)


def parse(*argv):
    return build_parser().parse_args(list(argv))


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        parse("--version")
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_defaults_next_to_video(temp_dir):
    cfg = resolve_config(parse(str(temp_dir / "match.mp4")))
    assert cfg.annotations_file == str(temp_dir / "annotations.json")


def test_output_overrides(temp_dir):
    cfg = resolve_config(parse("match.mp4", "--output", "notes.json"))
    assert cfg.annotations_file == "notes.json"


def test_no_save():
    cfg = resolve_config(parse("match.mp4", "--output", "notes.json", "--no-save"))
    assert cfg.annotations_file == ""


def test_config_file(temp_dir):
    path = temp_dir / "custom.json"
    path.write_text(json.dumps({"annotations_file": "from_cfg.json", "annotation_color": "#00FF00"}))
    cfg = resolve_config(parse("--config", str(path), "match.mp4"))
    assert cfg.annotations_file == "from_cfg.json"
    assert cfg.annotation_color == "#00FF00"


def test_config_in_cwd_is_picked_up(temp_dir):
    (temp_dir / "config.json").write_text(json.dumps({"scrub_step": 0.5}))
    cfg = resolve_config(parse())
    assert cfg.scrub_step == 0.5
    assert cfg.annotations_file == ""


def test_missing_video_exits_before_qt(temp_dir):
    assert main([str(temp_dir / "missing.mp4"), "--quiet"]) == 2
