import json
import logging

import pytest

import menuboard

pytestmark = [pytest.mark.integration]


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # main() points the root handlers at the captured stdout
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)


def _run(tmp_path, *args):
    return menuboard.main(["--config-dir", str(tmp_path / "config"), *args])


def test_show_without_menu(tmp_path, capsys) -> None:
    assert _run(tmp_path, "--show") == 0
    assert "(no menu saved)" in capsys.readouterr().out


def test_export_without_menu_fails(tmp_path) -> None:
    assert _run(tmp_path, "--export", str(tmp_path / "out.json")) == 1


def test_import_show_export(tmp_path, capsys, sample_items) -> None:
    source = tmp_path / "in.json"
    source.write_text(json.dumps({"menu": {"items": sample_items}}))

    assert _run(tmp_path, "--import", str(source)) == 0

    capsys.readouterr()
    assert _run(tmp_path, "--show") == 0
    out = capsys.readouterr().out
    assert "Free Board [board] -> #" in out
    assert "  Updates [notice-a] -> /notice/notice-a" in out

    target = tmp_path / "out.json"
    assert _run(tmp_path, "--export", str(target)) == 0
    assert json.loads(target.read_text())["menu"]["items"] == sample_items


def test_import_invalid_menu_fails(tmp_path) -> None:
    source = tmp_path / "bad.json"
    source.write_text(json.dumps({"menu": {"items": [{"title": "No id"}]}}))
    assert _run(tmp_path, "--import", str(source)) == 1


def test_import_missing_file_fails(tmp_path) -> None:
    assert _run(tmp_path, "--import", str(tmp_path / "nope.json")) == 1


def test_import_malformed_envelope_fails(tmp_path) -> None:
    source = tmp_path / "envelope.json"
    source.write_text(json.dumps({"menu": "oops"}))
    assert _run(tmp_path, "--import", str(source)) == 1


def test_actions_are_exclusive(tmp_path) -> None:
    with pytest.raises(SystemExit):
        _run(tmp_path, "--show", "--export", "x.json")


def test_import_over_existing_menu_keeps_backup(tmp_path, sample_items) -> None:
    source = tmp_path / "in.json"
    source.write_text(json.dumps({"menu": {"items": sample_items}}))

    assert _run(tmp_path, "--import", str(source)) == 0
    assert not list((tmp_path / "config").glob("menuboard.db.backup.*"))

    assert _run(tmp_path, "--import", str(source)) == 0
    assert len(list((tmp_path / "config").glob("menuboard.db.backup.*"))) == 1
