import json
from pathlib import Path

from matte_app.cli import main
from matte_core import decode


def test_local_command(make_png, tmp_path, capsys):
    src = make_png("icon.png", (5, 5), (255, 255, 255))
    code = main(["local", "-i", str(src), "-o", str(tmp_path / "out"), "--bg-color", "white"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["method"] == "local"
    assert payload["resolved_color"] == "#ffffff"
    assert decode(Path(payload["path"])).pixel(0, 0)[3] == 0


def test_local_command_bad_color(make_png, tmp_path, capsys):
    src = make_png("icon.png", (5, 5), (255, 255, 255))
    code = main(["local", "-i", str(src), "-o", str(tmp_path / "out"), "--bg-color", "#xyz"])
    assert code == 1
    assert "error" in json.loads(capsys.readouterr().err)


def test_tolerance_out_of_range_reported_as_json(make_png, tmp_path, capsys):
    src = make_png("icon.png", (5, 5), (255, 255, 255))
    code = main(["local", "-i", str(src), "-o", str(tmp_path / "out"), "--tolerance", "300"])
    assert code == 1
    assert "tolerance" in json.loads(capsys.readouterr().err)["error"]
    assert not (tmp_path / "out").exists()


def test_batch_tolerance_out_of_range_reported_as_json(tmp_path, capsys):
    code = main(["batch-local", str(tmp_path), "-o", str(tmp_path / "out"), "--tolerance", "-1"])
    assert code == 1
    assert "tolerance" in json.loads(capsys.readouterr().err)["error"]


def test_blocked_output_dir_reported_as_json(make_png, tmp_path, capsys):
    src = make_png("icon.png", (5, 5), (255, 255, 255))
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    code = main(["local", "-i", str(src), "-o", str(blocker / "out")])
    assert code == 1
    assert "error" in json.loads(capsys.readouterr().err)


def test_two_pass_command(make_png, tmp_path, capsys):
    w = make_png("w.png", (2, 2), (200, 100, 50))
    b = make_png("b.png", (2, 2), (200, 100, 50))
    out = tmp_path / "result.png"
    assert main(["two-pass", "--white", str(w), "--black", str(b), "-o", str(out)]) == 0
    assert decode(out).pixel(1, 1) == (200, 100, 50, 255)
    assert json.loads(capsys.readouterr().out)["method"] == "two-pass"


def test_two_pass_command_mismatch(make_png, tmp_path, capsys):
    w = make_png("w.png", (10, 10), (255, 255, 255))
    b = make_png("b.png", (10, 11), (0, 0, 0))
    out = tmp_path / "result.png"
    assert main(["two-pass", "--white", str(w), "--black", str(b), "-o", str(out)]) == 1
    assert not out.exists()
    assert "Dimension mismatch" in json.loads(capsys.readouterr().err)["error"]


def test_two_pass_command_missing_input(tmp_path, capsys):
    code = main([
        "two-pass", "--white", str(tmp_path / "w.png"), "--black", str(tmp_path / "b.png"),
        "-o", str(tmp_path / "r.png"),
    ])
    assert code == 1
    assert "not found" in json.loads(capsys.readouterr().err)["error"]


def test_batch_two_pass_command(make_png, tmp_path, capsys):
    make_png("in/star_white.png", (2, 2), (255, 255, 255))
    make_png("in/star_black.png", (2, 2), (0, 0, 0))
    make_png("in/moon_white.png", (2, 2), (255, 255, 255))
    code = main([
        "batch-two-pass",
        "--white", str(tmp_path / "in" / "star_white.png"), str(tmp_path / "in" / "moon_white.png"),
        "--black", str(tmp_path / "in" / "star_black.png"),
        "-o", str(tmp_path / "out"),
    ])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert [Path(p).name for p in payload["outputs"]] == ["star_transparent.png"]
    assert [Path(p).name for p in payload["unpaired"]] == ["moon_white.png"]


def test_batch_local_command(make_png, tmp_path, capsys):
    make_png("in/a.png", (3, 3), (0, 255, 0))
    code = main(["batch-local", str(tmp_path / "in"), "-o", str(tmp_path / "out")])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert len(payload["outputs"]) == 1
