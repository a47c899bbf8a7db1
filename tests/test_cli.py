import os
import sys

import pytest

from bldd import cli, scanner
from bldd.probe import ProbeResult

from conftest import FakeProbe, make_tree

TABLE = {
    "app": ProbeResult(True, "x86_64", ("libpthread.so.0", "libc.so.6")),
    "tool": ProbeResult(True, "x86_64", ("libc.so.6",)),
}


@pytest.fixture
def fake_scan(monkeypatch):
    probe = FakeProbe(TABLE)

    def run(root, matcher, store, jobs=1):
        return scanner.scan(root, matcher, store, probe=probe, jobs=jobs)

    monkeypatch.setattr(cli, "scan", run)
    return probe


def test_missing_library_is_fatal(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--dir", str(tmp_path)])
    assert exc.value.code != 0
    assert "--lib" in capsys.readouterr().err


def test_missing_directory_is_fatal(tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--lib", "c", "--dir", str(tmp_path / "nope")])
    assert "Cannot open directory" in str(exc.value.code)


def test_unknown_format_is_fatal(tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--lib", "c", "--dir", str(tmp_path), "--format", "html"])
    assert exc.value.code == 2


def test_text_report(tmp_path, fake_scan, capsys):
    root = make_tree(tmp_path / "root", ["bin/app", "bin/tool"])
    base = str(tmp_path / "report")
    assert cli.main(["-l", "c", "-l", "pthread", "-d", str(root), "-o", base]) == 0
    out = capsys.readouterr().out
    assert f"Text report saved to {base}.txt" in out
    assert "Summary: Found 3 executables across 1 architectures" in out
    with open(base + ".txt", encoding="utf-8") as fp:
        text = fp.read()
    assert "libc.so (2 execs)" in text
    assert f"-> {os.path.join(str(root), 'bin', 'app')}" in text
    assert not os.path.exists(base + ".pdf")


def test_both_formats(tmp_path, fake_scan):
    pytest.importorskip("reportlab")
    root = make_tree(tmp_path / "root", ["bin/app"])
    base = str(tmp_path / "report")
    assert cli.main(["-l", "c", "-d", str(root), "-o", base, "-f", "both"]) == 0
    assert os.path.exists(base + ".txt")
    assert os.path.exists(base + ".pdf")


def test_unwritable_output_is_reported(tmp_path, fake_scan, capsys, caplog):
    root = make_tree(tmp_path / "root", ["bin/app"])
    base = str(tmp_path / "missing-dir" / "report")
    assert cli.main(["-l", "c", "-d", str(root), "-o", base]) == 1
    assert "Cannot create Text report" in caplog.text
    assert "Summary:" in capsys.readouterr().out


def test_zero_disables_ceiling():
    args = cli._parse_args(["-l", "c", "-d", ".", "--max-archs", "0"])
    assert args.max_archs is None
    assert args.max_libs == 100


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="needs byte file names")
def test_undecodable_file_name_in_both_formats(tmp_path, monkeypatch, capsys):
    pytest.importorskip("reportlab")
    root = make_tree(tmp_path / "root", ["bin/app"])
    raw_name = os.path.join(os.fsencode(str(root / "bin")), b"ls_\xff")
    with open(raw_name, "wb"):
        pass
    table = dict(TABLE)
    table[os.fsdecode(b"ls_\xff")] = ProbeResult(True, "x86_64", ("libc.so.6",))
    probe = FakeProbe(table)
    monkeypatch.setattr(
        cli, "scan", lambda root, matcher, store, jobs=1: scanner.scan(root, matcher, store, probe=probe, jobs=jobs)
    )
    base = str(tmp_path / "report")

    assert cli.main(["-l", "c", "-d", str(root), "-o", base, "-f", "both"]) == 0
    out = capsys.readouterr().out
    assert "Summary: Found 2 executables across 1 architectures" in out
    with open(base + ".txt", "rb") as fp:
        assert b"-> " + raw_name + b"\n" in fp.read()
    with open(base + ".pdf", "rb") as fp:
        assert fp.read().startswith(b"%PDF")
