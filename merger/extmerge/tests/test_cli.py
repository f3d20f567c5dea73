import builtins
import io

import pytest

from merger.extmerge.cli.extmerge import main, read_list
from merger.extmerge.core.config import CONFIG_ENV


@pytest.fixture(autouse=True)
def no_env_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV, raising=False)


def test_cli_merges_by_path(sample_root, out_file):
    rc = main([str(sample_root), "-o", str(out_file), "-e", "ps1", "-r"])
    assert rc == 0
    text = out_file.read_text(encoding="utf-8")
    assert f"=== File: {sample_root / 'x.ps1'} ===" in text
    assert f"=== File: {sample_root / 'sub' / 'z.ps1'} ===" in text


def test_cli_defaults_to_ps1_non_recursive(sample_root, tmp_path, monkeypatch):
    monkeypatch.chdir(sample_root)
    rc = main([])
    assert rc == 0
    text = (sample_root / "output.txt").read_text(encoding="utf-8")
    assert text == f"\n\n=== File: {sample_root / 'x.ps1'} ===\na\n"


def test_cli_comma_separated_extensions(sample_root, out_file):
    assert main([str(sample_root), "-o", str(out_file), "-e", "ps1,md"]) == 0
    text = out_file.read_text(encoding="utf-8")
    assert "y.md ===" in text
    assert "x.ps1 ===" in text


def test_cli_rejects_unknown_extension(sample_root, out_file, capsys):
    rc = main([str(sample_root), "-o", str(out_file), "-e", "exe"])
    assert rc == 1
    assert "[extmerge] Error:" in capsys.readouterr().err
    assert not out_file.exists()


def test_cli_missing_root_fails(tmp_path, out_file, capsys):
    rc = main([str(tmp_path / "missing"), "-o", str(out_file)])
    assert rc == 1
    assert "Root path" in capsys.readouterr().err


def test_cli_from_list(tmp_path, out_file):
    a = tmp_path / "a.py"
    a.write_text("A\n", encoding="utf-8")
    b = tmp_path / "b.md"
    b.write_text("B\n", encoding="utf-8")
    listing = tmp_path / "files.txt"
    listing.write_text(f"{b}\n\n{a}\n{a}\n", encoding="utf-8")

    rc = main(["--from-list", str(listing), "-o", str(out_file), "-e", "py"])
    assert rc == 0
    assert out_file.read_text(encoding="utf-8") == f"\n\n=== File: {a} ===\nA\n"


def test_cli_from_list_stdin(monkeypatch, tmp_path):
    monkeypatch.setattr("sys.stdin", io.StringIO(f"{tmp_path / 'x.sh'}\n  \n"))
    assert read_list("-") == [str(tmp_path / "x.sh")]


def test_cli_from_list_and_root_are_exclusive(sample_root, tmp_path, capsys):
    rc = main([str(sample_root), "--from-list", str(tmp_path / "l.txt")])
    assert rc == 1
    assert "mutually exclusive" in capsys.readouterr().err


def test_cli_missing_list_file(tmp_path, out_file, capsys):
    rc = main(["--from-list", str(tmp_path / "nope.txt"), "-o", str(out_file)])
    assert rc == 1
    assert "Cannot read file list" in capsys.readouterr().err


def test_cli_plan_only_prints_and_does_not_write(sample_root, out_file, capsys):
    rc = main([str(sample_root), "-o", str(out_file), "-e", "ps1", "-e", "md", "--plan-only"])
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == sorted([str(sample_root / "x.ps1"), str(sample_root / "y.md")])
    assert not out_file.exists()


def test_cli_confirm_prompts_per_file(sample_root, out_file, monkeypatch):
    answers = iter(["n", "y"])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(answers))

    rc = main([str(sample_root), "-o", str(out_file), "-r", "--confirm"])
    assert rc == 0
    text = out_file.read_text(encoding="utf-8")
    # sorted order: sub/z.ps1 before x.ps1
    assert "z.ps1 ===" not in text
    assert "x.ps1 ===\na\n" in text


def test_cli_confirm_eof_declines(sample_root, out_file, monkeypatch):
    def eof(prompt=""):
        raise EOFError

    monkeypatch.setattr(builtins, "input", eof)
    assert main([str(sample_root), "-o", str(out_file), "--confirm"]) == 0
    assert out_file.read_text(encoding="utf-8") == ""


def test_cli_uses_config_file(sample_root, tmp_path, monkeypatch):
    out = tmp_path / "from-config.txt"
    cfg = tmp_path / "extmerge.yml"
    cfg.write_text(
        f"root: {sample_root}\noutput: {out}\nextensions: [md]\n",
        encoding="utf-8",
    )
    monkeypatch.setenv(CONFIG_ENV, str(cfg))

    assert main([]) == 0
    assert out.read_text(encoding="utf-8") == f"\n\n=== File: {sample_root / 'y.md'} ===\nb\n"


def test_cli_arguments_override_config(sample_root, tmp_path, out_file):
    cfg = tmp_path / "extmerge.yml"
    cfg.write_text(f"root: {sample_root}\nextensions: [md]\nrecurse: true\n", encoding="utf-8")

    assert main(["--config", str(cfg), "-o", str(out_file), "-e", "ps1"]) == 0
    text = out_file.read_text(encoding="utf-8")
    assert "y.md" not in text
    assert "z.ps1 ===" in text


def test_cli_bad_config_fails(tmp_path, capsys):
    cfg = tmp_path / "bad.yml"
    cfg.write_text("nonsense: true\n", encoding="utf-8")
    assert main(["--config", str(cfg)]) == 1
    assert "Invalid config file" in capsys.readouterr().err


def test_cli_no_recurse_overrides_config(sample_root, tmp_path, out_file):
    cfg = tmp_path / "extmerge.yml"
    cfg.write_text(f"root: {sample_root}\nrecurse: true\n", encoding="utf-8")

    assert main(["--config", str(cfg), "-o", str(out_file), "--no-recurse"]) == 0
    text = out_file.read_text(encoding="utf-8")
    assert "x.ps1 ===" in text
    assert "z.ps1" not in text


@pytest.mark.parametrize("flag", ["-r", "--recurse", "--no-recurse"])
def test_cli_recurse_flags_rejected_with_from_list(tmp_path, out_file, capsys, flag):
    listing = tmp_path / "files.txt"
    listing.write_text("", encoding="utf-8")

    rc = main(["--from-list", str(listing), "-o", str(out_file), flag])
    assert rc == 1
    assert "--from-list" in capsys.readouterr().err
    assert not out_file.exists()
