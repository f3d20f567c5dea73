import pytest


@pytest.fixture
def sample_root(tmp_path):
    """
    root/
      x.ps1   "a"
      y.md    "b"
      sub/z.ps1 "c"
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "x.ps1").write_text("a", encoding="utf-8")
    (root / "y.md").write_text("b", encoding="utf-8")
    (root / "sub").mkdir()
    (root / "sub" / "z.ps1").write_text("c", encoding="utf-8")
    return root.resolve()


@pytest.fixture
def out_file(tmp_path):
    return tmp_path / "merges" / "output.txt"
