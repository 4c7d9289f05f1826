from __future__ import annotations

import pytest

from provisioner.lib.manifest import requirement_name, rewrite_lines, rewrite_requirements
from provisioner.pipeline import StepActionError


@pytest.mark.parametrize(
    "line,name",
    [
        ("requests==2.31.0", "requests"),
        ("Flask_SQLAlchemy>=3", "flask-sqlalchemy"),
        ("torch ; sys_platform == 'linux'", "torch"),
        ("numpy[extra]~=1.26", "numpy"),
        ("# comment", None),
        ("-r base.txt", None),
        ("", None),
    ],
)
def test_requirement_name(line, name):
    assert requirement_name(line) == name


def test_rewrite_lines_drops_and_replaces():
    lines = ["# deps", "torch==2.1.0", "tensorflow-gpu==2.10", "requests", ""]
    out = rewrite_lines(
        lines,
        remove=["tensorflow_gpu"],
        replace={"torch": "torch==2.1.0+cpu"},
    )
    assert out == ["# deps", "torch==2.1.0+cpu", "requests", ""]


def test_rewrite_requirements_writes_file(tmp_path):
    req = tmp_path / "requirements.txt"
    req.write_text("pywin32==306\nrequests\n", encoding="utf-8")

    assert rewrite_requirements(req, remove=["pywin32"]) is True
    assert req.read_text(encoding="utf-8") == "requests\n"
    # Second pass finds nothing to change.
    assert rewrite_requirements(req, remove=["pywin32"]) is False


def test_rewrite_requirements_dry_run_leaves_file(tmp_path):
    req = tmp_path / "requirements.txt"
    req.write_text("pywin32==306\n", encoding="utf-8")
    assert rewrite_requirements(req, remove=["pywin32"], dry_run=True) is True
    assert req.read_text(encoding="utf-8") == "pywin32==306\n"


def test_missing_manifest_is_a_step_failure(tmp_path):
    with pytest.raises(StepActionError):
        rewrite_requirements(tmp_path / "requirements.txt", remove=["x"])
