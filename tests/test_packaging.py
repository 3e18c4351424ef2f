"""
Checks on the packaging metadata.
"""

import re
from pathlib import Path


ROOT = Path(__file__).resolve().parent.parent


def test_metadata_files_exist():
    pyproject = (ROOT / "pyproject.toml").read_text()

    referenced = re.findall(r'^(?:readme|license)\s*=\s*"([^"]+)"', pyproject, re.MULTILINE)

    for name in referenced:
        assert (ROOT / name).is_file(), name
        assert Path(name).stem.upper() in {"README", "LICENSE"}, name
