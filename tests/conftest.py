from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture()
def write_log(tmp_path: Path) -> Callable[[str], Path]:
    def _write(text: str, name: str = "log.txt") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
