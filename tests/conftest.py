from __future__ import annotations

from pathlib import Path

import pytest

from sigma_serve.config import ServeConfig, make_config

INDEX_BYTES = b"<html><body>home</body></html>\n"
ABOUT_BYTES = "<p>café ☕</p>\n".encode("utf-8")
NOT_FOUND_PAGE_BYTES = b"<html><body>custom missing page</body></html>\n"
SECRET_BYTES = b"top secret\n"


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A served root with a sibling directory and a secret file beside it."""

    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_BYTES)
    (root / "about.html").write_bytes(ABOUT_BYTES)
    (root / "404.html").write_bytes(NOT_FOUND_PAGE_BYTES)
    (root / "docs").mkdir()
    (root / "docs" / "guide.html").write_bytes(b"guide")

    (tmp_path / "secret.html").write_bytes(SECRET_BYTES)
    evil = tmp_path / "site-evil"
    evil.mkdir()
    (evil / "page.html").write_bytes(SECRET_BYTES)
    return root


@pytest.fixture
def config(site: Path) -> ServeConfig:
    return make_config(site, bind="127.0.0.1:0")
