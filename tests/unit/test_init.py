from __future__ import annotations

import smartretry


def test_all_exports_exist() -> None:
    for name in smartretry.__all__:
        assert hasattr(smartretry, name), name


def test_version() -> None:
    assert isinstance(smartretry.__version__, str)
