"""测试公共 fixtures。"""

from pathlib import Path

import pytest

from autohunt.action import hid
from testing._fakes import FakeClock


@pytest.fixture
def tmp_yaml(tmp_path: Path):
    """创建临时 YAML 文件的工厂 fixture。"""

    def _factory(name: str, content: str) -> Path:
        p = tmp_path / name
        p.write_text(content, encoding="utf-8")
        return p

    return _factory


@pytest.fixture
def clock() -> FakeClock:
    """从 1000s 开始的假时钟。"""
    return FakeClock(start=1000.0)


@pytest.fixture(autouse=True)
def _seed_hid_rng():
    """固定输入延迟的随机源，保证用例可复现。"""
    hid.reseed(12345)
    yield
    hid.reseed()
