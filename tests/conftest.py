from __future__ import annotations

from pathlib import Path
import pytest

from scfg_core import Config, VText, VUInt32


@pytest.fixture()
def net_config() -> Config:
    """
    the [net] group with a u32 port and a str host.
    """
    config = Config()
    net = config.add_group("net")
    net.add_entry("port", VUInt32(8080))
    net.add_entry("host", VText("localhost"))
    return config


@pytest.fixture()
def cfg_path(tmp_path: Path) -> Path:
    return tmp_path / "app.cfg"
