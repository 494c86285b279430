"""
Pytest configuration and fixtures.
"""

from pathlib import Path

import pytest


DATA_DIR = Path(__file__).parent / "data"


SERVER_CONFIG = """\
server   {
    listen  80
    server_name    example.com   www.example.com

    location / {
        root   /var/www/html
        index  index.html index.htm
    }

    location = /robots.txt {
        allow all
        log_not_found off
        access_log off
    }
}
"""


@pytest.fixture
def data_dir() -> Path:
    """Directory holding the golden test documents."""
    return DATA_DIR


@pytest.fixture
def server_config() -> str:
    """An nginx-like server document."""
    return SERVER_CONFIG


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Path to a document file written from the server example."""
    path = tmp_path / "server.conf"
    path.write_text(SERVER_CONFIG, encoding="utf-8")
    return path
