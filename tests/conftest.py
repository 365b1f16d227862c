from pathlib import Path

import pytest


@pytest.fixture
def config_dir(tmp_path) -> Path:
    """Répertoire contenant un config.yaml minimal et un fichier de clé API."""
    (tmp_path / "api_key").write_text("dummy-key\n", encoding="utf-8")
    (tmp_path / "config.yaml").write_text(
        """
api:
  host: "http://localhost:8000/"
  api_key_file: "api_key"
  timeout_seconds: 2
machine:
  hostname_source: static
  hostname_override: "web-01"
tags:
  - "env:test"
logging:
  level: INFO
  format: plain
""",
        encoding="utf-8",
    )
    return tmp_path
