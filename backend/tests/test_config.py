"""Tests for settings loading."""

from pathlib import Path

from plugin_archiver.core.config import Settings


def test_yaml_and_env_overrides(tmp_path: Path, monkeypatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "source:\n  base_url: https://mirror.test/plugins/\n  ref: tags/1.0\n"
        "chunking:\n  chunk_size: 25\nfetch:\n  workers: 8\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("PARC_SOURCE_BASE_URL", raising=False)
    monkeypatch.setenv("PARC_FETCH_WORKERS", "2")

    settings = Settings.from_yaml(config)

    assert settings.chunk_size == 25
    assert settings.fetch_workers == 2
    assert settings.package_url("akismet", "/readme.txt") == "https://mirror.test/plugins/akismet/tags/1.0/readme.txt"
    assert settings.db_path == tmp_path / "store.db"
