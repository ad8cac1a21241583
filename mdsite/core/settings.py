from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MDSITE_", case_sensitive=False)

    content_dir: Path = Path("content")
    output_dir: Path = Path("public")
    template: Path = Path("templates/page.html")
    suffixes: list[str] = [".md"]
    file_mode: str = "0644"
    workers: int = 1
