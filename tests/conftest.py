"""
Pytest configuration for the query-string SerDe.

Provides fixtures for:
- Bound schemas and decoders used across unit tests
- Sample input files written to a temporary directory
- Settings isolation from the developer's environment
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from querystring_serde.config import Settings, get_settings
from querystring_serde.decoder import RecordDecoder
from querystring_serde.domain.types import Schema
from querystring_serde.schema import bind_from_strings

SAMPLE_LINES = [
    "K1\tName=Jane%20Doe&age=42&vip=TRUE&score=1.5",
    "K2\tname=Bob&age=7&vip=nope",
    "",
    "K3\tage=19&extra=ignored",
]

_SETTINGS_ENV = (
    "QS_COLUMNS",
    "QS_COLUMN_TYPES",
    "QS_INPUT_ENCODING",
    "QS_SKIP_MALFORMED",
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Clear settings-related env vars and the cached Settings around each test.
    """
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.
    """
    return Settings(
        columns="key,name,age",
        column_types="string,string,int",
        log_level="DEBUG",
        _env_file=None,
    )


@pytest.fixture(scope="session")
def people_schema() -> Schema:
    """
    Schema covering the synthetic key, text, integer, boolean and float columns.
    """
    return bind_from_strings("key,name,age,vip,score", "string,string,int,boolean,double")


@pytest.fixture
def people_decoder(people_schema: Schema) -> RecordDecoder:
    return RecordDecoder(people_schema)


@pytest.fixture
def people_file(tmp_path: Path) -> Path:
    """
    Small input file: three decodable lines and one blank line.
    """
    path = tmp_path / "people.tsv"
    path.write_text("\n".join(SAMPLE_LINES) + "\n", encoding="utf-8")
    return path
