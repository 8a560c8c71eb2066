"""Read the CSV export from disk or over HTTP."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from rubbishtips.common.errors import StageError
from rubbishtips.common.fs import read_text
from rubbishtips.common.http import HttpClient


@dataclass(frozen=True)
class SourceText:
    name: str
    text: str

    @property
    def size_kb(self) -> int:
        return round(len(self.text) / 1024)


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def load_source(source: str | Path, http_client: HttpClient | None = None) -> SourceText:
    source_str = str(source)
    if is_url(source_str):
        name = PurePosixPath(urlparse(source_str).path).name or "remote.csv"
        if http_client is not None:
            return SourceText(name=name, text=http_client.get_text(source_str))
        with HttpClient() as client:
            return SourceText(name=name, text=client.get_text(source_str))

    path = Path(source_str)
    if not path.is_file():
        raise StageError(f"CSV file not found: {path}")
    try:
        text = read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise StageError(f"Could not read CSV file {path}: {exc}") from exc
    return SourceText(name=path.name, text=text)
