"""Lenient CSV tokenizer for CMS exports with multi-line quoted content.

The exports this pipeline consumes carry whole HTML page bodies inside quoted
fields, so rows routinely span many physical lines. The scanner below never
fails: an unterminated quote simply runs to the end of the input.
"""

from __future__ import annotations

from typing import Iterator

_LINE_BREAKS = "\r\n"
_FIELD_END = ",\r\n"
_INLINE_SPACE = " \t"


class CsvTokenizer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.position = 0

    def rows(self) -> Iterator[list[str]]:
        """Yield each row once, in order. Consumes the tokenizer."""
        while self.position < len(self.text):
            row = self._read_row()
            if row:
                yield row

    def _read_row(self) -> list[str]:
        fields: list[str] = []
        text = self.text
        while self.position < len(text):
            fields.append(self._read_field())
            if self.position >= len(text):
                break
            char = text[self.position]
            if char == ",":
                self.position += 1
            elif char in _LINE_BREAKS:
                self._skip_line_breaks()
                break
            # Anything else directly after a closing quote starts another field.
        return fields

    def _read_field(self) -> str:
        self._skip_inline_space()
        if self.position >= len(self.text):
            return ""
        if self.text[self.position] == '"':
            return self._read_quoted()
        return self._read_unquoted()

    def _read_quoted(self) -> str:
        text = self.text
        self.position += 1
        chunks: list[str] = []
        while True:
            close = text.find('"', self.position)
            if close == -1:
                chunks.append(text[self.position :])
                self.position = len(text)
                break
            chunks.append(text[self.position : close])
            if text.startswith('""', close):
                chunks.append('"')
                self.position = close + 2
                continue
            self.position = close + 1
            break
        return "".join(chunks)

    def _read_unquoted(self) -> str:
        text = self.text
        start = self.position
        end = start
        while end < len(text) and text[end] not in _FIELD_END:
            end += 1
        self.position = end
        return text[start:end].strip()

    def _skip_inline_space(self) -> None:
        while self.position < len(self.text) and self.text[self.position] in _INLINE_SPACE:
            self.position += 1

    def _skip_line_breaks(self) -> None:
        while self.position < len(self.text) and self.text[self.position] in _LINE_BREAKS:
            self.position += 1


def parse_csv(text: str) -> list[list[str]]:
    return list(CsvTokenizer(text).rows())
