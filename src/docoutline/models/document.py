"""Document snapshot and line edit models."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from docoutline.models.symbol import LineRange

_LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+")
_EOL_RE = re.compile(r"\r\n|\r|\n")
_TRAILING_EOL_RE = re.compile(r"(?:\r\n|\r|\n)\Z")


def split_lines(text: str) -> list[str]:
    """Split text into lines, keeping each line's terminator.

    Only ``\\r\\n``, ``\\n`` and ``\\r`` count as line breaks. A final line break terminates
    the last line rather than opening an empty one.
    """

    return _LINE_RE.findall(text)


class TextDocument(BaseModel):
    """Immutable snapshot of a document's text."""

    model_config = ConfigDict(frozen=True)

    uri: str
    type_tag: str = "plaintext"
    text: str = ""
    version: int = Field(default=1, ge=0)

    def lines(self) -> list[str]:
        return split_lines(self.text)

    @property
    def line_count(self) -> int:
        return len(self.lines())

    def line_at(self, line: int) -> str:
        """Text of ``line`` without its terminator."""

        return _TRAILING_EOL_RE.sub("", self.lines()[line])

    @property
    def eol(self) -> str:
        match = _EOL_RE.search(self.text)
        return match.group(0) if match else "\n"

    @property
    def ends_with_eol(self) -> bool:
        return bool(_TRAILING_EOL_RE.search(self.text))

    def slice_lines(self, span: LineRange) -> str:
        """Verbatim text of the lines in ``span``, terminators included."""

        return "".join(self.lines()[span.start : span.end + 1])


class LineEdit(BaseModel):
    """One atomic edit: delete a block of lines, then insert text at a line boundary.

    ``insert_at`` is expressed against the document *after* the deletion.
    """

    model_config = ConfigDict(frozen=True)

    delete: LineRange | None = None
    insert_at: int = Field(default=0, ge=0)
    text: str = ""


def apply_line_edit(document: TextDocument, edit: LineEdit) -> str:
    """Return the text produced by applying ``edit`` to ``document``.

    Inserted blocks always end on a line boundary. Whether the document ends with a line
    break is preserved.

    Raises:
        ValueError: If the edit's lines fall outside the document.
    """

    lines = document.lines()
    eol = document.eol
    had_final_eol = document.ends_with_eol
    if lines and not had_final_eol:
        lines[-1] += eol

    if edit.delete is not None:
        if edit.delete.end >= len(lines):
            raise ValueError(
                f"delete range {edit.delete} outside document of {len(lines)} lines"
            )
        del lines[edit.delete.start : edit.delete.end + 1]

    if edit.insert_at > len(lines):
        raise ValueError(f"insert line {edit.insert_at} beyond document of {len(lines)} lines")

    inserted = split_lines(edit.text)
    if inserted and not _TRAILING_EOL_RE.search(inserted[-1]):
        inserted[-1] += eol
    lines[edit.insert_at : edit.insert_at] = inserted

    text = "".join(lines)
    if not had_final_eol:
        text = _TRAILING_EOL_RE.sub("", text)
    return text
