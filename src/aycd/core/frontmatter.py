"""Frontmatter handling for AYCD documents.

Documents may start with a block of flat ``key: value`` lines fenced by
``---`` lines. This is deliberately not YAML: there are no lists, nesting
or quoting, and a value is either an integer or a string.
"""

import re

DELIMITER = "---"

# Characters that are not allowed in filenames on at least one platform
_INVALID_FILENAME_CHARS = str.maketrans({c: "-" for c in '/\\:*?"<>|'})

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

FrontmatterValue = int | str


def sanitize_filename(name: str) -> str:
    """Replace characters that are invalid in filenames with ``-``.

    Examples:
        "My Novel: Chapter 1" -> "My Novel- Chapter 1"
        "Test/File" -> "Test-File"
    """
    return name.translate(_INVALID_FILENAME_CHARS).strip()


def count_words(text: str) -> int:
    """Count whitespace-delimited words."""
    return len(text.split())


def parse_value(raw: str) -> FrontmatterValue:
    """Parse a frontmatter value: base-10 integers become ``int``."""
    value = raw.strip()
    if _INTEGER_PATTERN.fullmatch(value):
        return int(value)
    return value


def _lines(text: str) -> list[str]:
    """Split on ``\\n`` only, dropping a trailing ``\\r`` from each line."""
    return [line.removesuffix("\r") for line in text.split("\n")]


def parse_frontmatter(content: str) -> tuple[dict[str, FrontmatterValue], str]:
    """Split ``content`` into (frontmatter fields, body).

    The block must open on the very first line with a line that is exactly
    ``---`` and close on a later line that is exactly ``---``. Without both
    delimiters the whole content is body. Only ``\\n`` and ``\\r\\n`` end a
    line; other Unicode line separators are ordinary characters.
    """
    raw_lines = content.split("\n")
    lines = _lines(content)
    if lines[0] != DELIMITER:
        return {}, content

    for index in range(1, len(lines)):
        if lines[index] == DELIMITER:
            break
    else:
        return {}, content

    fields: dict[str, FrontmatterValue] = {}
    for line in lines[1:index]:
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        fields[key] = parse_value(value)

    return fields, "\n".join(raw_lines[index + 1 :])


def render_frontmatter(fields: dict[str, FrontmatterValue], body: str) -> str:
    """Build document text from frontmatter fields and a body."""
    header = "".join(f"{key}: {value}\n" for key, value in fields.items())
    return f"{DELIMITER}\n{header}{DELIMITER}\n\n{body}"


def first_heading(body: str) -> str | None:
    """Text of the first level-1 ``# `` heading in ``body``, if any."""
    for line in _lines(body):
        if line.startswith("# "):
            return line[2:].strip()
    return None
