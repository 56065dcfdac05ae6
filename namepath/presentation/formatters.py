"""
Formatters — Data-to-string transformations for CLI output

Renders resolved doclets as an aligned table or JSON.

Dependency direction: cli -> presentation -> core
"""

import json
import sys
from typing import Dict, List, Sequence

from ..core.doclet import Doclet


# Column order for table output
COLUMNS = ('kind', 'path', 'name', 'memberof', 'access')

# Widest a single table cell may get before truncation
MAX_CELL_LENGTH = 60

# Common Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '→': '->',
    '…': '...',
    '–': '-',
    '—': '--',
}


def truncate(text: str, max_length: int = MAX_CELL_LENGTH) -> str:
    """Truncate text with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def format_table(rows: Sequence[Dict[str, str]], columns: Sequence[str] = COLUMNS) -> str:
    """
    Format rows as a left-aligned text table.

    Empty cells render as '-' so columns stay readable.
    """
    if not rows:
        return ""

    cells = [
        [truncate(str(row.get(column) or '-')) for column in columns]
        for row in rows
    ]
    header = [column.upper() for column in columns]
    widths = [
        max(len(header[i]), *(len(line[i]) for line in cells))
        for i in range(len(columns))
    ]

    lines = ["  ".join(header[i].ljust(widths[i]) for i in range(len(columns))).rstrip()]
    for line in cells:
        lines.append("  ".join(line[i].ljust(widths[i]) for i in range(len(columns))).rstrip())
    return "\n".join(lines)


def format_json(rows: Sequence[Dict[str, str]]) -> str:
    return json.dumps(list(rows), indent=2)


def format_doclets(doclets_by_file: Dict[str, List[Doclet]], output_format: str = "table") -> str:
    """
    Format resolved doclets grouped by file.

    Args:
        doclets_by_file: File path -> doclets in document order
        output_format: "table" or "json"
    """
    if output_format == "json":
        rows = []
        for file_path, doclets in doclets_by_file.items():
            for doclet in doclets:
                row = doclet.to_dict()
                row['file'] = file_path
                rows.append(row)
        return format_json(rows)

    sections = []
    for file_path, doclets in doclets_by_file.items():
        if not doclets:
            sections.append(f"{file_path}: no documented symbols")
            continue
        table = format_table([doclet.to_dict() for doclet in doclets])
        sections.append(f"{file_path}:\n{table}")
    return "\n\n".join(sections)


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Handles UnicodeEncodeError by replacing unencodable characters
    with ASCII equivalents or '?' as last resort.
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            # Last resort: replace all unencodable chars with ?
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)
