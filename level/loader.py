"""
Level Loader - parses rectangular text layouts into a GridMap

Each non-blank line is one row. Every character that is not whitespace
or a comma is a single-digit cell code. Lines starting with '#' are
comments.
"""

import logging
from pathlib import Path
from utils.constants import CELL_SIZE
from .grid_map import GridMap

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"

# Levels shipped with the package
LEVELS_DIR = Path(__file__).resolve().parent / "levels"


class MalformedLevelError(ValueError):
    """Level source does not describe a rectangular grid of digit codes"""

    def __init__(self, message, line=None, column=None, source=None):
        self.line = line
        self.column = column
        self.source = source
        location = ""
        if source is not None:
            location += f"{source}"
        if line is not None:
            location += f":{line}" if location else f"line {line}"
            if column is not None:
                location += f":{column}"
        super().__init__(f"{location}: {message}" if location else message)


def parse_row(line, line_no, source=None):
    """
    Parse one text row into cell codes

    Args:
        line: Row text
        line_no: 1-based line number (for diagnostics)
        source: Optional source name (for diagnostics)

    Returns:
        list of int
    """
    row = []
    for col_no, char in enumerate(line.rstrip("\r\n"), start=1):
        if char == "," or char.isspace():
            continue
        if not char.isdigit() or not char.isascii():
            raise MalformedLevelError(
                f"unexpected character {char!r}, cell codes must be digits 0-9",
                line=line_no, column=col_no, source=source
            )
        row.append(ord(char) - ord("0"))
    return row


def parse_level(text, width=None, height=None, cell_size=CELL_SIZE, source=None):
    """
    Parse level source text

    Args:
        text: Level layout
        width, height: Declared dimensions; inferred from the text when None
        cell_size: World units per cell
        source: Optional source name used in error messages

    Returns:
        GridMap

    Raises:
        MalformedLevelError: on non-digit content, ragged rows, or a
            mismatch with the declared dimensions
    """
    rows = []
    row_lines = []
    # Only "\n" ends a row, \v and \f are cell separators like any other whitespace
    for line_no, line in enumerate(text.split("\n"), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        rows.append(parse_row(line, line_no, source))
        row_lines.append(line_no)

    if not rows:
        raise MalformedLevelError("level source contains no rows", source=source)

    expected_w = width if width is not None else len(rows[0])
    for row, line_no in zip(rows, row_lines):
        if len(row) != expected_w:
            raise MalformedLevelError(
                f"row has {len(row)} cells, expected {expected_w}",
                line=line_no, source=source
            )

    if height is not None and len(rows) != height:
        raise MalformedLevelError(
            f"level has {len(rows)} rows, expected {height}", source=source
        )

    cells = [value for row in rows for value in row]
    grid = GridMap(expected_w, len(rows), cells, cell_size)
    logger.debug("Parsed %r from %s", grid, source or "<text>")
    return grid


def load_level(path, width=None, height=None, cell_size=CELL_SIZE):
    """
    Load a level file

    Args:
        path: Path to the level text file
        width, height: Optional declared dimensions
        cell_size: World units per cell

    Returns:
        GridMap
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    grid = parse_level(text, width=width, height=height, cell_size=cell_size, source=str(path))
    logger.info("Loaded level %s (%dx%d)", path.name, grid.width, grid.height)
    return grid


def save_level(grid, path, separator=","):
    """Write a grid back out in the level source format"""
    path = Path(path)
    path.write_text(grid.to_text(separator), encoding="utf-8")
    logger.info("Saved level %s (%dx%d)", path.name, grid.width, grid.height)
