"""
Permissive CSV tokenizer for published Google Sheets exports.

Converts raw CSV text into a ``Grid``: a tuple of rows, each a tuple
of field strings.  The tokenizer knows nothing about what the fields
mean; the layout decoder interprets them by absolute position.

Rules (single left-to-right scan):
- ``,`` outside quotes ends a field.
- A ``"`` as the first character of a field opens a quoted region.
  Inside it ``""`` is one literal quote, a lone ``"`` closes the
  region, and everything else (commas, ``\\n``, ``\\r``) is copied
  verbatim.
- ``\\r`` outside quotes is dropped, so CRLF and LF behave the same.
- ``\\n`` outside quotes ends the row.  The pending field is always
  flushed first, so a blank physical line becomes the row ``("",)``.
  The decoder addresses rows by absolute index and relies on this.
- An unterminated quote runs to end of input as literal content.

``tokenize`` never raises: malformed quoting degrades to a literal
reading instead of an error.  Fields are never trimmed here.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

Row = tuple[str, ...]
Grid = tuple[Row, ...]

_QUOTE = '"'
_DELIMITER = ","


def tokenize(text: str) -> Grid:
    """Split CSV *text* into a grid of raw field strings.

    Args:
        text: The full CSV document.

    Returns:
        An immutable ``Grid``.  Rows may have different lengths; an
        empty input yields an empty grid.

    Examples::

        >>> tokenize("a,b\\r\\nc,d\\r\\n")
        (('a', 'b'), ('c', 'd'))
        >>> tokenize("a\\n\\nb")
        (('a',), ('',), ('b',))
    """
    rows: list[Row] = []
    row: list[str] = []
    field: list[str] = []
    field_started = False  # anything consumed for the current field yet
    in_quotes = False

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if in_quotes:
            if ch == _QUOTE:
                if i + 1 < n and text[i + 1] == _QUOTE:
                    field.append(_QUOTE)
                    i += 2
                    continue
                in_quotes = False
            else:
                field.append(ch)
            i += 1
            continue

        if ch == _QUOTE and not field_started:
            in_quotes = True
            field_started = True
        elif ch == _DELIMITER:
            row.append("".join(field))
            field = []
            field_started = False
        elif ch == "\r":
            pass
        elif ch == "\n":
            row.append("".join(field))
            rows.append(tuple(row))
            row = []
            field = []
            field_started = False
        else:
            field.append(ch)
            field_started = True
        i += 1

    if in_quotes:
        logger.debug("Unterminated quoted field at end of input; kept as literal")

    # Flush the trailing row only when something is pending
    if field or row:
        row.append("".join(field))
        rows.append(tuple(row))

    return tuple(rows)
