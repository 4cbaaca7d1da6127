"""Quote-aware splitting of a single CSV line."""

from typing import List, Tuple

from workoutcsv.constants import DEFAULT_SEPARATOR

__all__ = ["split_line"]

QUOTE = '"'


def _emit(chars: List[Tuple[str, bool]]) -> str:
    """Join accumulated characters, trimming whitespace that sat outside quotes."""
    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    return "".join(char for char, _ in chars[start:end])


def split_line(line: str, separator: str = DEFAULT_SEPARATOR) -> List[str]:
    """Split one line of CSV text into its fields.

    A field may be wrapped in double quotes. Inside quotes a doubled quote
    (``""``) is one literal quote and the separator is ordinary text.
    Whitespace outside quotes is trimmed from both ends of every field.
    The last field is always emitted, so an empty line yields ``[""]``.

    An unterminated quote is not an error: the rest of the line is taken as
    quoted text and whatever was accumulated is returned.

    Args:
        line: One line of text, without its line terminator.
        separator: Single-character field separator. Default is a comma.

    Returns:
        List of field strings in input order.

    Example:
        >>> split_line('a, "b,c" ,d')
        ['a', 'b,c', 'd']
        >>> split_line('"Squat";"100"', separator=";")
        ['Squat', '100']
    """
    fields: List[str] = []
    current: List[Tuple[str, bool]] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                current.append((QUOTE, True))
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == separator and not in_quotes:
            fields.append(_emit(current))
            current = []
        else:
            current.append((char, in_quotes))
        i += 1

    fields.append(_emit(current))
    return fields
