"""
CSV text parsing shared by every ingestion entry point.

The parser is deliberately small: comma delimiter only, one record per
physical line, every value kept as a stripped string. Double quotes are
structural: each one flips the in-quotes state and is never copied into the
value, so a comma inside quotes is kept as data but a doubled quote ("")
is NOT unescaped to a literal quote.

Both functions are total over arbitrary text and never raise.
"""

from typing import Dict, List, Tuple

Record = Dict[str, str]


def split_csv_line(line: str) -> List[str]:
    """
    Split one physical CSV line into stripped fields.

    Examples:
        >>> split_csv_line('a,b,c')
        ['a', 'b', 'c']
        >>> split_csv_line('"a,b",c')
        ['a,b', 'c']
        >>> split_csv_line('a,"b""c",d')
        ['a', 'bc', 'd']
        >>> split_csv_line('')
        ['']
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def parse_csv(text: str) -> Tuple[List[Record], int]:
    """
    Parse CSV text into header-keyed records.

    The first non-blank line holds the headers. Each following non-blank
    line becomes one record; missing trailing values become empty strings
    and values beyond the header count are dropped.

    Returns:
        (records, count) where count == len(records)
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return [], 0

    headers = split_csv_line(lines[0])
    records: List[Record] = []

    for line in lines[1:]:
        values = split_csv_line(line)
        record: Record = {}
        for index, header in enumerate(headers):
            record[header] = values[index] if index < len(values) else ""
        records.append(record)

    return records, len(records)
