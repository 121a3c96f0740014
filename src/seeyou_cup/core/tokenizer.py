"""Permissive CSV line tokenizer and field quoting for CUP files."""

_SPACES = (" ", "\t")


def split_csv_line(line: str) -> list[str]:
    """Split one line into trimmed fields.

    Quoting follows RFC 4180 loosely: ``""`` inside quotes is a literal quote,
    and a quote only closes the field when the next non-space character is a
    comma or the end of the line. Any other quote inside a quoted field is kept
    as a literal character, which is how stray quotes in hand-edited files
    survive. Quoted whitespace is trimmed like everything else.
    """
    fields = []
    field: list[str] = []
    quoted = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if quoted:
            if ch == '"':
                if i + 1 < n and line[i + 1] == '"':
                    field.append('"')
                    i += 2
                    continue
                j = i + 1
                while j < n and line[j] in _SPACES:
                    j += 1
                if j == n or line[j] == ",":
                    quoted = False
                    i = j
                    continue
            field.append(ch)
        elif ch == '"':
            quoted = True
        elif ch == ",":
            fields.append("".join(field).strip())
            field = []
        else:
            field.append(ch)
        i += 1

    fields.append("".join(field).strip())
    return fields


def quote_field(value: str) -> str:
    """Wrap ``value`` in quotes, doubling any quotes it contains."""
    return '"' + value.replace('"', '""') + '"'


def needs_quoting(value: str) -> bool:
    return "," in value or '"' in value or value != value.strip(" ")


def quote_if_needed(value: str) -> str:
    return quote_field(value) if needs_quoting(value) else value
