"""
Shell-like tokenizer for command lines.
"""

from __future__ import annotations

from mindcmd.core.common.exceptions import ParseError

QUOTE_CHARS = ('"', "'")


def tokenize(input_str: str) -> list[str]:
    """
    Split a command line into tokens.

    Rules:
    - Tokens are separated by whitespace outside quotes.
    - ``"`` or ``'`` opens a quoted section that ends at the next unescaped
      quote of the same kind; the delimiters are dropped and whitespace inside
      is kept.
    - Inside quotes ``\\"``, ``\\'`` (for the enclosing quote) and ``\\\\``
      unescape to the literal character; any other backslash is kept as is.
    - A quoted section may be glued to surrounding text (``a"b c"`` -> ``ab c``)
      and an empty quoted section yields an empty token.

    Raises:
        ParseError: If the input is blank or a quote is never closed.
    """
    text = input_str.strip()
    if not text:
        raise ParseError("Empty command")

    tokens: list[str] = []
    current: list[str] = []
    quote_char: str | None = None
    # Tracks tokens made only of an empty quoted section, e.g. ""
    has_token = False
    i = 0

    while i < len(text):
        char = text[i]

        if quote_char is None:
            if char in QUOTE_CHARS:
                quote_char = char
                has_token = True
            elif char.isspace():
                if has_token:
                    tokens.append("".join(current))
                    current = []
                    has_token = False
            else:
                current.append(char)
                has_token = True
        elif char == quote_char:
            quote_char = None
        elif char == "\\" and i + 1 < len(text) and text[i + 1] in (quote_char, "\\"):
            current.append(text[i + 1])
            i += 1
        else:
            current.append(char)

        i += 1

    if quote_char is not None:
        raise ParseError(f"Unclosed quote: {quote_char}", details={"quote": quote_char})

    if has_token:
        tokens.append("".join(current))

    return tokens
