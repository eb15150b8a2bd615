"""
Tokenizer: split a raw input line into words.

Rules
- Words are separated by unquoted whitespace.
- Single or double quotes group a word; the quotes are stripped and the
  content is kept verbatim, whitespace included. Adjacent quoted and unquoted
  parts join into one word (say "hello "world -> ["say", "hello world"]).
- Backslash is an ordinary character everywhere (paths like C:\\temp survive).
- '#' is an ordinary character (no comments).
- An unterminated quote raises ParseError; blank input yields [].

Built on shlex in POSIX mode with the escape characters and comment characters
cleared, so quoting behaves like a shell without any of the shell's escaping.
"""
import shlex

from .faults import ParseError, FaultCode


def tokenize(line, /):
    """
    Return the ordered list of words in 'line'.

    Raises
    - ParseError: a quote was opened and never closed.
    - TypeError: 'line' is not a string.
    """
    if not isinstance(line, str):
        raise TypeError("tokenize() argument must be a string")

    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    lexer.escape = ""
    try:
        return list(lexer)
    except ValueError as exception:
        raise ParseError(
            f"unterminated quote in {line.strip()!r}",
            title="parse error",
            code=FaultCode.UNTERMINATED_QUOTE,
            hint="close every quote you open, e.g. say \"hello world\"",
            line=line,
            reason=str(exception),
        ) from None


__all__ = (
    "tokenize",
)
