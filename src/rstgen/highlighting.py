"""Source tokenization for code blocks, backed by Pygments."""

from __future__ import annotations

from collections.abc import Iterator

from pygments import token as T
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

# Pygments token types mapped to the class names used in rendered spans.
# Types absent here (and all their subtypes) are emitted without a span.
_TOKEN_CLASSES = {
    T.Comment.Preproc: "Preprocessor",
    T.Comment: "Comment",
    T.Keyword: "Keyword",
    T.Operator.Word: "Keyword",
    T.Operator: "Operator",
    T.Punctuation: "Punctuation",
    T.Literal.String.Char: "CharLit",
    T.Literal.String.Escape: "EscapeSequence",
    T.Literal.String: "StringLit",
    T.Literal.Number.Float: "FloatNumber",
    T.Literal.Number.Hex: "HexNumber",
    T.Literal.Number.Oct: "OctNumber",
    T.Literal.Number.Bin: "BinNumber",
    T.Literal.Number: "DecNumber",
    T.Name.Builtin: "Identifier",
    T.Name.Decorator: "Identifier",
    T.Name: "Identifier",
    T.Generic.Prompt: "Other",
    T.Error: "Other",
    T.Text: None,
    T.Whitespace: None,
}


def token_class(ttype: T._TokenType) -> str | None:
    """Return the span class for ``ttype``, or None for plain text."""
    while ttype:
        if ttype in _TOKEN_CLASSES:
            return _TOKEN_CLASSES[ttype]
        ttype = ttype.parent
    return None


def get_source_language(name: str) -> Lexer | None:
    """Return a lexer for the language ``name``, or None if unknown."""
    try:
        return get_lexer_by_name(name.strip().lower(), stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None


def iter_tokens(text: str, lexer: Lexer) -> Iterator[tuple[str, str | None]]:
    """Yield ``(text, class)`` spans covering ``text`` exactly."""
    for ttype, value in lexer.get_tokens(text):
        if value:
            yield value, token_class(ttype)
