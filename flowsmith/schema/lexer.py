"""Tokenizer for workflow model sources."""

import re
from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    """Kinds of tokens produced by the lexer."""

    IDENT = "ident"
    STRING = "string"
    NUMBER = "number"
    PUNCT = "punct"
    ERROR = "error"


@dataclass(frozen=True)
class Token:
    """A token with its source span."""

    kind: TokenKind
    text: str
    start: int
    end: int
    line: int
    column: int

    def is_punct(self, *texts: str) -> bool:
        """Check if this is one of the given punctuation tokens."""
        return self.kind == TokenKind.PUNCT and self.text in texts

    def is_ident(self, *texts: str) -> bool:
        """Check if this is an identifier, optionally one of the given names."""
        if self.kind != TokenKind.IDENT:
            return False
        return not texts or self.text in texts


# Tried in order; first match wins
_TOKEN_PATTERNS: list[tuple[TokenKind | None, re.Pattern]] = [
    (None, re.compile(r"[ \t\f\v]+|\r\n|\r|\n")),
    (None, re.compile(r"//[^\r\n]*|#[^\r\n]*")),
    (TokenKind.STRING, re.compile(r'"(?:[^"\\\r\n]|\\.)*"')),
    (TokenKind.ERROR, re.compile(r'"[^\r\n]*')),
    (TokenKind.NUMBER, re.compile(r"\d+(?:\.\d+)?")),
    (TokenKind.IDENT, re.compile(r"'?[A-Za-z_][A-Za-z0-9_]*")),
    (TokenKind.PUNCT, re.compile(r"\{\||\|\}|\.\.\.|=>|.", re.DOTALL)),
]

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


def tokenize(source: str) -> list[Token]:
    """Split model source into tokens.

    Whitespace and comments (``//`` and ``#`` to end of line) are dropped.
    An unterminated string literal becomes a single ERROR token reaching to
    the end of its line, so one broken declaration cannot swallow the rest
    of the file.

    Args:
        source: The model source text.

    Returns:
        The tokens in source order.
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0

    while pos < len(source):
        for kind, pattern in _TOKEN_PATTERNS:
            match = pattern.match(source, pos)
            if match:
                break
        text = match.group(0)

        if kind is not None:
            tokens.append(
                Token(
                    kind=kind,
                    text=text,
                    start=pos,
                    end=match.end(),
                    line=line,
                    column=pos - line_start + 1,
                )
            )

        for newline in re.finditer(r"\r\n|\r|\n", text):
            line += 1
            line_start = pos + newline.end()
        pos = match.end()

    return tokens


def unquote(literal: str) -> str:
    """Strip the quotes from a string literal token and resolve escapes."""
    body = literal[1:-1] if len(literal) >= 2 else literal
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)
