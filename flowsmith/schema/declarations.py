"""Top-level declarations of a model source and their classification.

A model source is a sequence of module members. Each member is classified
exactly once into one of four declaration variants; the parser then
dispatches on the variant.
"""

from dataclasses import dataclass

from .lexer import Token, TokenKind, unquote

WORKFLOW_PREFIX = "workflow"
NODE_TYPE = f"{WORKFLOW_PREFIX}:Node"
EDGE_TYPE = f"{WORKFLOW_PREFIX}:Edge"
DESCRIPTOR_TYPE = f"{WORKFLOW_PREFIX}:WorkflowModelDescriptor"

# Members starting with these keywords end at their closing brace
_BLOCK_KEYWORDS = {"function", "service", "class"}

_QUALIFIERS = {"public", "private", "final", "const", "configurable", "isolated"}

_OPENERS = {"{": "}", "{|": "|}", "[": "]", "(": ")"}
_CLOSERS = {"}", "|}", "]", ")"}


class DeclarationSyntaxError(Exception):
    """Raised when an initializer expression cannot be parsed."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        self.declared_type: str | None = None
        super().__init__(message)


# -----------------------------------------------------------------------------
# Members
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Member:
    """The tokens of one top-level declaration."""

    tokens: tuple[Token, ...]
    text: str

    @property
    def line(self) -> int:
        return self.tokens[0].line

    @property
    def has_errors(self) -> bool:
        """Check if the lexer flagged anything inside this member."""
        return any(t.kind == TokenKind.ERROR for t in self.tokens)


def split_members(source: str, tokens: list[Token]) -> list[Member]:
    """Group tokens into top-level members.

    A member ends at a ``;`` outside any brackets, or, for ``function``,
    ``service`` and ``class`` blocks, at the brace that closes the block.
    A member also ends at an unterminated string literal.
    Trailing tokens without a terminator form a final member.
    """
    members: list[Member] = []
    current: list[Token] = []
    depth = 0

    def flush() -> None:
        if current:
            text = source[current[0].start : current[-1].end]
            members.append(Member(tokens=tuple(current), text=text))
            current.clear()

    for i, token in enumerate(tokens):
        current.append(token)

        if token.kind == TokenKind.ERROR:
            # The rest of the line is lost; resume with the next line
            depth = 0
            flush()
            continue

        if token.kind != TokenKind.PUNCT:
            continue

        if token.text in _OPENERS:
            depth += 1
        elif token.text in _CLOSERS:
            depth = max(depth - 1, 0)
            if depth == 0 and token.text == "}" and _is_block_member(current):
                next_token = tokens[i + 1] if i + 1 < len(tokens) else None
                if next_token is None or not next_token.is_punct(";"):
                    flush()
        elif token.text == ";" and depth == 0:
            flush()

    flush()
    return members


def _is_block_member(tokens: list[Token]) -> bool:
    head = _skip_prefix(tokens, 0)
    return head < len(tokens) and tokens[head].is_ident(*_BLOCK_KEYWORDS)


def _skip_prefix(tokens: list[Token] | tuple[Token, ...], pos: int) -> int:
    """Skip leading annotations and qualifiers, returning the new position."""
    while pos < len(tokens):
        token = tokens[pos]
        if token.is_punct("@"):
            pos += 1
            # Annotation name, possibly qualified
            if pos < len(tokens) and tokens[pos].is_ident():
                pos += 1
                if (
                    pos + 1 < len(tokens)
                    and tokens[pos].is_punct(":")
                    and tokens[pos + 1].is_ident()
                ):
                    pos += 2
            # Annotation value
            if pos < len(tokens) and tokens[pos].is_punct("{"):
                pos = _skip_balanced(tokens, pos)
        elif token.is_ident(*_QUALIFIERS):
            pos += 1
        else:
            break
    return pos


def _skip_balanced(tokens: list[Token] | tuple[Token, ...], pos: int) -> int:
    depth = 0
    while pos < len(tokens):
        token = tokens[pos]
        if token.kind == TokenKind.PUNCT:
            if token.text in _OPENERS:
                depth += 1
            elif token.text in _CLOSERS:
                depth -= 1
                if depth == 0:
                    return pos + 1
        pos += 1
    return pos


# -----------------------------------------------------------------------------
# Initializer expressions
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class StringExpr:
    """A string literal, already unquoted."""

    value: str
    text: str
    line: int


@dataclass(frozen=True)
class NameRefExpr:
    """A simple (``name``) or qualified (``prefix:name``) reference."""

    name: str
    prefix: str | None
    text: str
    line: int

    @property
    def qualified_name(self) -> str:
        return f"{self.prefix}:{self.name}" if self.prefix else self.name


@dataclass(frozen=True)
class MappingExpr:
    """A mapping constructor ``{ key: value, ... }``."""

    fields: tuple[tuple[str, "Expr"], ...]
    text: str
    line: int


@dataclass(frozen=True)
class ListExpr:
    """A list constructor ``[ a, b, ... ]``."""

    items: tuple["Expr", ...]
    text: str
    line: int


@dataclass(frozen=True)
class RawExpr:
    """Anything else, kept as source text (type expressions, numbers, ``()``)."""

    text: str
    line: int


Expr = StringExpr | NameRefExpr | MappingExpr | ListExpr | RawExpr


class _ExprParser:
    """Recursive descent over the tokens of one initializer."""

    def __init__(self, source: str, tokens: tuple[Token, ...]):
        self.source = source
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> Expr:
        expr = self.expression()
        if self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            raise DeclarationSyntaxError(
                f"Unexpected '{token.text}' after initializer", token.line
            )
        return expr

    def peek(self) -> Token | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def expect(self, text: str) -> Token:
        token = self.peek()
        if token is None or not token.is_punct(text):
            found = "end of declaration" if token is None else f"'{token.text}'"
            line = token.line if token else self.tokens[-1].line
            raise DeclarationSyntaxError(f"Expected '{text}', found {found}", line)
        self.pos += 1
        return token

    def span(self, first: Token, last: Token) -> str:
        return self.source[first.start : last.end]

    def expression(self) -> Expr:
        token = self.peek()
        if token is None:
            line = self.tokens[-1].line if self.tokens else None
            raise DeclarationSyntaxError("Expected an expression", line)

        if token.kind == TokenKind.ERROR:
            raise DeclarationSyntaxError("Unterminated string literal", token.line)
        if token.is_punct("{"):
            return self.mapping()
        if token.is_punct("["):
            return self.list_()
        if token.kind == TokenKind.STRING:
            following = self.tokens[self.pos + 1] if self.pos + 1 < len(self.tokens) else None
            if following is None or following.is_punct(",", "}", "]"):
                self.pos += 1
                return StringExpr(value=unquote(token.text), text=token.text, line=token.line)
        return self.raw()

    def mapping(self) -> MappingExpr:
        first = self.expect("{")
        fields: list[tuple[str, Expr]] = []

        while True:
            token = self.peek()
            if token is None:
                raise DeclarationSyntaxError("Unclosed mapping constructor", first.line)
            if token.is_punct("}"):
                break

            if token.kind == TokenKind.STRING:
                key = unquote(token.text)
            elif token.is_ident():
                key = token.text.lstrip("'")
            else:
                raise DeclarationSyntaxError(
                    f"Expected a field name, found '{token.text}'", token.line
                )
            self.pos += 1

            following = self.peek()
            if following is not None and following.is_punct(":"):
                self.pos += 1
                value = self.expression()
            else:
                # Shorthand field: `{ name }` means `{ name: name }`
                value = NameRefExpr(name=key, prefix=None, text=token.text, line=token.line)
            fields.append((key, value))

            following = self.peek()
            if following is not None and following.is_punct(","):
                self.pos += 1
                continue
            if following is None or not following.is_punct("}"):
                found = "end of declaration" if following is None else f"'{following.text}'"
                line = following.line if following else first.line
                raise DeclarationSyntaxError(f"Expected ',' or '}}', found {found}", line)

        last = self.expect("}")
        return MappingExpr(fields=tuple(fields), text=self.span(first, last), line=first.line)

    def list_(self) -> ListExpr:
        first = self.expect("[")
        items: list[Expr] = []

        while True:
            token = self.peek()
            if token is None:
                raise DeclarationSyntaxError("Unclosed list constructor", first.line)
            if token.is_punct("]"):
                break
            items.append(self.expression())
            following = self.peek()
            if following is not None and following.is_punct(","):
                self.pos += 1

        last = self.expect("]")
        return ListExpr(items=tuple(items), text=self.span(first, last), line=first.line)

    def raw(self) -> Expr:
        start = self.pos
        depth = 0
        while self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            if token.kind == TokenKind.PUNCT:
                if depth == 0 and token.text in (",", "}", "]"):
                    break
                if token.text in _OPENERS:
                    depth += 1
                elif token.text in _CLOSERS:
                    depth -= 1
            self.pos += 1

        consumed = self.tokens[start : self.pos]
        if not consumed:
            token = self.tokens[start] if start < len(self.tokens) else self.tokens[-1]
            raise DeclarationSyntaxError(f"Expected a value, found '{token.text}'", token.line)

        first, last = consumed[0], consumed[-1]
        if len(consumed) == 1 and first.is_ident():
            return NameRefExpr(name=first.text, prefix=None, text=first.text, line=first.line)
        if (
            len(consumed) == 3
            and consumed[0].is_ident()
            and consumed[1].is_punct(":")
            and consumed[2].is_ident()
        ):
            return NameRefExpr(
                name=consumed[2].text,
                prefix=consumed[0].text,
                text=self.span(first, last),
                line=first.line,
            )
        return RawExpr(text=self.span(first, last), line=first.line)


def parse_expression(source: str, tokens: tuple[Token, ...]) -> Expr:
    """Parse the tokens of an initializer into an expression tree.

    Raises:
        DeclarationSyntaxError: If the tokens do not form a single expression.
    """
    if not tokens:
        raise DeclarationSyntaxError("Empty initializer")
    return _ExprParser(source, tokens).parse()


# -----------------------------------------------------------------------------
# Declarations
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class NodeDecl:
    name: str
    initializer: Expr
    line: int


@dataclass(frozen=True)
class EdgeDecl:
    name: str
    initializer: Expr
    line: int


@dataclass(frozen=True)
class DescriptorDecl:
    name: str
    initializer: Expr
    line: int


@dataclass(frozen=True)
class Unrecognized:
    """A member that is not a typed workflow declaration."""

    text: str
    line: int


Declaration = NodeDecl | EdgeDecl | DescriptorDecl | Unrecognized

_DECLARATION_TYPES = {
    NODE_TYPE: NodeDecl,
    EDGE_TYPE: EdgeDecl,
    DESCRIPTOR_TYPE: DescriptorDecl,
}


def classify(source: str, member: Member) -> Declaration:
    """Classify a member as a node, edge, descriptor or unrecognized declaration.

    A typed declaration has the shape ``<prefix:Type> <name> = <initializer>;``
    after any leading annotations and qualifiers.

    Raises:
        DeclarationSyntaxError: If a typed declaration has an initializer that
            cannot be parsed.
    """
    tokens = member.tokens
    if tokens and tokens[-1].is_punct(";"):
        tokens = tokens[:-1]

    pos = _skip_prefix(tokens, 0)
    type_name, pos = _type_reference(tokens, pos)
    declaration_type = _DECLARATION_TYPES.get(type_name or "")

    if (
        declaration_type is None
        or pos + 1 >= len(tokens)
        or not tokens[pos].is_ident()
        or not tokens[pos + 1].is_punct("=")
    ):
        return Unrecognized(text=member.text, line=member.line)

    name = tokens[pos].text.lstrip("'")
    try:
        initializer = parse_expression(source, tokens[pos + 2 :])
    except DeclarationSyntaxError as e:
        e.declared_type = type_name
        raise
    return declaration_type(name=name, initializer=initializer, line=member.line)


def _type_reference(tokens: tuple[Token, ...], pos: int) -> tuple[str | None, int]:
    if pos >= len(tokens) or not tokens[pos].is_ident():
        return None, pos
    if (
        pos + 2 < len(tokens)
        and tokens[pos + 1].is_punct(":")
        and tokens[pos + 2].is_ident()
    ):
        return f"{tokens[pos].text}:{tokens[pos + 2].text}", pos + 3
    return tokens[pos].text, pos + 1
