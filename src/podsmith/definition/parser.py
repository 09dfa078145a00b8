from pathlib import Path
from typing import Dict, List, NamedTuple, Optional
from .tokenizer import DefinitionTokenizer, Token, TokenType
from ..domain.errors import ParseError

class Argument(NamedTuple):
    key: Optional[str]
    value: str

class Declaration(NamedTuple):
    keyword: str
    arguments: List[Argument]
    line: int

    @property
    def positional(self) -> List[str]:
        return [a.value for a in self.arguments if a.key is None]

    @property
    def options(self) -> Dict[str, str]:
        return {a.key: a.value for a in self.arguments if a.key is not None}

_VALUE_TYPES = (TokenType.STRING, TokenType.IDENTIFIER, TokenType.NUMBER)

class DefinitionParser:
    """
    turns definition tokens into a flat list of declarations.

    one declaration per line; a trailing comma carries the argument list over
    to the next line.
    """

    def __init__(self, tokens: List[Token], path: Optional[Path] = None):
        # comments and whitespace never matter past this point
        self.tokens = [t for t in tokens if t.type not in (TokenType.WHITESPACE, TokenType.COMMENT)]
        self.path = path
        self.pos = 0

    @classmethod
    def from_text(cls, text: str, path: Optional[Path] = None) -> "DefinitionParser":
        return cls(DefinitionTokenizer().tokenize(text), path)

    def parse(self) -> List[Declaration]:
        declarations = []
        while True:
            self._skip_newlines()
            if self._peek() is None:
                break
            declarations.append(self._parse_declaration())
        return declarations

    def _peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _consume(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            t = self.tokens[self.pos]
            self.pos += 1
            return t
        return None

    def _skip_newlines(self):
        while self._peek() is not None and self._peek().type == TokenType.NEWLINE:
            self.pos += 1

    def _at_line_end(self) -> bool:
        token = self._peek()
        return token is None or token.type == TokenType.NEWLINE

    def _error(self, message: str, token: Optional[Token]) -> ParseError:
        line = token.line if token is not None else (self.tokens[-1].line if self.tokens else None)
        return ParseError(self.path, message, line)

    def _parse_declaration(self) -> Declaration:
        keyword = self._consume()
        if keyword.type != TokenType.IDENTIFIER:
            raise self._unexpected(keyword, "a declaration keyword")

        arguments = []
        if not self._at_line_end():
            arguments.append(self._parse_argument())
            while not self._at_line_end():
                token = self._consume()
                if token.type != TokenType.COMMA:
                    raise self._unexpected(token, "',' or end of line")
                # a trailing comma continues on the next line
                self._skip_newlines()
                arguments.append(self._parse_argument())

        return Declaration(keyword.value, arguments, keyword.line)

    def _parse_argument(self) -> Argument:
        first = self._parse_value()
        token = self._peek()
        if token is not None and token.type == TokenType.EQUALS:
            self._consume()
            return Argument(first, self._parse_value())
        return Argument(None, first)

    def _parse_value(self) -> str:
        token = self._consume()
        if token is None or token.type not in _VALUE_TYPES:
            raise self._unexpected(token, "a value")
        return DefinitionTokenizer.unquote(token)

    def _unexpected(self, token: Optional[Token], expected: str) -> ParseError:
        if token is None:
            return self._error(f"expected {expected}, got end of file", token)
        if token.type == TokenType.UNKNOWN and token.value in ("'", '"'):
            return self._error("unterminated string", token)
        if token.type == TokenType.NEWLINE:
            return self._error(f"expected {expected}, got end of line", token)
        return self._error(f"expected {expected}, got {token.value!r}", token)
