from enum import Enum, auto
from typing import List, NamedTuple
import re

class TokenType(Enum):
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()
    EQUALS = auto()
    COMMA = auto()
    NEWLINE = auto()
    COMMENT = auto()
    WHITESPACE = auto()
    UNKNOWN = auto()

class Token(NamedTuple):
    type: TokenType
    value: str
    line: int
    column: int

class DefinitionTokenizer:
    """
    tokenizer for podspec and Podfile declarations.

    strings may use single or double quotes with backslash escapes; a string
    that is never closed comes out as an UNKNOWN token so the parser can
    report it with its line number.
    """

    # order matters!
    PATTERNS = [
        (TokenType.COMMENT, r'#[^\n]*'),
        (TokenType.STRING, r'"(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\''),
        (TokenType.NUMBER, r'\d[A-Za-z0-9]*(?:[.\-][A-Za-z0-9]+)*'),
        (TokenType.IDENTIFIER, r'[A-Za-z_][A-Za-z0-9_\-.]*'),
        (TokenType.EQUALS, r'=>?'),
        (TokenType.COMMA, r','),
        (TokenType.NEWLINE, r'\r?\n'),
        (TokenType.WHITESPACE, r'[ \t\f\v]+'),
    ]

    _COMPILED = [(token_type, re.compile(pattern)) for token_type, pattern in PATTERNS]
    _ESCAPE = re.compile(r"\\(.)")
    _ESCAPES = {"n": "\n", "t": "\t"}

    def tokenize(self, text: str) -> List[Token]:
        tokens = []
        pos = 0
        line = 1
        line_start = 0
        length = len(text)

        while pos < length:
            match = None
            for token_type, regex in self._COMPILED:
                match = regex.match(text, pos)
                if match:
                    value = match.group(0)
                    tokens.append(Token(token_type, value, line, pos - line_start + 1))
                    pos += len(value)
                    if token_type == TokenType.NEWLINE:
                        line += 1
                        line_start = pos
                    break

            if not match:
                tokens.append(Token(TokenType.UNKNOWN, text[pos], line, pos - line_start + 1))
                pos += 1

        return tokens

    @classmethod
    def unquote(cls, token: Token) -> str:
        if token.type != TokenType.STRING:
            return token.value
        return cls._ESCAPE.sub(lambda m: cls._ESCAPES.get(m.group(1), m.group(1)), token.value[1:-1])
