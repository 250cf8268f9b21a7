from enum import Enum, auto
from typing import List, NamedTuple

SEPARATORS = (" ", "\t")
OPERATOR_CHARS = "><|&"


class TokenType(Enum):
    IDENTIFIER = auto()  # palabra: programa, argumento o archivo
    PIPE = auto()  # |
    REDIRECT_IN = auto()  # <
    REDIRECT_OUT = auto()  # >
    APPEND_OUT = auto()  # >>
    BACKGROUND = auto()  # &
    END = auto()  # fin de la entrada


OPERATOR_LITERALS = {
    TokenType.PIPE: "|",
    TokenType.REDIRECT_IN: "<",
    TokenType.REDIRECT_OUT: ">",
    TokenType.APPEND_OUT: ">>",
    TokenType.BACKGROUND: "&",
    TokenType.END: "",
}


class ShellToken(NamedTuple):
    token_type: TokenType
    lex: str = ""

    @classmethod
    def make(cls, token_type: TokenType) -> "ShellToken":
        return cls(token_type)

    @classmethod
    def ident(cls, text: str) -> "ShellToken":
        return cls(TokenType.IDENTIFIER, text)

    @property
    def literal(self) -> str:
        if self.token_type == TokenType.IDENTIFIER:
            return self.lex
        return OPERATOR_LITERALS[self.token_type]

    def __str__(self) -> str:
        return f"ShellToken('{self.literal}', {self.token_type})"


class ShellLexer:
    """
    Clase que representa el lexer de la shell.

    Guarda el texto que falta por leer y cada llamada a next_token consume
    exactamente el prefijo que corresponde a un token.
    """

    def __init__(self, line: str) -> None:
        self.remaining = line.rstrip("\r\n")

    def next_token(self) -> ShellToken:
        while True:
            if not self.remaining:
                return ShellToken.make(TokenType.END)

            char = self.remaining[0]
            self.remaining = self.remaining[1:]

            if char in SEPARATORS:
                continue

            if char == ">":
                if self.remaining and self.remaining[0] == ">":
                    self.remaining = self.remaining[1:]
                    return ShellToken.make(TokenType.APPEND_OUT)
                return ShellToken.make(TokenType.REDIRECT_OUT)
            if char == "<":
                return ShellToken.make(TokenType.REDIRECT_IN)
            if char == "|":
                return ShellToken.make(TokenType.PIPE)
            if char == "&":
                return ShellToken.make(TokenType.BACKGROUND)

            return ShellToken.ident(char + self._consume_word())

    def _consume_word(self) -> str:
        end = 0
        while end < len(self.remaining):
            if self.remaining[end] in SEPARATORS or self.remaining[end] in OPERATOR_CHARS:
                break
            end += 1
        word = self.remaining[:end]
        self.remaining = self.remaining[end:]
        return word

    def tokenize(self) -> List[ShellToken]:
        tokens: List[ShellToken] = []
        token = self.next_token()
        while token.token_type != TokenType.END:
            tokens.append(token)
            token = self.next_token()
        return tokens


def build_token(lexer: ShellLexer) -> ShellToken:
    return lexer.next_token()


def token_list(line: str) -> List[ShellToken]:
    return ShellLexer(line).tokenize()


def tokens_to_line(tokens: List[ShellToken]) -> str:
    return " ".join(token.literal for token in tokens)
