from typing import List, Optional

from minishell.ast_tree import Command
from minishell.errors import ShellSyntaxError
from minishell.lexer import ShellToken, TokenType


class ShellParser:
    """
    Clase que representa el parser de la shell.

    Cada etapa del pipeline se analiza en una llamada recursiva: al encontrar
    un '|' el resto de los tokens se delega a una nueva llamada, cuyo
    resultado queda enlazado en next_stage. El parser trabaja sobre su propia
    copia de los tokens y la va consumiendo.
    """

    def __init__(self, tokens: List[ShellToken]) -> None:
        self.tokens = list(tokens)

    def parse(self) -> Command:
        return self._parse_stage(first=True)

    def _parse_stage(self, first: bool) -> Command:
        if not self.tokens:
            raise ShellSyntaxError("Empty command")

        token = self._advance()
        if token.token_type != TokenType.IDENTIFIER:
            raise ShellSyntaxError(f"Expected a command before '{token.literal}'")

        command = Command([token.lex])
        while self.tokens and self._peek().token_type == TokenType.IDENTIFIER:
            command.arguments.append(self._advance().lex)

        while self.tokens:
            token = self._advance()
            kind = token.token_type

            if kind == TokenType.IDENTIFIER:
                raise ShellSyntaxError(f"Unexpected word '{token.lex}'")
            elif kind == TokenType.BACKGROUND:
                if self.tokens and self._peek().token_type not in (
                    TokenType.PIPE,
                    TokenType.END,
                ):
                    raise ShellSyntaxError("'&' can only appear before '|' or at the end")
                command.background = True
            elif kind == TokenType.REDIRECT_IN:
                if not first:
                    raise ShellSyntaxError("'<' is only allowed on the first command")
                command.input_redirect = self._filename(token)
            elif kind in (TokenType.REDIRECT_OUT, TokenType.APPEND_OUT):
                command.output_redirect = self._filename(token)
                command.append_output = kind == TokenType.APPEND_OUT
            elif kind == TokenType.PIPE:
                if command.output_redirect is not None:
                    raise ShellSyntaxError(
                        f"'{'>>' if command.append_output else '>'}' is only allowed on the last command"
                    )
                if not self.tokens or self._peek().token_type == TokenType.END:
                    raise ShellSyntaxError("Missing command after '|'")
                command.next_stage = self._parse_stage(first=False)
                # '&' afecta a todo el pipeline; se guarda en la última etapa
                if command.background:
                    command.background = False
                    command.last_stage().background = True
                return command
            elif kind == TokenType.END:
                return command

        return command

    def _filename(self, operator: ShellToken) -> str:
        if not self.tokens or self._peek().token_type != TokenType.IDENTIFIER:
            raise ShellSyntaxError(f"Missing file name after '{operator.literal}'")
        return self._advance().lex

    def _peek(self) -> ShellToken:
        return self.tokens[0]

    def _advance(self) -> ShellToken:
        return self.tokens.pop(0)


def build_commands(tokens: List[ShellToken]) -> Optional[Command]:
    try:
        return ShellParser(tokens).parse()
    except ShellSyntaxError:
        return None
