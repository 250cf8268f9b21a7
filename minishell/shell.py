#!/usr/bin/env python3
import os
import sys
from typing import List, Optional

from minishell.colors import colorize, report_error
from minishell.errors import FatalShellError, ShellSyntaxError
from minishell.executer import CommandExecutor
from minishell.lexer import token_list
from minishell.parser import ShellParser

SINGLE_SHOT_FLAG = "-t"
INTERRUPTED = 130


def get_dir_name(directory: str, home: Optional[str] = None) -> str:
    """
    Devuelve el directorio con el prefijo del home reemplazado por '~'.
    """
    home = os.environ.get("HOME", "") if home is None else home
    home = home.rstrip("/")
    if not home:
        return directory
    if directory == home:
        return "~"
    if directory.startswith(home + "/"):
        return "~" + directory[len(home):]
    return directory


def prompt_symbol() -> str:
    return "# " if os.getuid() == 0 else "$ "


class Shell:
    def __init__(
        self,
        show_prompt: bool = True,
        use_colors: bool = True,
        executor: Optional[CommandExecutor] = None,
    ) -> None:
        self.show_prompt = show_prompt
        self.use_colors = use_colors
        self.executor = executor or CommandExecutor(use_colors=use_colors)

    def display_prompt(self) -> None:
        try:
            directory = colorize(get_dir_name(os.getcwd()), "GREEN", enabled=self.use_colors)
        except FileNotFoundError:
            directory = ""
        print(f"{directory}{prompt_symbol()}", end="", flush=True)

    def read_command(self) -> Optional[str]:
        if self.show_prompt:
            self.display_prompt()
        line = sys.stdin.readline()
        if not line:
            return None
        return line.rstrip("\n")

    def process_line(self, line: str) -> int:
        if not line.strip():
            return self.executor.last_return_code

        try:
            command = ShellParser(token_list(line)).parse()
        except ShellSyntaxError as e:
            report_error(f"Error in command syntax: {e}", self.use_colors)
            self.executor.last_return_code = e.exit_code
            return e.exit_code

        return self.executor.execute(command)

    def run(self) -> int:
        while True:
            try:
                line = self.read_command()
            except KeyboardInterrupt:
                print(flush=True)
                continue

            if line is None:
                break

            try:
                code = self.process_line(line)
            except KeyboardInterrupt:
                print(flush=True)
                code = self.executor.last_return_code = INTERRUPTED

            if not self.show_prompt:
                return code

        return self.executor.last_return_code


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    shell = Shell(show_prompt=SINGLE_SHOT_FLAG not in argv)
    try:
        return shell.run()
    except FatalShellError as e:
        report_error(f"shell: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
