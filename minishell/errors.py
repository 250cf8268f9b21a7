import os


class ShellError(Exception):
    """
    Clase base de los errores que reporta la shell.
    """

    exit_code = 1


class ShellSyntaxError(ShellError, SyntaxError):
    exit_code = 2


class UnknownCommandError(ShellError):
    exit_code = 127

    def __init__(self, program: str) -> None:
        super().__init__(f"{program}: command not found")
        self.program = program


class RedirectError(ShellError):
    def __init__(self, filename: str, err: OSError) -> None:
        super().__init__(f"Cannot open file: {filename}: {os_reason(err)}")
        self.filename = filename


class FatalShellError(ShellError):
    """
    Error irrecuperable (pipe o fork): la shell termina.
    """


def os_reason(err: OSError) -> str:
    if err.errno is None:
        return str(err)
    return os.strerror(err.errno)
