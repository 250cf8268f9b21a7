import io
import unittest
from contextlib import redirect_stderr

from minishell.colors import COLORS, colorize, report_error
from minishell.executer import CommandExecutor
from minishell.shell import Shell


class FakeTerminal(io.StringIO):
    def isatty(self):
        return True


class TestColors(unittest.TestCase):
    def test_01_terminal_gets_colors(self):
        text = colorize("hola", "GREEN", FakeTerminal())
        self.assertEqual(f"{COLORS['GREEN']}hola{COLORS['RESET']}", text)

    def test_02_disabled_colors_on_terminal(self):
        self.assertEqual("hola", colorize("hola", "GREEN", FakeTerminal(), enabled=False))

    def test_03_plain_stream_has_no_colors(self):
        self.assertEqual("hola", colorize("hola", "GREEN", io.StringIO()))

    def test_04_report_error_without_colors(self):
        stream = FakeTerminal()
        with redirect_stderr(stream):
            report_error("algo falló", use_colors=False)
        self.assertEqual("algo falló\n", stream.getvalue())

    def test_05_shell_passes_flag_to_executor(self):
        shell = Shell(show_prompt=False, use_colors=False)
        self.assertFalse(shell.use_colors)
        self.assertFalse(shell.executor.use_colors)
        self.assertTrue(Shell().executor.use_colors)

    def test_06_given_executor_is_kept(self):
        executor = CommandExecutor(use_colors=False)
        self.assertIs(executor, Shell(executor=executor).executor)


if __name__ == "__main__":
    unittest.main(verbosity=2)
