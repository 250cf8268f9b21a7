import os
import shutil
import signal
import sys
from typing import Dict, List, Mapping, Optional, Set

from minishell.ast_tree import Command, JobStatus, PipelineJob
from minishell.colors import colorize, report_error
from minishell.errors import (
    FatalShellError,
    RedirectError,
    ShellError,
    UnknownCommandError,
    os_reason,
)

STDIN_FILENO = 0
STDOUT_FILENO = 1
STDERR_FILENO = 2

OUTPUT_FILE_MODE = 0o600
CHUNK_SIZE = 64 * 1024
COMMAND_NOT_FOUND = 127

BUILTINS = ("cd", "exit")
RESTORED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGPIPE", "SIGXFSZ") if hasattr(signal, name)
)


def exit_code(status: int) -> int:
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    if os.WIFSIGNALED(status):
        return 128 + os.WTERMSIG(status)
    return 1


def copy_stream(source_fd: int, target_fd: int) -> None:
    while True:
        chunk = os.read(source_fd, CHUNK_SIZE)
        if not chunk:
            return
        while chunk:
            written = os.write(target_fd, chunk)
            chunk = chunk[written:]


class CommandExecutor:
    """
    Clase que representa el ejecutor de comandos.

    Cada etapa del pipeline corre en un proceso hijo propio, conectado a la
    siguiente por un pipe anónimo. Un último proceso (el drenador) copia la
    salida de la última etapa hacia el archivo de redirección o hacia la
    salida estándar de la shell; solo a ese proceso se le espera, y solo si
    el pipeline no va en background.
    """

    def __init__(self, env: Optional[Mapping[str, str]] = None, use_colors: bool = True) -> None:
        self.env = dict(env) if env is not None else os.environ.copy()
        self.use_colors = use_colors
        self.last_return_code = 0
        self.children: Set[int] = set()

    def execute(self, command: Command) -> int:
        try:
            if command.next_stage is None and command.program in BUILTINS:
                code = self._execute_builtin(command)
            else:
                job = self.run_pipeline(command)
                if job.status == JobStatus.DETACHED:
                    print(
                        colorize(f"[{job.drain_pid}]", "CYAN", sys.stderr, self.use_colors),
                        file=sys.stderr,
                        flush=True,
                    )
                code = job.exit_status or 0
        except FatalShellError:
            raise
        except ShellError as e:
            report_error(str(e), self.use_colors)
            code = e.exit_code

        self.last_return_code = code
        return code

    def run_pipeline(self, command: Command) -> PipelineJob:
        self.reap_children()
        job = PipelineJob(command.to_line())

        for stage in command.stages():
            self.resolve_program(stage.program)

        input_fd = STDIN_FILENO
        if command.input_redirect is not None:
            input_fd = self._open_redirect(command.input_redirect, os.O_RDONLY)

        last = command.last_stage()
        output_fd = STDOUT_FILENO
        if last.output_redirect is not None:
            mode = os.O_APPEND if last.append_output else os.O_TRUNC
            try:
                output_fd = self._open_redirect(
                    last.output_redirect, os.O_WRONLY | os.O_CREAT | mode
                )
            except RedirectError:
                if input_fd != STDIN_FILENO:
                    os.close(input_fd)
                raise

        try:
            job.status = JobStatus.LAUNCHING
            stage_output = self.launch_stage(command, input_fd, job)
            job.status = JobStatus.DRAINING
            job.drain_pid = self._spawn_drain(stage_output, output_fd)
        finally:
            if output_fd != STDOUT_FILENO:
                os.close(output_fd)

        if command.is_background():
            job.status = JobStatus.DETACHED
            return job

        _, status = os.waitpid(job.drain_pid, 0)
        self.children.discard(job.drain_pid)
        job.exit_status = exit_code(status)
        job.status = JobStatus.WAITED
        self.reap_children()
        return job

    def launch_stage(self, command: Command, input_fd: int, job: PipelineJob) -> int:
        """
        Lanza la etapa command leyendo de input_fd y, recursivamente, las
        siguientes. Devuelve el extremo de lectura del pipe de la última
        etapa, todavía sin consumidor.
        """
        read_end, write_end = self._pipe()

        pid = self._fork()
        if pid == 0:
            self._exec_stage(command, input_fd, read_end, write_end)

        os.close(write_end)
        if input_fd != STDIN_FILENO:
            os.close(input_fd)
        job.pids.append(pid)
        self.children.add(pid)

        if command.next_stage is None:
            return read_end
        return self.launch_stage(command.next_stage, read_end, job)

    def _exec_stage(self, command: Command, input_fd: int, read_end: int, write_end: int) -> None:
        # Proceso hijo: nunca vuelve al código de la shell
        try:
            # Python deja SIGPIPE ignorado y eso se hereda a través de exec
            for signum in RESTORED_SIGNALS:
                signal.signal(signum, signal.SIG_DFL)
            os.dup2(input_fd, STDIN_FILENO)
            os.dup2(write_end, STDOUT_FILENO)
            os.close(read_end)
            if write_end != STDOUT_FILENO:
                os.close(write_end)
            os.execvpe(command.program, command.arguments, self.env)
        except OSError:
            os.write(STDERR_FILENO, f"{command.program}: command not found\n".encode())
        finally:
            os._exit(COMMAND_NOT_FOUND)

    def _spawn_drain(self, source_fd: int, target_fd: int) -> int:
        pid = self._fork()
        if pid == 0:
            code = 0
            try:
                copy_stream(source_fd, target_fd)
            except OSError:
                code = 1
            finally:
                os._exit(code)

        os.close(source_fd)
        self.children.add(pid)
        return pid

    def resolve_program(self, program: str) -> str:
        if "/" in program:
            if os.path.isfile(program) and os.access(program, os.X_OK):
                return program
        else:
            found = shutil.which(program, path=self.env.get("PATH", os.defpath))
            if found:
                return found
        raise UnknownCommandError(program)

    def reap_children(self) -> Dict[int, int]:
        reaped = {}
        for pid in list(self.children):
            try:
                done, status = os.waitpid(pid, os.WNOHANG)
            except ChildProcessError:
                self.children.discard(pid)
                continue
            if done == 0:
                continue
            self.children.discard(pid)
            reaped[pid] = exit_code(status)
        return reaped

    def _open_redirect(self, filename: str, flags: int) -> int:
        try:
            return os.open(filename, flags, OUTPUT_FILE_MODE)
        except OSError as e:
            raise RedirectError(filename, e) from e

    def _pipe(self):
        try:
            return os.pipe()
        except OSError as e:
            raise FatalShellError(f"pipe: {os_reason(e)}") from e

    def _fork(self) -> int:
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            return os.fork()
        except OSError as e:
            raise FatalShellError(f"fork: {os_reason(e)}") from e

    def _execute_builtin(self, command: Command) -> int:
        if command.program == "exit":
            sys.exit(0)
        return self._builtin_cd(command.arguments[1:])

    def _builtin_cd(self, args: List[str]) -> int:
        new_dir = args[0] if args else os.path.expanduser("~")
        try:
            os.chdir(new_dir)
        except OSError as e:
            report_error(f"cd: {new_dir}: {os_reason(e)}", self.use_colors)
            return 1
        return 0
