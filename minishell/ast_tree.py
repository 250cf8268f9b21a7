from enum import Enum, auto
from typing import Iterator, List, Optional


class Command:
    """
    Clase que representa una etapa de un pipeline.

    Las etapas forman una cadena: next_stage apunta a la etapa que lee la
    salida de esta, y None marca la última.
    """

    def __init__(
        self,
        arguments: List[str] = None,
        input_redirect: Optional[str] = None,
        output_redirect: Optional[str] = None,
        append_output: bool = False,
        background: bool = False,
        next_stage: Optional["Command"] = None,
    ) -> None:
        self.arguments = list(arguments) if arguments else []
        self.input_redirect = input_redirect
        self.output_redirect = output_redirect
        self.append_output = append_output
        self.background = background
        self.next_stage = next_stage

    @property
    def program(self) -> Optional[str]:
        return self.arguments[0] if self.arguments else None

    def stages(self) -> Iterator["Command"]:
        stage = self
        while stage is not None:
            yield stage
            stage = stage.next_stage

    def last_stage(self) -> "Command":
        stage = self
        while stage.next_stage is not None:
            stage = stage.next_stage
        return stage

    def stage_count(self) -> int:
        return sum(1 for _ in self.stages())

    def is_background(self) -> bool:
        return any(stage.background for stage in self.stages())

    def to_line(self) -> str:
        parts = list(self.arguments)
        if self.input_redirect is not None:
            parts.append(f"< {self.input_redirect}")
        if self.output_redirect is not None:
            parts.append(f"{'>>' if self.append_output else '>'} {self.output_redirect}")
        if self.background:
            parts.append("&")
        line = " ".join(parts)
        if self.next_stage is not None:
            line = f"{line} | {self.next_stage.to_line()}"
        return line

    def _fields(self):
        return (
            self.arguments,
            self.input_redirect,
            self.output_redirect,
            self.append_output,
            self.background,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Command):
            return NotImplemented
        left, right = self, other
        while left is not None and right is not None:
            if left._fields() != right._fields():
                return False
            left, right = left.next_stage, right.next_stage
        return left is None and right is None

    def __repr__(self) -> str:
        text = (
            f"Command({self.arguments}, in={self.input_redirect}, "
            f"out={self.output_redirect}, append={self.append_output}, "
            f"background={self.background})"
        )
        if self.next_stage is not None:
            text = f"{text} | {self.next_stage!r}"
        return text


class JobStatus(Enum):
    PARSED = auto()
    LAUNCHING = auto()
    DRAINING = auto()
    WAITED = auto()
    DETACHED = auto()


class PipelineJob:
    """
    Clase que representa un pipeline lanzado.
    """

    def __init__(self, cmd: str) -> None:
        self.cmd = cmd
        self.status = JobStatus.PARSED
        self.pids: List[int] = []
        self.drain_pid: Optional[int] = None
        self.exit_status: Optional[int] = None

    def __repr__(self) -> str:
        return (
            f"PipelineJob(cmd=({self.cmd}), status=({self.status.name}), "
            f"pids=({self.pids}), drain=({self.drain_pid}))"
        )
