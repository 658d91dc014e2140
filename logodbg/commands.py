"""Turtle command table bound into the interpreter's global scope."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from .context import HostContext
from .errors import ValidationError
from .values import Cons, List as LogoList

Handler = Callable[..., Awaitable[Any]]


def _number(value: Any) -> float:
    # bools are not numbers in Logo
    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _pair(value: Any) -> tuple[float, float]:
    if not isinstance(value, LogoList):
        raise ValidationError("list must be a list")
    if not isinstance(value, Cons) or not isinstance(value.tail, Cons) or not value.tail.tail.is_empty():
        raise ValidationError("list must have two elements")
    return _number(value.head), _number(value.tail.head)


@dataclass
class Command:
    """One named handler plus its aliases."""

    name: str
    description: str
    handler: Handler
    aliases: Sequence[str] = field(default_factory=tuple)

    def format_help(self) -> str:
        return f"{self.name:<12} {self.description}"


class CommandRegistry:
    """Stores the known commands and resolves aliases."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._ordered: List[Command] = []

    def register(self, command: Command) -> None:
        for key in (command.name, *command.aliases):
            if key in self._commands:
                raise ValueError(f"command {key!r} already registered")
        self._ordered.append(command)
        self._commands[command.name] = command
        for alias in command.aliases:
            self._commands[alias] = command

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def list_commands(self) -> Iterable[Command]:
        return self._ordered

    def names(self) -> List[str]:
        return sorted(self._commands)

    def bindings(self) -> Dict[str, Handler]:
        """Name and alias mapping suitable for ``Interpreter.bind_values``."""
        return {key: command.handler for key, command in self._commands.items()}


def build_command_table(ctx: HostContext) -> CommandRegistry:
    turtle = ctx.turtle

    async def print_(*args: Any) -> None:
        # nested lists are passed through str(), not flattened
        ctx.print("output", " ".join(str(arg) for arg in args))

    async def clear_screen() -> None:
        turtle.clear_screen()

    async def xcor() -> float:
        return turtle.x

    async def ycor() -> float:
        return turtle.y

    async def pos() -> LogoList:
        return LogoList.of(turtle.x, turtle.y)

    async def setpos(value: Any) -> None:
        x, y = _pair(value)
        turtle.set_pos(x, y)

    async def heading() -> float:
        return turtle.heading

    async def seth(value: Any) -> None:
        turtle.heading = _number(value)

    async def forward(dist: Any) -> None:
        turtle.forward(_number(dist))

    async def back(dist: Any) -> None:
        turtle.back(_number(dist))

    async def right(deg: Any) -> None:
        turtle.right(_number(deg))

    async def left(deg: Any) -> None:
        turtle.left(_number(deg))

    async def up() -> None:
        turtle.up()

    async def down() -> None:
        turtle.down()

    async def color(spec: Any) -> None:
        turtle.color(str(spec))

    registry = CommandRegistry()
    for command in (
        Command("print", "Print the arguments separated by spaces", print_),
        Command("cs", "Clear the screen and home the turtle", clear_screen, aliases=("clearscreen",)),
        Command("xcor", "Report the turtle's x coordinate", xcor),
        Command("ycor", "Report the turtle's y coordinate", ycor),
        Command("pos", "Report the position as [x y]", pos),
        Command("setpos", "Move the turtle to [x y]", setpos),
        Command("heading", "Report the heading in degrees", heading),
        Command("seth", "Set the heading in degrees", seth, aliases=("setheading",)),
        Command("forward", "Move forward", forward, aliases=("fd",)),
        Command("back", "Move backward", back, aliases=("bk",)),
        Command("right", "Turn clockwise", right, aliases=("rt",)),
        Command("left", "Turn counter-clockwise", left, aliases=("lt",)),
        Command("up", "Lift the pen", up, aliases=("pu",)),
        Command("down", "Lower the pen", down, aliases=("pd",)),
        Command("color", "Set the pen color", color),
    ):
        registry.register(command)
    return registry


__all__ = ["Command", "CommandRegistry", "Handler", "build_command_table"]
