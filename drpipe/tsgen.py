"""Generation of TypeScript bindings for pipeline module commands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Tuple, Union

__all__ = [
    "Arg",
    "CommandDef",
    "Module",
    "TS_HEADER",
    "Ty",
    "generate",
    "generate_ts",
    "options_type_name",
]

TS_HEADER = "import { Arg, Command, Input } from './mod.ts';\n\n"


class Ty(enum.Flag):
    """The value types a command argument or result may take."""

    PATH = enum.auto()
    STRING = enum.auto()
    JSON = enum.auto()
    BYTES = enum.auto()
    INT = enum.auto()
    ARRAY_STRING = enum.auto()
    ARRAY_BYTES = enum.auto()
    MAP_PATH = enum.auto()
    MAP_STRING = enum.auto()
    MAP_BYTES = enum.auto()

    def as_ts_type(self) -> str:
        """The TypeScript union type for the flags that are set."""
        return " | ".join(_TS_TYPES[member] for member in _members(self))


_TS_TYPES = {
    Ty.PATH: "string",
    Ty.STRING: "string",
    Ty.JSON: "any",
    Ty.BYTES: "Uint8Array",
    Ty.INT: "number",
    Ty.ARRAY_STRING: "string[]",
    Ty.ARRAY_BYTES: "Uint8Array[]",
    Ty.MAP_PATH: "Record<string, string>",
    Ty.MAP_STRING: "Record<string, string>",
    Ty.MAP_BYTES: "Record<string, Uint8Array>",
}


def _members(ty: Ty) -> list:
    return [member for member in Ty if member in ty]


def _dr_type(ty: Ty) -> str:
    return "|".join(member.name.lower() for member in _members(ty))


@dataclass(frozen=True)
class Arg:
    """A named, typed argument of a command."""

    name: str
    ty: Ty


@dataclass(frozen=True)
class CommandDef:
    """A command offered by a module."""

    name: str
    returns: Ty
    args: Tuple[Arg, ...] = ()


@dataclass(frozen=True)
class Module:
    """A named group of commands."""

    name: str
    commands: Tuple[CommandDef, ...] = field(default_factory=tuple)


def options_type_name(command_name: str) -> str:
    """Name of the options interface for a command: capitalised plus ``Options``."""
    if not command_name:
        raise ValueError("command name must not be empty")
    return command_name[0].upper() + command_name[1:] + "Options"


def generate_ts(module: Module) -> str:
    """Render the TypeScript source for one module."""
    out = [TS_HEADER]

    def line(text: str) -> None:
        out.append(text + "\n")

    for command in module.commands:
        name = command.name
        if command.args:
            options = options_type_name(name)
            line(f"interface {options} {{")
            for arg in command.args:
                line(f"    {arg.name}: {arg.ty.as_ts_type()};")
            line("}\n")
            line(
                f"export function {name}(id: string, input: Input, options: {options}): Command;"
            )
            line(f"export function {name}(input: Input, options: {options}): Command;")
            line(
                f"export function {name}(arg1: string | Input, arg2: Input | {options}, "
                f"arg3?: {options}): Command {{"
            )
            line("    const hasId = typeof arg1 === 'string';")
            line("    const id = hasId ? arg1 : undefined;")
            line("    const input = hasId ? arg2 as Input : arg1 as Input;")
            line(f"    const options = hasId ? arg3! : arg2 as {options};")
        else:
            line(f"export function {name}(id: string, input: Input): Command;")
            line(f"export function {name}(input: Input): Command;")
            line(f"export function {name}(arg1: string | Input, arg2?: Input): Command {{")
            line("    const hasId = typeof arg1 === 'string';")
            line("    const id = hasId ? arg1 : undefined;")
            line("    const input = hasId ? arg2! : arg1 as Input;")

        line("    return new Command({")
        line("        id,")
        line(f'        module: "{module.name}",')
        line(f'        command: "{name}",')
        line("        input,")
        line(f'        returns: "{_dr_type(command.returns)}",')
        if command.args:
            line("        args: {")
            for arg in command.args:
                line(
                    f'            {arg.name}: new Arg("{_dr_type(arg.ty)}", options.{arg.name}),'
                )
            line("        }")
        line("    });")
        line("}\n")

    return "".join(out)


def generate(
    output_path: Union[str, Path], modules: Iterable[Module], index_ts: str
) -> None:
    """Write ``mod.ts`` and one ``<module>.ts`` file per module into a directory."""
    root = Path(output_path)
    root.mkdir(parents=True, exist_ok=True)
    (root / "mod.ts").write_text(index_ts, encoding="utf-8")
    for module in modules:
        (root / module.name).with_suffix(".ts").write_text(
            generate_ts(module), encoding="utf-8"
        )