"""Load the CLI command tree and error catalogue, and compile their pages.

The CLI describes itself in two JSON documents: a command tree
(``cli-doc.json``), whose root holds the global flags and whose children are
the commands, and a list of common errors (``common-errors-doc.json``). Both
are decoded into frozen dataclasses here and compiled into the same
:class:`~refdoc_pages.compiler.SectionFragment` lists the reflection pages
use, so one template renders every page.

Example
-------
>>> from refdoc_pages.cli_reference import load_cli_reference, cli_sections
>>> root = load_cli_reference("cli-doc.json")  # doctest: +SKIP
>>> [s.title for s in cli_sections(root) if s.level == 2]  # doctest: +SKIP
['Global Flags', 'Commands']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

import msgspec
import msgspec.json as msgspec_json

from refdoc_pages.compiler import SectionFragment
from refdoc_pages.compiler.dispatcher import UNION_SEPARATOR, code, quoted
from refdoc_pages.errors import CliDocumentError
from refdoc_pages.reflection import read_source

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class CliArgument:
    """Positional argument of a command."""

    name: str
    description: str
    required: bool = False

    @property
    def label(self) -> str:
        """Return the name, suffixed with ``?`` when optional."""
        return self.name if self.required else f"{self.name}?"

    @property
    def usage(self) -> str:
        """Return ``<name>`` for required arguments and ``[name]`` otherwise."""
        return f"<{self.name}>" if self.required else f"[{self.name}]"


@dc.dataclass(frozen=True, slots=True)
class CliFlag:
    """Named flag of a command, or a global flag on the root."""

    name: str
    description: str
    type: str


@dc.dataclass(frozen=True, slots=True)
class CliCommand:
    """A node of the command tree.

    Attributes
    ----------
    name : str
        Command name as typed after ``sst``.
    description : str
        Long description when the CLI provides one, else the short one.
    args : tuple[CliArgument, ...]
        Positional arguments in declaration order.
    flags : tuple[CliFlag, ...]
        Flags in declaration order.
    children : tuple[CliCommand, ...]
        Subcommands, hidden ones included.
    hidden : bool
        Whether the command is left out of the reference.
    """

    name: str
    description: str
    args: tuple[CliArgument, ...] = ()
    flags: tuple[CliFlag, ...] = ()
    children: tuple[CliCommand, ...] = ()
    hidden: bool = False

    @property
    def usage(self) -> str:
        """Return the command name followed by its argument placeholders."""
        return " ".join([self.name, *(arg.usage for arg in self.args)])

    def visible_children(self) -> list[CliCommand]:
        """Return subcommands that are not hidden."""
        return [child for child in self.children if not child.hidden]


@dc.dataclass(frozen=True, slots=True)
class CommonError:
    """An error the CLI reports, with the text explaining how to fix it."""

    code: str
    message: str
    long: tuple[str, ...] = ()


def _decode(source: Path | str) -> object:
    payload = read_source(source)
    try:
        return msgspec_json.decode(payload)
    except msgspec.DecodeError as exc:
        msg = f"CLI document '{source}' is not valid JSON: {exc}"
        raise CliDocumentError(msg) from exc


def load_cli_reference(source: Path | str) -> CliCommand:
    """Load the CLI command tree from a local path or URL.

    Raises
    ------
    FileNotFoundError
        If ``source`` is a path that does not exist.
    CliDocumentError
        If the document is not JSON or a command has the wrong shape.
    """
    return _build_command(_decode(source), "root")


def load_common_errors(source: Path | str) -> list[CommonError]:
    """Load the common-error catalogue from a local path or URL.

    Raises
    ------
    FileNotFoundError
        If ``source`` is a path that does not exist.
    CliDocumentError
        If the document is not a JSON list of error objects.
    """
    raw = _decode(source)
    if not isinstance(raw, list):
        msg = f"Common errors document '{source}' must contain a JSON list."
        raise CliDocumentError(msg)
    return [_build_error(item, index) for index, item in enumerate(raw)]


def _require_list(raw: dict[str, typ.Any], key: str, where: str) -> list[typ.Any]:
    value = raw.get(key) or []
    if not isinstance(value, list):
        msg = f"'{key}' of {where} must be a list."
        raise CliDocumentError(msg)
    return value


def _description(raw: object, where: str) -> str:
    match raw:
        case {"long": str() as long}:
            return long
        case {"short": str() as short}:
            return short
        case _:
            msg = f"{where} has no description."
            raise CliDocumentError(msg)


def _build_command(raw: object, where: str) -> CliCommand:
    match raw:
        case {"name": str() as name, **rest}:
            owner = f"command '{name}'"
            return CliCommand(
                name=name,
                description=_description(rest.get("description"), owner),
                args=tuple(
                    _build_argument(item, owner)
                    for item in _require_list(rest, "args", owner)
                ),
                flags=tuple(
                    _build_flag(item, owner)
                    for item in _require_list(rest, "flags", owner)
                ),
                children=tuple(
                    _build_command(item, owner)
                    for item in _require_list(rest, "children", owner)
                ),
                hidden=bool(rest.get("hidden", False)),
            )
        case _:
            msg = f"Command at {where} must be an object with a name."
            raise CliDocumentError(msg)


def _build_argument(raw: object, where: str) -> CliArgument:
    match raw:
        case {"name": str() as name, **rest}:
            description = _description(rest.get("description"), f"{where} arg {name}")
            return CliArgument(name, description, bool(rest.get("required", False)))
        case _:
            msg = f"Arguments of {where} must be objects with a name."
            raise CliDocumentError(msg)


def _build_flag(raw: object, where: str) -> CliFlag:
    match raw:
        case {"name": str() as name, "type": str() as type_, **rest}:
            description = _description(rest.get("description"), f"{where} flag {name}")
            return CliFlag(name, description, type_)
        case _:
            msg = f"Flags of {where} must be objects with a name and a type."
            raise CliDocumentError(msg)


def _build_error(raw: object, index: int) -> CommonError:
    match raw:
        case {"code": str() as code_, "message": str() as message, **rest}:
            long = rest.get("long") or []
            if not isinstance(long, list):
                msg = f"'long' of error '{code_}' must be a list of lines."
                raise CliDocumentError(msg)
            return CommonError(code_, message, tuple(str(line) for line in long))
        case _:
            msg = f"Error #{index} must be an object with a code and a message."
            raise CliDocumentError(msg)


def flag_type(type_: str) -> str:
    """Render a flag type; ``[a,b]`` lists its allowed values as a union.

    Examples
    --------
    >>> flag_type("bool")
    '<code class="primitive">boolean</code>'
    """
    if type_.startswith("[") and type_.endswith("]"):
        return UNION_SEPARATOR.join(quoted(value) for value in type_[1:-1].split(","))
    if type_ == "bool":
        return code("primitive", "boolean")
    return code("primitive", type_)


def _signature(usage: str) -> list[str]:
    return [
        '<Section type="signature">',
        '```sh frame="none"',
        f"sst {usage}",
        "```",
        "</Section>",
    ]


def _command_body(command: CliCommand) -> list[str]:
    body = ["<Segment>"]
    subcommands = command.visible_children()
    if not command.children:
        body.extend(_signature(command.usage))
    if command.args:
        body.extend(["", '<Section type="parameters">', "#### Args"])
        for arg in command.args:
            body.extend(
                [f"- <p>{code('key', arg.label)}</p>", f"<p>{arg.description}</p>"]
            )
        body.append("</Section>")
    if command.flags:
        body.extend(["", '<Section type="parameters">', "#### Flags"])
        for flag in command.flags:
            body.extend(
                [
                    f"- <p>{code('key', flag.name)} {flag_type(flag.type)}</p>",
                    f"<p>{flag.description}</p>",
                ]
            )
        body.append("</Section>")
    if command.children:
        body.extend(["", '<Section type="parameters">', "#### Subcommands"])
        body.extend(
            f"- <p>[{code('key', sub.name)}](#{command.name}-{sub.name})</p>"
            for sub in subcommands
        )
        body.append("</Section>")
    body.extend([command.description, "</Segment>"])
    return body


def _subcommand_section(command: CliCommand, sub: CliCommand) -> SectionFragment:
    body = ["<Segment>", *_signature(f"{command.name} {sub.usage}")]
    if sub.args:
        body.extend(['<Section type="parameters">', "#### Args"])
        for arg in sub.args:
            body.extend(
                [f"- <p>{code('key', arg.name)}</p>", f"<p>{arg.description}</p>"]
            )
        body.append("</Section>")
    if sub.flags:
        body.extend(['<Section type="parameters">', "#### Flags"])
        for flag in sub.flags:
            body.extend(
                [f"- <p>{code('key', flag.name)}</p>", f"<p>{flag.description}</p>"]
            )
        body.append("</Section>")
    body.extend([sub.description, "</Segment>"])
    return SectionFragment(
        sub.name,
        4,
        body,
        anchor=f"{command.name}-{sub.name}",
        parent=f"{command.name} ",
    )


def cli_sections(root: CliCommand) -> list[SectionFragment]:
    """Return the about, global flags and commands sections of the CLI page."""
    logger.debug(" - about")
    sections = [
        SectionFragment(
            "",
            0,
            ["", '<Section type="about">', root.description, "</Section>", "", "---"],
        )
    ]
    if root.flags:
        sections.append(SectionFragment("Global Flags", 2))
    for flag in root.flags:
        logger.debug(" - global flag %s", flag.name)
        body = [
            "<Segment>",
            '<Section type="parameters">',
            "<InlineSection>",
            f"**Type** {flag_type(flag.type)}",
            "</InlineSection>",
            "</Section>",
            flag.description,
            "</Segment>",
        ]
        sections.append(SectionFragment(flag.name, 3, body))
    if root.children:
        sections.append(SectionFragment("Commands", 2))
    for command in root.visible_children():
        logger.debug(" - command %s", command.name)
        sections.append(SectionFragment(command.name, 3, _command_body(command)))
        sections.extend(
            _subcommand_section(command, sub) for sub in command.visible_children()
        )
    return sections


COMMON_ERRORS_ABOUT = [
    "Below is a collection of common errors you might encounter when using SST.",
    "",
    ":::tip",
    "The error messages in the CLI link to this doc.",
    ":::",
    "",
    "The error messages and descriptions in this doc are auto-generated from the CLI.",
    "",
]


def common_error_sections(errors: typ.Iterable[CommonError]) -> list[SectionFragment]:
    """Return the introduction followed by one untitled section per error.

    Error headings are written into the body so they follow a ``---`` rule.
    """
    sections = [SectionFragment("", 0, list(COMMON_ERRORS_ABOUT))]
    for error in errors:
        logger.debug(" - error %s", error.code)
        body = ["", "---", "", f"## {error.code}", "", f"> {error.message}", ""]
        sections.append(SectionFragment("", 0, [*body, *error.long]))
    return sections


__all__ = [
    "CliArgument",
    "CliCommand",
    "CliFlag",
    "CommonError",
    "cli_sections",
    "common_error_sections",
    "flag_type",
    "load_cli_reference",
    "load_common_errors",
]
