"""Regex replacement that can also pull tokens from a variables mapping.

Replacement templates understand:

- ``$n``: text of capture group ``n`` (digits consumed greedily).
- ``${n}``: same, bracketed.
- ``${name}``: named capture group ``name``, falling back to
  ``variables["name"]``, falling back to the empty string.
- ``\\\\``, ``\\$`` and ``\\}``: the literal escaped character.

Templates are compiled into parts by ``TemplateScanner``, a state machine
over the template characters, and then expanded once per match.
"""

import itertools
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from metricwire.core.exceptions import ReplacementError

ESCAPABLE = frozenset("\\$}")


@dataclass(frozen=True)
class Literal:
    """Text copied to the output as is."""

    text: str


@dataclass(frozen=True)
class GroupRef:
    """Reference to a capture group by ordinal."""

    index: int


@dataclass(frozen=True)
class NameRef:
    """Reference to a named capture group or variable."""

    name: str


TemplatePart = Literal | GroupRef | NameRef


class ScanState(Enum):
    """States of the template scanner."""

    NORMAL = "normal"
    ESCAPE = "escape"
    TOKEN = "token"
    BRACKET_TOKEN = "bracket_token"


class TemplateScanner:
    """Compiles a replacement template into a sequence of parts.

    Example:
        ```python
        TemplateScanner("a $1 ${host}").scan()
        # (Literal("a "), GroupRef(1), Literal(" "), NameRef("host"))
        ```
    """

    def __init__(self, template: str) -> None:
        self.template = template
        self.state = ScanState.NORMAL
        self._escape_from = ScanState.NORMAL
        self._literal: list[str] = []
        self._token: list[str] = []
        self._parts: list[TemplatePart] = []
        self._handlers: dict[ScanState, Callable[[str, int], ScanState]] = {
            ScanState.NORMAL: self._normal,
            ScanState.ESCAPE: self._escape,
            ScanState.TOKEN: self._bare_token,
            ScanState.BRACKET_TOKEN: self._bracket_token,
        }

    def scan(self) -> tuple[TemplatePart, ...]:
        """Scan the whole template.

        Returns:
            Parts in template order; adjacent literal text is merged.

        Raises:
            ReplacementError: On improper escapes, a ``$`` not followed by
                digits or ``{``, empty or unterminated bracketed tokens.
        """
        for col, char in enumerate(self.template):
            self.state = self._handlers[self.state](char, col)
        self._finish(len(self.template))
        return tuple(self._parts)

    def _normal(self, char: str, col: int) -> ScanState:
        if char == "\\":
            self._escape_from = ScanState.NORMAL
            return ScanState.ESCAPE
        if char == "$":
            self._flush_literal()
            return ScanState.TOKEN
        self._literal.append(char)
        return ScanState.NORMAL

    def _escape(self, char: str, col: int) -> ScanState:
        if char not in ESCAPABLE:
            raise ReplacementError(
                f"Improperly escaped {char!r} in replacement at col {col}: {self.template}"
            )
        if self._escape_from is ScanState.NORMAL:
            self._literal.append(char)
        else:
            self._token.append(char)
        return self._escape_from

    def _bare_token(self, char: str, col: int) -> ScanState:
        if char.isdecimal():
            self._token.append(char)
            return ScanState.TOKEN
        if not self._token:
            if char == "{":
                return ScanState.BRACKET_TOKEN
            raise ReplacementError(
                f"Invalid replacement token at col {col}, named tokens must use "
                f"the ${{name}} form: {self.template}"
            )
        self._emit_token(numeric=True, col=col)
        return self._normal(char, col)

    def _bracket_token(self, char: str, col: int) -> ScanState:
        if char == "\\":
            self._escape_from = ScanState.BRACKET_TOKEN
            return ScanState.ESCAPE
        if char == "}":
            self._emit_token(numeric="".join(self._token).isdecimal(), col=col)
            return ScanState.NORMAL
        self._token.append(char)
        return ScanState.BRACKET_TOKEN

    def _finish(self, col: int) -> None:
        if self.state is ScanState.ESCAPE:
            raise ReplacementError(
                f"Improper escaping in replacement, must not have trailing '\\' "
                f"at col {col}: {self.template}"
            )
        if self.state is ScanState.BRACKET_TOKEN:
            raise ReplacementError(
                f"Invalid replacement token, expected '}}' at col {col}: {self.template}"
            )
        if self.state is ScanState.TOKEN:
            if not self._token:
                raise ReplacementError(
                    f"Invalid replacement token, expected a group or '{{' at col "
                    f"{col}: {self.template}"
                )
            self._emit_token(numeric=True, col=col)
        self._flush_literal()

    def _flush_literal(self) -> None:
        if self._literal:
            self._parts.append(Literal("".join(self._literal)))
            self._literal.clear()

    def _emit_token(self, numeric: bool, col: int) -> None:
        token = "".join(self._token)
        self._token.clear()
        if not token:
            raise ReplacementError(
                f"Empty replacement token at col {col}: {self.template}"
            )
        self._parts.append(GroupRef(int(token)) if numeric else NameRef(token))


@lru_cache(maxsize=256)
def compile_template(template: str) -> tuple[TemplatePart, ...]:
    """Compile a replacement template, caching the result."""
    return TemplateScanner(template).scan()


def expand(
    parts: tuple[TemplatePart, ...],
    match: re.Match[str],
    variables: Mapping[str, str],
) -> str:
    """Expand compiled template parts against one match.

    Raises:
        ReplacementError: If a group ordinal does not exist in the pattern.
    """
    output: list[str] = []
    for part in parts:
        if isinstance(part, Literal):
            output.append(part.text)
        elif isinstance(part, GroupRef):
            try:
                output.append(match.group(part.index) or "")
            except IndexError as e:
                raise ReplacementError(
                    f"No group {part.index} in pattern {match.re.pattern!r}"
                ) from e
        elif part.name in match.re.groupindex:
            output.append(match.group(part.name) or "")
        else:
            output.append(variables.get(part.name, ""))
    return "".join(output)


def replace_all(
    pattern: re.Pattern[str] | str,
    text: str,
    replacement: str,
    variables: Mapping[str, str] | None = None,
) -> str:
    """Replace every match of pattern in text with an expanded template.

    Args:
        pattern: Compiled pattern (or pattern source) searched from the start of text.
        text: The string to search.
        replacement: Template expanded once per match.
        variables: Fallback values for named tokens absent from the pattern.

    Returns:
        text with each match replaced; text itself when nothing matches.

    Raises:
        ReplacementError: If the template is malformed or references a
            group the pattern does not have. Only raised when something matches.
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    matches = pattern.finditer(text)
    first = next(matches, None)
    if first is None:
        return text

    parts = compile_template(replacement)
    variables = variables or {}
    output: list[str] = []
    last_end = 0
    for match in itertools.chain([first], matches):
        output.append(text[last_end : match.start()])
        output.append(expand(parts, match, variables))
        last_end = match.end()
    # Unmatched tail
    output.append(text[last_end:])
    return "".join(output)
