"""Pattern tokenization — ``{name}`` placeholders to regular expressions.

A route pattern is literal text plus ``{name}`` placeholders::

    "/users/{id}"            -> "/users/([\\w\\-]+)"
    "/items/{id}" + id=\\d+   -> "/items/(\\d+)"

Literal segments are passed through unescaped, so they must not contain
regex metacharacters. Compiled patterns are cached; tokenization is pure.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from wren.errors import ConfigurationError

PLACEHOLDER = re.compile(r"\{([A-Za-z0-9_-]+)\}")


def normalize_path(path: str) -> str:
    """Trim slashes and re-prefix exactly one.

    ``"foo/"``, ``"/foo"`` and ``"foo"`` all become ``"/foo"``; an empty
    path becomes ``"/"``.
    """
    return "/" + path.strip().strip("/")


def placeholder_names(pattern: str) -> tuple[str, ...]:
    """Placeholder names in left-to-right order."""
    return tuple(PLACEHOLDER.findall(pattern))


def _closing_paren(fragment: str, start: int) -> int:
    """Index of the ``)`` matching the ``(`` at *start*, or -1."""
    depth = 0
    in_class = False
    i = start
    while i < len(fragment):
        char = fragment[i]
        if char == "\\":
            i += 2
            continue
        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def unwrap(fragment: str) -> str:
    """Strip one layer of enclosing capture parentheses.

    ``"(\\d+)"`` becomes ``"\\d+"``. Fragments like ``"(a)|(b)"`` or
    ``"(?:ab)+"`` are left alone, since their outer parentheses do not
    enclose the whole fragment as a plain group.
    """
    fragment = fragment.strip()
    if (
        fragment.startswith("(")
        and not fragment.startswith("(?")
        and _closing_paren(fragment, 0) == len(fragment) - 1
    ):
        return fragment[1:-1]
    return fragment


def check_constraint(name: str, fragment: str) -> None:
    """Fail fast on a fragment that does not compile on its own."""
    try:
        re.compile(unwrap(fragment))
    except re.error as exc:
        msg = f"Invalid constraint {fragment!r} for parameter {name!r}: {exc}"
        raise ConfigurationError(msg) from exc


def tokenize(
    pattern: str,
    constraints: Iterable[tuple[str, str]],
    default_constraint: str,
) -> str:
    """Replace each placeholder with a capture group.

    Returns the expression body only; callers anchor it. Later pairs in
    *constraints* override earlier ones for the same name.
    """
    lookup = dict(constraints)
    default = unwrap(default_constraint)

    def _substitute(match: re.Match[str]) -> str:
        fragment = lookup.get(match.group(1))
        if fragment is None:
            return f"({default})"
        return f"({unwrap(fragment)})"

    return PLACEHOLDER.sub(_substitute, pattern)


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """An anchored route expression plus where each parameter is captured.

    ``groups[i]`` is the group index holding the i-th placeholder. A
    constraint may carry capture groups of its own, so indices are counted
    rather than assumed to be ``1..n``.
    """

    source: str
    regex: re.Pattern[str]
    names: tuple[str, ...]
    groups: tuple[int, ...]

    def match(self, path: str) -> tuple[str, ...] | None:
        """Captured parameters for a full match of *path*, else ``None``."""
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return tuple(m.group(i) for i in self.groups)


@lru_cache(maxsize=1024)
def compile_pattern(
    pattern: str,
    constraints: tuple[tuple[str, str], ...],
    default_constraint: str,
    case_sensitive: bool = False,
) -> CompiledPattern:
    """Tokenize, anchor, and compile *pattern*.

    Raises ``ConfigurationError`` when the result is not a valid
    expression (unbalanced parentheses in a constraint, metacharacters in
    a literal segment).
    """
    source = "^" + tokenize(pattern, constraints, default_constraint) + "$"
    flags = 0 if case_sensitive else re.IGNORECASE

    try:
        regex = re.compile(source, flags)
    except re.error as exc:
        msg = f"Route pattern {pattern!r} compiles to an invalid expression {source!r}: {exc}"
        raise ConfigurationError(msg) from exc

    lookup = dict(constraints)
    default = unwrap(default_constraint)
    names = placeholder_names(pattern)
    groups: list[int] = []

    # Each placeholder opens one group, followed by the groups its fragment owns.
    # Literal text between placeholders must not open groups of its own.
    index = 1
    for name in names:
        groups.append(index)
        fragment = unwrap(lookup[name]) if name in lookup else default
        index += 1 + re.compile(fragment).groups

    if regex.groups != index - 1:
        msg = (
            f"Route pattern {pattern!r} contains capture groups outside its "
            "placeholders; write literal segments without parentheses."
        )
        raise ConfigurationError(msg)

    return CompiledPattern(source=source, regex=regex, names=names, groups=tuple(groups))
