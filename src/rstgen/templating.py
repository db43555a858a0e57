"""The ``$`` substitution language used to assemble output fragments.

Syntax understood by :func:`format_named_vars`:

* ``$$`` is a literal dollar sign.
* ``$1``, ``$2``... insert the value at that 1-based position and move the
  implicit cursor there.
* ``$#`` inserts the value at the cursor and advances it.
* ``$name`` and ``${name}`` insert the value whose name matches ``name``
  ignoring case and underscores.

Every rendering rule expresses its HTML and LaTeX spellings as two such format
strings; :func:`disp_format` picks the one for the active target.
"""

from __future__ import annotations

from typing import Sequence

from rstgen.exceptions import SubstitutionError
from rstgen.generator import OutputTarget
from rstgen.utils.text import normalize_style


def _is_name_start(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or ord(char) >= 0x80


def _is_name_char(char: str) -> bool:
    return _is_name_start(char) or char == "_"


def _lookup(varnames: Sequence[str], varvalues: Sequence[str], name: str) -> str:
    wanted = normalize_style(name)
    for index, candidate in enumerate(varnames):
        if normalize_style(candidate) == wanted:
            if index >= len(varvalues):
                raise SubstitutionError(f"no value for substitution var: {name}")
            return varvalues[index]
    raise SubstitutionError(f"unknown substitution var: {name}")


def format_named_vars(
    frmt: str, varnames: Sequence[str], varvalues: Sequence[str]
) -> str:
    """Substitute ``varvalues`` into ``frmt``.

    Raises:
        SubstitutionError: On an out-of-range position, an unknown name, an
            unterminated ``${`` group or an unknown character after ``$``.
    """
    result: list[str] = []
    length = len(frmt)
    cursor = 0
    i = 0
    while i < length:
        dollar = frmt.find("$", i)
        if dollar < 0:
            result.append(frmt[i:])
            break
        result.append(frmt[i:dollar])
        i = dollar + 1
        if i >= length:
            raise SubstitutionError("unknown substitution: trailing '$'")
        char = frmt[i]
        if char == "$":
            result.append("$")
            i += 1
        elif char == "#":
            if cursor >= len(varvalues):
                raise SubstitutionError(f"invalid index: {cursor + 1}")
            result.append(varvalues[cursor])
            cursor += 1
            i += 1
        elif char.isdigit() and char.isascii():
            start = i
            while i < length and frmt[i].isascii() and frmt[i].isdigit():
                i += 1
            position = int(frmt[start:i])
            if position < 1 or position > len(varvalues):
                raise SubstitutionError(f"invalid index: {position}")
            cursor = position
            result.append(varvalues[position - 1])
        elif char == "{":
            close = frmt.find("}", i + 1)
            if close < 0:
                raise SubstitutionError("'}' expected")
            result.append(_lookup(varnames, varvalues, frmt[i + 1 : close]))
            i = close + 1
        elif _is_name_start(char):
            start = i
            i += 1
            while i < length and _is_name_char(frmt[i]):
                i += 1
            result.append(_lookup(varnames, varvalues, frmt[start:i]))
        else:
            raise SubstitutionError(f"unknown substitution: ${char}")
    return "".join(result)


def disp(target: OutputTarget, html: str, latex: str) -> str:
    """Pick the fragment matching ``target``."""
    return latex if target is OutputTarget.LATEX else html


def disp_format(target: OutputTarget, html: str, latex: str, *args: str) -> str:
    """Pick the format matching ``target`` and fill it positionally."""
    return format_named_vars(disp(target, html, latex), (), args)
