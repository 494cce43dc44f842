"""
CUE rendering helpers

Serializes plain Python trees (dicts, lists, scalars) into CUE source text.
Placeholders and schema constraints are carried as Expr strings and are
emitted verbatim, every other string is quoted.
"""
import json
import re
from typing import Any, Iterable, List, Tuple

IDENTIFIER = re.compile(r'^[A-Za-z$][A-Za-z0-9_$]*$')
CONFIG_REFERENCE = re.compile(r'^#config(\.[A-Za-z$][A-Za-z0-9_$]*|\["[^"]*"\])+$')
KEYWORDS = {'true', 'false', 'null', 'if', 'for', 'in', 'let', 'import', 'package', 'div', 'mod', 'quo', 'rem'}
TAB = '\t'


class Expr(str):
    """Raw CUE expression, never quoted"""

    def __repr__(self):
        return f"Expr({str.__repr__(self)})"


class Conjunct:
    """Unification of a schema expression with a struct: `expr & {...}`"""

    def __init__(self, expr: str, value: Any):
        self.expr = expr
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Conjunct) and (self.expr, self.value) == (other.expr, other.value)

    def __repr__(self):
        return f"Conjunct({self.expr!r}, {self.value!r})"


def label(key: str) -> str:
    """Render a struct field label, quoting it unless it is a plain identifier"""
    if isinstance(key, Expr):
        return key
    key = str(key)
    if IDENTIFIER.match(key) and key not in KEYWORDS:
        return key
    return json.dumps(key, ensure_ascii=False)


def reference(path: Iterable[str]) -> Expr:
    """Build a `#config.<path>` reference expression"""
    ref = '#config'
    for segment in path:
        if IDENTIFIER.match(segment) and segment not in KEYWORDS:
            ref += '.' + segment
        else:
            ref += '[' + json.dumps(segment, ensure_ascii=False) + ']'
    return Expr(ref)


def templated_string(text: str) -> Expr:
    """Wrap already escaped interpolation text into a CUE string literal"""
    return Expr('"' + text + '"')


def is_scalar(value: Any) -> bool:
    return not isinstance(value, (dict, list, Conjunct))


def marshal(obj: Any, depth: int = 0, parse: bool = False) -> str:
    """Serialize obj as CUE.

    The first line is not indented, nested lines are indented with depth + 1
    tabs and the closing bracket with depth tabs, so the result can be placed
    right after a `label: ` at the given depth.

    Args:
        obj: Tree of dicts, lists, scalars, Expr and Conjunct values
        depth: Indentation depth of the line the value starts on
        parse: Emit plain strings holding a `#config.` reference unquoted

    Returns:
        CUE source text
    """
    if isinstance(obj, Expr):
        return str(obj)
    if isinstance(obj, Conjunct):
        return f"{obj.expr} & {marshal(obj.value, depth, parse)}"
    if isinstance(obj, dict):
        if not obj:
            return '{}'
        inner = TAB * (depth + 1)
        lines = [f"{inner}{label(k)}: {marshal(v, depth + 1, parse)}" for k, v in obj.items()]
        return '{\n' + '\n'.join(lines) + '\n' + TAB * depth + '}'
    if isinstance(obj, (list, tuple)):
        if not obj:
            return '[]'
        if all(is_scalar(item) for item in obj):
            return '[' + ', '.join(marshal(item, depth, parse) for item in obj) + ']'
        inner = TAB * (depth + 1)
        lines = [f"{inner}{marshal(item, depth + 1, parse)}," for item in obj]
        return '[\n' + '\n'.join(lines) + '\n' + TAB * depth + ']'
    if obj is None:
        return 'null'
    if isinstance(obj, bool):
        return 'true' if obj else 'false'
    if isinstance(obj, (int, float)):
        return json.dumps(obj)
    text = str(obj)
    if parse and CONFIG_REFERENCE.match(text):
        return text
    return json.dumps(text, ensure_ascii=False)


def indent(text: str, depth: int) -> str:
    """Prefix every non-empty line of text with depth tabs"""
    prefix = TAB * depth
    return '\n'.join(prefix + line if line else line for line in text.split('\n'))


def render_imports(body: str, candidates: Iterable[Tuple[str, str]]) -> str:
    """Render an import block holding only the aliases body refers to.

    CUE rejects unused imports, so every candidate alias is checked
    against the rendered body first.
    """
    used: List[Tuple[str, str]] = []
    for alias, path in sorted(set(candidates)):
        if re.search(r'(?<![\w$#.])' + re.escape(alias) + r'\.', body):
            used.append((alias, path))
    if not used:
        return ''
    lines = '\n'.join(f'\t{alias} "{path}"' for alias, path in used)
    return f"import (\n{lines}\n)\n\n"
