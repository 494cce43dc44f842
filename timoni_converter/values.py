"""
Values accumulator

Collects the configurable fields extracted from manifests into two parallel
trees: the schema rendered into templates/config.cue and the concrete
defaults rendered into values.cue.
"""
import copy
import re
from typing import Any, Dict, List, Optional

from .cue import Expr, reference
from .errors import ValuesConflictError

SEGMENT_SEPARATORS = re.compile(r'[-_.\s]+')

SECRET_SCHEMA = Expr('string')


def to_camel_case(segment: str) -> str:
    """Normalize one path segment to lowerCamelCase.

    An all upper case segment is lowercased first so MY_ENV_VAR, my-env-var
    and my.env.var all become myEnvVar.
    """
    segment = str(segment)
    if segment == segment.upper():
        segment = segment.lower()
    words = [w for w in SEGMENT_SEPARATORS.split(segment) if w]
    if not words:
        return segment
    first, rest = words[0], words[1:]
    return first[0].lower() + first[1:] + ''.join(w[0].upper() + w[1:] for w in rest)


def _normalize_path(name) -> List[str]:
    if not name:
        raise ValueError('values path must not be empty')
    return [to_camel_case(n) for n in name]


def _narrow(value: Any) -> Any:
    # int subclasses (except bool) collapse into a plain int
    if isinstance(value, int) and not isinstance(value, bool) and type(value) is not int:
        return int(value)
    return value


class Values:
    """Schema and default values extracted from one or more resources"""

    def __init__(self):
        self.config: Dict[str, Any] = {}
        self.values: Dict[str, Any] = {}

    def add(self, config: Optional[str], value: Any, *name: str) -> Expr:
        """Record a default value and its schema constraint.

        Args:
            config: CUE constraint stored in the schema tree, None to only
                record the value (a wider schema leaf is added separately)
            value: Concrete default value
            *name: Path segments, normalized to lowerCamelCase

        Returns:
            Reference expression `#config.<path>` to put in place of the value
        """
        path = _normalize_path(name)
        if config is not None:
            self._set_config(Expr(config), path)
        self._set_value(copy.deepcopy(_narrow(value)), path)
        return reference(path)

    def add_config(self, config: str, *name: str) -> Expr:
        """Record a schema constraint without a default value"""
        path = _normalize_path(name)
        self._set_config(Expr(config), path)
        return reference(path)

    def add_secret(self, to_base64: bool, *name: str) -> Expr:
        """Record a required secret field.

        The default is an empty string and the returned expression only
        evaluates once a non-empty value is supplied, so no credential is
        ever baked into the defaults.

        Args:
            to_base64: Render as a bytes literal (Secret.data) instead of a
                string (Secret.stringData)
            *name: Path segments

        Returns:
            Expression to put in place of the secret value
        """
        path = _normalize_path(name)
        self._set_config(SECRET_SCHEMA, path)
        self._set_value('', path)
        ref = reference(path)
        if to_base64:
            return Expr(f"'\\({ref} & !=\"\")'")
        return Expr(f'{ref} & !=""')

    def merge(self, other: 'Values') -> 'Values':
        """Merge other into this accumulator.

        Values merge recursively, lists are appended and the first non-empty
        scalar wins. The schema is a recursive union of structs where the
        first seen leaf wins.
        """
        _merge_values(self.values, other.values)
        _merge_config(self.config, other.config)
        return self

    def _set_config(self, config: Expr, path: List[str]):
        node = self.config
        for i, segment in enumerate(path[:-1]):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ValuesConflictError(path[:i + 1], child)
            node = child
        node[path[-1]] = config

    def _set_value(self, value: Any, path: List[str]):
        node = self.values
        for i, segment in enumerate(path[:-1]):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ValuesConflictError(path[:i + 1], child)
            node = child
        node[path[-1]] = value


def _merge_values(dst: Dict[str, Any], src: Dict[str, Any]):
    for key, value in src.items():
        if key not in dst:
            dst[key] = copy.deepcopy(value)
            continue
        current = dst[key]
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_values(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            current.extend(copy.deepcopy(value))
        elif current is None or current == '':
            dst[key] = copy.deepcopy(value)


def _merge_config(dst: Dict[str, Any], src: Dict[str, Any]):
    for key, value in src.items():
        if key not in dst:
            dst[key] = copy.deepcopy(value)
        elif isinstance(dst[key], dict) and isinstance(value, dict):
            _merge_config(dst[key], value)
