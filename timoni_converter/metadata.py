"""
Application metadata shared by all processors

Collects object names and the namespace of every manifest before any of them
is processed, then turns literal names into instance scoped names.
"""
import os
from typing import Any, Dict, List, Optional, Set

from .config import Config
from .constants import CRD_GVK, NAME_SEPARATORS, NAMESPACE_GVK
from .cue import Expr, templated_string
from .logger import log_warning

TEMPLATED_PREFIXES = ('"\\(#config.', '#config.')


def gvk(obj: Dict[str, Any]):
    """Group, version and kind of a manifest"""
    api_version = obj.get('apiVersion', '') or ''
    group, _, version = api_version.rpartition('/')
    return group, version, obj.get('kind', '')


def is_templated(name: Any) -> bool:
    return isinstance(name, Expr) or str(name).startswith(TEMPLATED_PREFIXES)


def common_prefix(names: List[str]) -> str:
    """Longest common prefix of names ending on a separator boundary.

    The raw common prefix is kept when every name either equals it or
    continues with a separator, otherwise it is cut back to its last
    separator. No separator means no prefix.
    """
    if len(names) < 2:
        return ''
    prefix = os.path.commonprefix(names)
    if prefix and all(len(n) == len(prefix) or n[len(prefix)] in NAME_SEPARATORS for n in names):
        return prefix
    cut = max(prefix.rfind(sep) for sep in NAME_SEPARATORS)
    if cut < 0:
        return ''
    return prefix[:cut + 1]


class AppMetadata:
    """Module name, namespace and name templating for one conversion run"""

    def __init__(self, config: Config):
        self._config = config
        self._namespace = ''
        self._names: List[str] = []
        self._name_set: Set[str] = set()
        self._prefix = ''

    @property
    def config(self) -> Config:
        return self._config

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def module_name(self) -> str:
        return self._config.module_name

    @property
    def prefix(self) -> str:
        return self._prefix

    def load(self, obj: Dict[str, Any]) -> None:
        """Fold one manifest into the metadata.

        Must be called for every object before any of them is processed.
        """
        meta = obj.get('metadata') or {}
        name = meta.get('name') or ''
        namespace = meta.get('namespace') or ''
        if gvk(obj) == NAMESPACE_GVK:
            namespace = name
        self._load_namespace(namespace)

        # CRD names are <plural>.<group> and never templated
        if not name or gvk(obj) == CRD_GVK:
            return
        if name not in self._name_set:
            self._name_set.add(name)
            self._names.append(name)
            self._prefix = common_prefix(self._names)

    def _load_namespace(self, namespace: str):
        if not namespace:
            return
        if not self._namespace:
            self._namespace = namespace
        elif namespace != self._namespace:
            log_warning(
                f"Ignoring namespace '{namespace}': the module uses namespace '{self._namespace}'")

    def trim_name(self, name: str) -> str:
        """Strip the common prefix from a literal name"""
        if is_templated(name):
            return name
        trimmed = name[len(self._prefix):] if self._prefix and name.startswith(self._prefix) else name
        trimmed = trimmed.lstrip(NAME_SEPARATORS + '/ ')
        return trimmed or name

    def templated_name(self, name: Optional[str]) -> Any:
        """Replace a resource name with an instance scoped name expression.

        Names that do not belong to any loaded object (e.g. the default
        service account) are returned unchanged.
        """
        if self._config.original_name or not name or is_templated(name):
            return name
        if name not in self._name_set:
            return name
        return templated_string(f"\\(#config.metadata.name)-{self.trim_name(name)}")
