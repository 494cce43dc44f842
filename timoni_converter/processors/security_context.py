"""
Container security context extraction
"""
import copy
from typing import Any, Dict

from ..values import Values

CONTAINER_SECURITY_CONTEXT = 'containerSecurityContext'
SECURITY_CONTEXT_SCHEMA = (
    'corev1.#SecurityContext & {allowPrivilegeEscalation: *false | bool, '
    'capabilities: drop: *["ALL"] | [...string]}'
)


def harden(security_context: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a security context without privilege escalation and with all capabilities dropped"""
    hardened = copy.deepcopy(security_context)
    hardened['allowPrivilegeEscalation'] = False
    capabilities = dict(hardened.get('capabilities') or {})
    capabilities['drop'] = ['ALL']
    hardened['capabilities'] = capabilities
    return hardened


def process_container_security_context(obj_name: str, spec: Dict[str, Any], values: Values) -> None:
    """Move explicitly set container security contexts into values.

    The extracted defaults never allow privilege escalation and always drop
    all capabilities, whatever the manifest sets. Other settings are kept.
    """
    for container_type in ('containers', 'initContainers'):
        for container in spec.get(container_type) or []:
            security_context = container.get('securityContext')
            if security_context is None:
                continue
            container['securityContext'] = values.add(
                SECURITY_CONTEXT_SCHEMA, harden(security_context),
                obj_name, container['name'], CONTAINER_SECURITY_CONTEXT)
