"""
RBAC processors
Handles Role, ClusterRole, RoleBinding, ClusterRoleBinding and ServiceAccount resources
"""
from typing import Any, Dict

from ..constants import (
    CLUSTER_ROLE_BINDING_GVK,
    CLUSTER_ROLE_GVK,
    ROLE_BINDING_GVK,
    ROLE_GVK,
    SERVICE_ACCOUNT_GVK,
)
from ..errors import ProcessingError
from ..metadata import AppMetadata
from ..values import Values
from .base_processor import BaseProcessor, Template, object_body
from .meta import NAMESPACE_REF, process_obj_meta, template_name_ref


class RoleProcessor(BaseProcessor):
    """Processor for Role and ClusterRole resources"""

    gvks = (ROLE_GVK, CLUSTER_ROLE_GVK)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        cluster_scoped = obj['kind'] == 'ClusterRole'
        if not cluster_scoped and 'aggregationRule' in obj:
            raise ProcessingError("aggregationRule is only allowed on a ClusterRole", obj)

        body = process_obj_meta(app_meta, obj, namespaced=not cluster_scoped)
        body.update(object_body(obj))
        return self._template(app_meta, obj, body)


class RoleBindingProcessor(BaseProcessor):
    """Processor for RoleBinding and ClusterRoleBinding resources"""

    gvks = (ROLE_BINDING_GVK, CLUSTER_ROLE_BINDING_GVK)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        cluster_scoped = obj['kind'] == 'ClusterRoleBinding'
        body = process_obj_meta(app_meta, obj, namespaced=not cluster_scoped)
        rest = object_body(obj)

        template_name_ref(app_meta, rest.get('roleRef'))

        for subject in rest.get('subjects') or []:
            template_name_ref(app_meta, subject)
            subject['namespace'] = NAMESPACE_REF

        body.update(rest)
        return self._template(app_meta, obj, body)


class ServiceAccountProcessor(BaseProcessor):
    """Processor for ServiceAccount resources

    Annotations are extracted into values so they can be set per instance,
    e.g. for cloud workload identity.
    """

    gvks = (SERVICE_ACCOUNT_GVK,)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        values = Values()
        body = process_obj_meta(app_meta, obj, values=values)
        rest = object_body(obj)
        for field in ('secrets', 'imagePullSecrets'):
            for ref in rest.get(field) or []:
                template_name_ref(app_meta, ref)
        body.update(rest)
        return self._template(app_meta, obj, body, values)
