"""
Storage processor
Handles PersistentVolumeClaim resources
"""
from typing import Any, Dict

from ..constants import PVC_GVK
from ..cue import Conjunct
from ..metadata import AppMetadata
from ..values import Values, to_camel_case
from .base_processor import BaseProcessor, Template, object_body
from .meta import process_obj_meta

STORAGE_CLASS_SCHEMA = 'string'
STORAGE_QUANTITY_SCHEMA = 'string'


class PersistentVolumeClaimProcessor(BaseProcessor):
    """Processor for PersistentVolumeClaim resources

    Storage class, requested and limited storage go to pvc.<name> in values.
    """

    gvks = (PVC_GVK,)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        name = to_camel_case(app_meta.trim_name(obj['metadata']['name']))
        values = Values()
        body = process_obj_meta(app_meta, obj)
        rest = object_body(obj)
        spec = rest.get('spec') or {}

        if spec.get('storageClassName') is not None:
            spec['storageClassName'] = values.add(
                STORAGE_CLASS_SCHEMA, spec['storageClassName'], 'pvc', name, 'storageClass')

        resources = spec.get('resources') or {}
        for section, key in (('requests', 'storageRequest'), ('limits', 'storageLimit')):
            quantities = resources.get(section) or {}
            if quantities.get('storage') is not None:
                quantities['storage'] = values.add(
                    STORAGE_QUANTITY_SCHEMA, str(quantities['storage']), 'pvc', name, key)

        if spec:
            rest['spec'] = Conjunct('corev1.#PersistentVolumeClaimSpec', spec)
        body.update(rest)
        return self._template(app_meta, obj, body, values)
