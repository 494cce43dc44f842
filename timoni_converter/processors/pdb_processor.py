"""
PodDisruptionBudget processor
"""
from typing import Any, Dict

from ..constants import PDB_GVK
from ..metadata import AppMetadata
from ..values import Values, to_camel_case
from .base_processor import BaseProcessor, Template, object_body
from .meta import process_obj_meta

INT_OR_STRING_SCHEMA = 'int | string'


class PodDisruptionBudgetProcessor(BaseProcessor):
    """Processor for PodDisruptionBudget resources"""

    gvks = (PDB_GVK,)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        name = to_camel_case(app_meta.trim_name(obj['metadata']['name']))
        values = Values()
        body = process_obj_meta(app_meta, obj)
        rest = object_body(obj)
        spec = rest.get('spec') or {}

        for field in ('minAvailable', 'maxUnavailable'):
            if spec.get(field) is not None:
                spec[field] = values.add(INT_OR_STRING_SCHEMA, spec[field], name, field)

        body.update(rest)
        return self._template(app_meta, obj, body, values)
