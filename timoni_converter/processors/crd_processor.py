"""
CustomResourceDefinition processor
"""
import copy
from typing import Any, Dict

from ..constants import CRD_GVK
from ..metadata import AppMetadata
from .base_processor import BaseProcessor, Template, object_body, template_filename
from .meta import process_obj_meta


class CustomResourceDefinitionProcessor(BaseProcessor):
    """Processor for CustomResourceDefinition resources

    With CRD placement enabled the definition is written unmodified as YAML
    into the module crds/ directory, otherwise it becomes a cluster scoped
    template like any other object.
    """

    gvks = (CRD_GVK,)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        if app_meta.config.crd:
            name = obj['metadata']['name']
            template = self._template(app_meta, obj, {})
            template.crd = True
            template.source = copy.deepcopy(obj)
            template.filename = template_filename(name, obj['kind'], extension='yaml')
            return template

        body = process_obj_meta(app_meta, obj, namespaced=False)
        body.update(object_body(obj))
        return self._template(app_meta, obj, body)
