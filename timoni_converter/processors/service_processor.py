"""
Ingress processor
"""
from typing import Any, Dict

from ..constants import INGRESS_GVK
from ..metadata import AppMetadata
from .base_processor import BaseProcessor, Template, object_body
from .meta import process_obj_meta


class IngressProcessor(BaseProcessor):
    """Processor for Ingress resources

    Backend services and TLS secrets are renamed to instance scoped names.
    """

    gvks = (INGRESS_GVK,)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        body = process_obj_meta(app_meta, obj)
        rest = object_body(obj)
        spec = rest.get('spec') or {}

        self._template_backend(app_meta, spec.get('defaultBackend'))
        for rule in spec.get('rules') or []:
            for path in (rule.get('http') or {}).get('paths') or []:
                self._template_backend(app_meta, path.get('backend'))
        for tls in spec.get('tls') or []:
            if tls.get('secretName'):
                tls['secretName'] = app_meta.templated_name(tls['secretName'])

        body.update(rest)
        return self._template(app_meta, obj, body)

    @staticmethod
    def _template_backend(app_meta: AppMetadata, backend):
        service = (backend or {}).get('service')
        if service and service.get('name'):
            service['name'] = app_meta.templated_name(service['name'])
