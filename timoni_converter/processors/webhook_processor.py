"""
Webhook processors
Handles ValidatingWebhookConfiguration, MutatingWebhookConfiguration and
cert-manager Issuer resources
"""
from typing import Any, Dict

from ..constants import (
    CERT_MANAGER_INJECT_CA_ANNOTATION,
    ISSUER_GVK,
    MUTATING_WEBHOOK_GVK,
    VALIDATING_WEBHOOK_GVK,
)
from ..cue import templated_string
from ..metadata import AppMetadata, is_templated
from .base_processor import BaseProcessor, Template, object_body
from .meta import NAMESPACE_REF, process_obj_meta, template_name_ref


def inject_ca_from(app_meta: AppMetadata, value: str):
    """Point a cert-manager CA injection annotation at the instance certificate

    The annotation has the form <namespace>/<certificate>. Only a certificate
    in the module namespace is moved to the instance namespace, references
    into other namespaces are kept as they are.
    """
    namespace, separator, cert_name = value.partition('/')
    if not separator or not app_meta.namespace or namespace != app_meta.namespace:
        return value
    cert_name = app_meta.templated_name(cert_name)
    if is_templated(cert_name):
        # drop the surrounding quotes of the name expression
        return templated_string(f"\\({NAMESPACE_REF})/{cert_name[1:-1]}")
    return templated_string(f"\\({NAMESPACE_REF})/{cert_name}")


class WebhookProcessor(BaseProcessor):
    """Processor for validating and mutating webhook configurations"""

    gvks = (VALIDATING_WEBHOOK_GVK, MUTATING_WEBHOOK_GVK)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        body = process_obj_meta(app_meta, obj, namespaced=False)
        annotations = body['metadata'].get('annotations') or {}
        if annotations.get(CERT_MANAGER_INJECT_CA_ANNOTATION):
            annotations[CERT_MANAGER_INJECT_CA_ANNOTATION] = inject_ca_from(
                app_meta, annotations[CERT_MANAGER_INJECT_CA_ANNOTATION])

        rest = object_body(obj)
        for webhook in rest.get('webhooks') or []:
            service = (webhook.get('clientConfig') or {}).get('service')
            if not service:
                continue
            template_name_ref(app_meta, service)
            if service.get('namespace') and service['namespace'] == app_meta.namespace:
                service['namespace'] = NAMESPACE_REF

        body.update(rest)
        return self._template(app_meta, obj, body)


class IssuerProcessor(BaseProcessor):
    """Processor for cert-manager Issuer resources"""

    gvks = (ISSUER_GVK,)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        body = process_obj_meta(app_meta, obj)
        rest = object_body(obj)
        ca = (rest.get('spec') or {}).get('ca')
        if ca and ca.get('secretName'):
            ca['secretName'] = app_meta.templated_name(ca['secretName'])
        body.update(rest)
        return self._template(app_meta, obj, body)
