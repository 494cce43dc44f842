"""
Secret processor

Secret payloads never get a default: every data and stringData key becomes a
required value that has to be supplied per instance.
"""
from typing import Any, Dict

from ..constants import SECRET_GVK
from ..metadata import AppMetadata
from ..values import Values, to_camel_case
from .base_processor import BaseProcessor, Template, object_body
from .meta import process_obj_meta


class SecretProcessor(BaseProcessor):
    """Processor for Secret resources"""

    gvks = (SECRET_GVK,)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        name = to_camel_case(app_meta.trim_name(obj['metadata']['name']))
        values = Values()
        body = process_obj_meta(app_meta, obj)
        rest = object_body(obj)

        # data holds base64 encoded bytes, stringData plain strings
        for field, to_base64 in (('data', True), ('stringData', False)):
            payload = rest.get(field)
            if not payload:
                continue
            rest[field] = {key: values.add_secret(to_base64, name, key) for key in payload}

        body.update(rest)
        return self._template(app_meta, obj, body, values)
