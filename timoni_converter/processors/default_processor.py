"""
Fallback processor for resources without a dedicated processor
"""
from typing import Any, Dict, Optional

from ..constants import NAMESPACE_GVK
from ..errors import describe
from ..logger import log_debug, log_warning
from ..metadata import AppMetadata, gvk
from .base_processor import BaseProcessor, Template, object_body
from .meta import process_obj_meta


class DefaultProcessor(BaseProcessor):
    """Passes any resource through with templated metadata

    Namespaces are skipped: Timoni creates the instance namespace itself.
    """

    def matches(self, obj: Dict[str, Any]) -> bool:
        return True

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Optional[Template]:
        if gvk(obj) == NAMESPACE_GVK:
            log_debug(f"Skipping {describe(obj)}: namespaces are managed by Timoni")
            return None

        log_warning(f"No dedicated processor for {describe(obj)}, passing it through")
        namespaced = bool((obj.get('metadata') or {}).get('namespace'))
        body = process_obj_meta(app_meta, obj, namespaced=namespaced)
        body.update(object_body(obj))
        return self._template(app_meta, obj, body)
