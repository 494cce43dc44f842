"""
Object metadata rendering shared by all processors
"""
from typing import Any, Dict, Optional

from ..constants import TIMONI_MANAGED_LABELS
from ..cue import Conjunct, Expr
from ..metadata import AppMetadata
from ..values import Values

NAMESPACE_REF = Expr('#config.metadata.namespace')
LABELS_REF = '#config.metadata.labels'
ANNOTATIONS_SCHEMA = 'timoniv1.#Annotations'


def process_obj_meta(app_meta: AppMetadata, obj: Dict[str, Any], namespaced: bool = True,
                     values: Optional[Values] = None) -> Dict[str, Any]:
    """Return apiVersion, kind and metadata fields of a resource definition

    Args:
        app_meta: Application metadata
        obj: Resource manifest
        namespaced: Set the namespace to the instance namespace
        values: When given, annotations are extracted into these values so
            they can be overridden per instance

    Returns:
        Dict with apiVersion, kind and metadata fields
    """
    meta = obj.get('metadata') or {}
    name = meta.get('name', '')
    metadata: Dict[str, Any] = {'name': app_meta.templated_name(name)}
    if namespaced:
        metadata['namespace'] = NAMESPACE_REF

    labels = {k: v for k, v in (meta.get('labels') or {}).items() if k not in TIMONI_MANAGED_LABELS}
    metadata['labels'] = Conjunct(LABELS_REF, labels) if labels else Expr(LABELS_REF)

    annotations = dict(meta.get('annotations') or {})
    if values is not None:
        metadata['annotations'] = values.add(
            ANNOTATIONS_SCHEMA, annotations, app_meta.trim_name(name), obj.get('kind', ''), 'annotations')
    elif annotations:
        metadata['annotations'] = annotations

    return {
        'apiVersion': obj.get('apiVersion', ''),
        'kind': obj.get('kind', ''),
        'metadata': metadata,
    }


def template_name_ref(app_meta: AppMetadata, ref: Optional[Dict[str, Any]], key: str = 'name') -> None:
    """Rename the object reference ref[key] to its instance scoped name, if set"""
    if isinstance(ref, dict) and ref.get(key):
        ref[key] = app_meta.templated_name(ref[key])
