"""
Workload processors
Handles Deployment, DaemonSet and Job resources
"""
import copy
from typing import Any, Dict, Optional

from ..constants import DAEMONSET_GVK, DEPLOYMENT_GVK, JOB_GVK
from ..cue import Conjunct, Expr
from ..metadata import AppMetadata
from ..values import Values, to_camel_case
from .base_processor import BaseProcessor, Template
from .meta import process_obj_meta
from .pod import process_spec

REPLICAS_SCHEMA = '*1 | int & >0'
REVISION_HISTORY_LIMIT_SCHEMA = 'int64'
SELECTOR_LABELS = '#config.selector.labels'
POD_SPEC_SCHEMA = 'corev1.#PodSpec'

# Job spec fields extracted into values when set
JOB_FIELDS = (
    ('backoffLimit', 'int32'),
    ('activeDeadlineSeconds', 'int64'),
    ('completions', 'int32'),
    ('parallelism', 'int32'),
    ('suspend', 'bool'),
)


def _selector_labels(labels: Optional[Dict[str, Any]]):
    if labels:
        return Conjunct(SELECTOR_LABELS, dict(labels))
    return Expr(SELECTOR_LABELS)


def _pod_template(app_meta: AppMetadata, obj_name: str, template: Dict[str, Any],
                  values: Values, selector_labels: bool) -> Dict[str, Any]:
    """Rewrite a pod template, merging the extracted pod values into values"""
    template = dict(template or {})
    template_meta = dict(template.get('metadata') or {})
    if selector_labels:
        template_meta['labels'] = _selector_labels(template_meta.get('labels'))

    pod_spec, pod_values = process_spec(obj_name, app_meta, template.get('spec') or {})
    values.merge(pod_values)

    template['metadata'] = template_meta
    template['spec'] = Conjunct(POD_SPEC_SCHEMA, pod_spec)
    return template


class WorkloadProcessor(BaseProcessor):
    """Processor for Deployment and DaemonSet resources"""

    gvks = (DEPLOYMENT_GVK, DAEMONSET_GVK)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        kind = obj['kind']
        obj_name = to_camel_case(app_meta.trim_name(obj['metadata']['name']))
        values = Values()
        body = process_obj_meta(app_meta, obj)
        spec = copy.deepcopy(obj.get('spec') or {})

        # unset fields stay unset
        if kind == 'Deployment' and spec.get('replicas') is not None:
            spec['replicas'] = values.add(REPLICAS_SCHEMA, spec['replicas'], obj_name, 'replicas')
        if spec.get('revisionHistoryLimit') is not None:
            spec['revisionHistoryLimit'] = values.add(
                REVISION_HISTORY_LIMIT_SCHEMA, spec['revisionHistoryLimit'], obj_name, 'revisionHistoryLimit')

        selector = dict(spec.get('selector') or {})
        selector['matchLabels'] = _selector_labels(selector.get('matchLabels'))
        spec['selector'] = selector

        spec['template'] = _pod_template(app_meta, obj_name, spec.get('template'), values, selector_labels=True)
        body['spec'] = Conjunct(f"appsv1.#{kind}Spec", spec)
        return self._template(app_meta, obj, body, values)


class JobProcessor(BaseProcessor):
    """Processor for Job resources"""

    gvks = (JOB_GVK,)

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Template:
        obj_name = to_camel_case(app_meta.trim_name(obj['metadata']['name']))
        values = Values()
        body = process_obj_meta(app_meta, obj)
        spec = copy.deepcopy(obj.get('spec') or {})

        for field, schema in JOB_FIELDS:
            if spec.get(field) is not None:
                spec[field] = values.add(schema, spec[field], obj_name, field)

        # the job controller owns the selector, pod labels stay literal
        spec['template'] = _pod_template(app_meta, obj_name, spec.get('template'), values, selector_labels=False)
        body['spec'] = Conjunct('batchv1.#JobSpec', spec)
        return self._template(app_meta, obj, body, values)
