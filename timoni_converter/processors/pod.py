"""
Pod spec normalization shared by Deployment, DaemonSet and Job processors

Extracts container images, env values, resources, pull policies, security
contexts and arguments into values and renames referenced objects to
instance scoped names.
"""
import copy
from typing import Any, Dict, Tuple

from ..constants import CLUSTER_DOMAIN_ENV, CLUSTER_DOMAIN_KEY
from ..cue import Expr
from ..errors import ImageFormatError, ProcessingError
from ..metadata import AppMetadata
from ..values import Values
from .meta import template_name_ref
from .security_context import process_container_security_context

IMAGE_SCHEMA = 'timoniv1.#Image'
RESOURCES_SCHEMA = (
    'timoniv1.#ResourceRequirements & {requests: {'
    'cpu: *"10m" | timoniv1.#CPUQuantity, memory: *"32Mi" | timoniv1.#MemoryQuantity}}'
)
PULL_POLICY_SCHEMA = 'corev1.#PullPolicy'
ARGS_SCHEMA = '[...string]'
ENV_SCHEMA = 'string'
NODE_SELECTOR_SCHEMA = '{[string]: string}'
IMAGE_PULL_SECRETS_SCHEMA = '[...corev1.#LocalObjectReference]'

# Scheduling fields exposed on every pod when defaults generation is enabled
DEFAULT_POD_FIELDS = (
    ('tolerations', '[...corev1.#Toleration]', list),
    ('topologySpreadConstraints', '[...corev1.#TopologySpreadConstraint]', list),
    ('nodeSelector', NODE_SELECTOR_SCHEMA, dict),
)


def split_image(image: str) -> Tuple[str, str, str]:
    """Split an image reference into repository, tag and digest.

    A digest follows '@' and takes precedence over a tag. A tag follows the
    last ':' that comes after the last '/', so a registry port is never
    mistaken for a tag. A reference whose only ':' is a registry port has
    neither tag nor digest.

    Raises:
        ImageFormatError: If the reference has no ':' separator at all
    """
    if '@' in image:
        repository, _, digest = image.partition('@')
        if not repository or ':' not in digest:
            raise ImageFormatError(image)
        colon = repository.rfind(':')
        if colon > repository.rfind('/'):
            repository = repository[:colon]
        return repository, '', digest

    colon = image.rfind(':')
    if colon <= 0:
        raise ImageFormatError(image)
    # registry port without a tag, the tag falls back to its default
    if colon < image.rfind('/'):
        return image, '', ''
    return image[:colon], image[colon + 1:], ''


def process_spec(obj_name: str, app_meta: AppMetadata,
                 pod_spec: Dict[str, Any]) -> Tuple[Dict[str, Any], Values]:
    """Normalize a pod spec

    Args:
        obj_name: Values key of the owning workload (lowerCamelCase trimmed name)
        app_meta: Application metadata
        pod_spec: Pod spec of the workload's pod template

    Returns:
        Tuple of the rewritten pod spec and the values extracted from it

    Raises:
        ProcessingError: If a container can not be converted
    """
    spec = copy.deepcopy(pod_spec or {})
    values = Values()
    config = app_meta.config

    for container_type in ('containers', 'initContainers'):
        for container in spec.get(container_type) or []:
            _process_container(obj_name, app_meta, container, values)

    for volume in spec.get('volumes') or []:
        template_name_ref(app_meta, volume.get('configMap'))
        template_name_ref(app_meta, volume.get('secret'), 'secretName')
        template_name_ref(app_meta, volume.get('persistentVolumeClaim'), 'claimName')

    template_name_ref(app_meta, spec, 'serviceAccountName')

    for secret in spec.get('imagePullSecrets') or []:
        template_name_ref(app_meta, secret)

    if config.image_pull_secrets and 'imagePullSecrets' not in spec:
        spec['imagePullSecrets'] = values.add(IMAGE_PULL_SECRETS_SCHEMA, [], 'imagePullSecrets')

    process_container_security_context(obj_name, spec, values)

    if config.generate_defaults:
        for field, schema, default in DEFAULT_POD_FIELDS:
            spec[field] = values.add(schema, spec.get(field) or default(), obj_name, field)
    elif spec.get('nodeSelector') is not None:
        spec['nodeSelector'] = values.add(NODE_SELECTOR_SCHEMA, spec['nodeSelector'], obj_name, 'nodeSelector')

    return spec, values


def _process_container(obj_name: str, app_meta: AppMetadata, container: Dict[str, Any], values: Values):
    name = container.get('name')
    if not name:
        raise ProcessingError(f"container without name in {obj_name}")
    image = container.get('image')
    if not image:
        raise ProcessingError(f"container {name} has no image")

    repository, tag, digest = split_image(str(image))
    values.add(None, repository, obj_name, name, 'image', 'repository')
    values.add(None, tag, obj_name, name, 'image', 'tag')
    values.add(None, digest, obj_name, name, 'image', 'digest')
    image_ref = values.add_config(IMAGE_SCHEMA, obj_name, name, 'image')
    container['image'] = Expr(image_ref + '.reference')

    _process_env(obj_name, app_meta, container, values)

    for source in container.get('envFrom') or []:
        for ref in ('secretRef', 'configMapRef'):
            template_name_ref(app_meta, source.get(ref))

    resources = container.get('resources') or {}
    if resources:
        values.add(None, _stringify_quantities(resources), obj_name, name, 'resources')
    container['resources'] = values.add_config(RESOURCES_SCHEMA, obj_name, name, 'resources')

    if container.get('imagePullPolicy'):
        container['imagePullPolicy'] = values.add(
            PULL_POLICY_SCHEMA, container['imagePullPolicy'], obj_name, name, 'imagePullPolicy')

    if container.get('args'):
        container['args'] = values.add(
            ARGS_SCHEMA, [str(a) for a in container['args']], obj_name, name, 'args')


def _process_env(obj_name: str, app_meta: AppMetadata, container: Dict[str, Any], values: Values):
    env = []
    for var in container.get('env') or []:
        if not var.get('name'):
            raise ProcessingError(f"env variable without name in container {container['name']}")
        # re-added below pointing at the shared cluster domain value
        if var.get('name') == CLUSTER_DOMAIN_ENV:
            continue
        value_from = var.get('valueFrom')
        if value_from:
            for ref in ('secretKeyRef', 'configMapKeyRef'):
                template_name_ref(app_meta, value_from.get(ref))
        else:
            value = var.get('value')
            if value is None:
                value = ''
            var['value'] = values.add(
                ENV_SCHEMA, value if isinstance(value, str) else str(value),
                obj_name, container['name'], 'env', var['name'])
        env.append(var)
    env.append({'name': CLUSTER_DOMAIN_ENV, 'value': Expr('#config.' + CLUSTER_DOMAIN_KEY)})
    container['env'] = env


def _stringify_quantities(resources: Dict[str, Any]) -> Dict[str, Any]:
    result = {}
    for key, value in resources.items():
        if key in ('requests', 'limits') and isinstance(value, dict):
            result[key] = {q: str(v) for q, v in value.items()}
        else:
            result[key] = value
    return result
