"""
Base Processor Module

Provides the processor contract and the rendered template shared by all
resource processors.
"""
import copy
from typing import Any, Dict, Optional, Tuple

import yaml

from ..constants import API_IMPORTS, TIMONI_IMPORT
from ..cue import Conjunct, Expr, marshal, render_imports
from ..metadata import AppMetadata, gvk
from ..values import Values, to_camel_case

TEMPLATE_IMPORTS = tuple(API_IMPORTS.values()) + (TIMONI_IMPORT,)
META_FIELDS = ('apiVersion', 'kind', 'metadata')


class Template:
    """Rendered result of one processed resource

    Attributes:
        filename: File name inside the module templates/ (or crds/) directory
        values: Values extracted from the resource
        body: Fields of the CUE definition, rendered in insertion order
        object_type: Definition name, e.g. #NginxDeployment
        object_label: Field of the instance objects registry, e.g. nginxDeployment
        schema: Kubernetes schema the definition unifies with, e.g. appsv1.#Deployment
        crd: Written verbatim as YAML into crds/ instead of templates/
    """

    def __init__(self, filename: str, values: Values, body: Dict[str, Any],
                 object_type: str, object_label: str, schema: Optional[str] = None,
                 crd: bool = False, source: Optional[Dict[str, Any]] = None):
        self.filename = filename
        self.values = values
        self.body = body
        self.object_type = object_type
        self.object_label = object_label
        self.schema = schema
        self.crd = crd
        self.source = source

    def render(self) -> str:
        """Render the template as a CUE file of the templates package"""
        if self.crd:
            return yaml.safe_dump(self.source, default_flow_style=False, sort_keys=False)

        fields = {Expr('#config'): Expr('#Config')}
        fields.update(self.body)
        definition = Conjunct(self.schema, fields) if self.schema else fields
        text = f"{self.object_type}: {marshal(definition, 0)}\n"
        return "package templates\n\n" + render_imports(text, TEMPLATE_IMPORTS) + text


class BaseProcessor:
    """Base class for resource processors

    A processor claims resources by exact group/version/kind and turns a
    claimed resource into a Template.
    """

    gvks: Tuple[Tuple[str, str, str], ...] = ()

    def matches(self, obj: Dict[str, Any]) -> bool:
        return gvk(obj) in self.gvks

    def process(self, app_meta: AppMetadata, obj: Dict[str, Any]) -> Optional[Template]:
        """Convert a claimed resource

        Raises:
            ProcessingError: If the resource can not be converted
        """
        raise NotImplementedError

    def _template(self, app_meta: AppMetadata, obj: Dict[str, Any], body: Dict[str, Any],
                  values: Optional[Values] = None, schema: Optional[str] = None) -> Template:
        """Build a Template named after the resource's trimmed name and kind"""
        kind = obj.get('kind', '')
        name = app_meta.trim_name(obj['metadata']['name'])
        if schema is None:
            schema = api_schema(obj)
        return Template(
            filename=template_filename(name, kind),
            values=values if values is not None else Values(),
            body=body,
            object_type=definition_name(name, kind),
            object_label=object_label(name, kind),
            schema=schema,
        )


def api_schema(obj: Dict[str, Any]) -> Optional[str]:
    """Kubernetes CUE schema of a resource, e.g. appsv1.#Deployment"""
    imports = API_IMPORTS.get(obj.get('apiVersion', ''))
    if imports is None:
        return None
    return f"{imports[0]}.#{obj.get('kind', '')}"


def _identifier(name: str) -> str:
    ident = ''.join(c for c in to_camel_case(name) if c.isalnum())
    if not ident or not ident[0].isalpha():
        ident = 'x' + ident
    return ident


def object_label(name: str, kind: str) -> str:
    return _identifier(name) + kind


def definition_name(name: str, kind: str) -> str:
    ident = _identifier(name)
    return '#' + ident[0].upper() + ident[1:] + kind


def template_filename(name: str, kind: str, extension: str = 'cue') -> str:
    return f"{kind.lower()}_{name}.{extension}"


def object_body(obj: Dict[str, Any]) -> Dict[str, Any]:
    """Deep copy of the manifest fields other than apiVersion, kind and metadata"""
    return {k: copy.deepcopy(v) for k, v in obj.items() if k not in META_FIELDS}
