"""
Resource processors

Processors are tried in registration order and claim resources by exact
group/version/kind, the first match wins. Resources nobody claims go to
the DefaultProcessor.
"""
from .base_processor import BaseProcessor, Template
from .crd_processor import CustomResourceDefinitionProcessor
from .default_processor import DefaultProcessor
from .pdb_processor import PodDisruptionBudgetProcessor
from .rbac_processor import RoleBindingProcessor, RoleProcessor, ServiceAccountProcessor
from .secret_processor import SecretProcessor
from .service_processor import IngressProcessor
from .storage_processor import PersistentVolumeClaimProcessor
from .webhook_processor import IssuerProcessor, WebhookProcessor
from .workload_processor import JobProcessor, WorkloadProcessor


def default_processors():
    """Dedicated processors in dispatch order"""
    return [
        WorkloadProcessor(),
        JobProcessor(),
        RoleProcessor(),
        RoleBindingProcessor(),
        ServiceAccountProcessor(),
        PersistentVolumeClaimProcessor(),
        SecretProcessor(),
        IngressProcessor(),
        PodDisruptionBudgetProcessor(),
        WebhookProcessor(),
        IssuerProcessor(),
        CustomResourceDefinitionProcessor(),
    ]


__all__ = [
    'BaseProcessor',
    'Template',
    'DefaultProcessor',
    'default_processors',
]
