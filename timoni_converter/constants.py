"""
Constants shared by processors and the module generator
"""

# Group/Version/Kind of every resource with a dedicated processor
DEPLOYMENT_GVK = ('apps', 'v1', 'Deployment')
DAEMONSET_GVK = ('apps', 'v1', 'DaemonSet')
JOB_GVK = ('batch', 'v1', 'Job')
ROLE_GVK = ('rbac.authorization.k8s.io', 'v1', 'Role')
CLUSTER_ROLE_GVK = ('rbac.authorization.k8s.io', 'v1', 'ClusterRole')
ROLE_BINDING_GVK = ('rbac.authorization.k8s.io', 'v1', 'RoleBinding')
CLUSTER_ROLE_BINDING_GVK = ('rbac.authorization.k8s.io', 'v1', 'ClusterRoleBinding')
SERVICE_ACCOUNT_GVK = ('', 'v1', 'ServiceAccount')
PVC_GVK = ('', 'v1', 'PersistentVolumeClaim')
SECRET_GVK = ('', 'v1', 'Secret')
NAMESPACE_GVK = ('', 'v1', 'Namespace')
INGRESS_GVK = ('networking.k8s.io', 'v1', 'Ingress')
PDB_GVK = ('policy', 'v1', 'PodDisruptionBudget')
VALIDATING_WEBHOOK_GVK = ('admissionregistration.k8s.io', 'v1', 'ValidatingWebhookConfiguration')
MUTATING_WEBHOOK_GVK = ('admissionregistration.k8s.io', 'v1', 'MutatingWebhookConfiguration')
ISSUER_GVK = ('cert-manager.io', 'v1', 'Issuer')
CRD_GVK = ('apiextensions.k8s.io', 'v1', 'CustomResourceDefinition')

# CUE import alias and package of the Kubernetes schemas, keyed by apiVersion
API_IMPORTS = {
    'v1': ('corev1', 'k8s.io/api/core/v1'),
    'apps/v1': ('appsv1', 'k8s.io/api/apps/v1'),
    'batch/v1': ('batchv1', 'k8s.io/api/batch/v1'),
    'rbac.authorization.k8s.io/v1': ('rbacv1', 'k8s.io/api/rbac/v1'),
    'networking.k8s.io/v1': ('networkingv1', 'k8s.io/api/networking/v1'),
    'policy/v1': ('policyv1', 'k8s.io/api/policy/v1'),
    'admissionregistration.k8s.io/v1': ('admissionregistrationv1', 'k8s.io/api/admissionregistration/v1'),
    'apiextensions.k8s.io/v1': (
        'apiextensionsv1', 'k8s.io/apiextensions-apiserver/pkg/apis/apiextensions/v1'),
    'cert-manager.io/v1': ('certmanagerv1', 'cert-manager.io/issuer/v1'),
}
TIMONI_IMPORT = ('timoniv1', 'timoni.sh/core/v1alpha1')

# Cluster domain injected into every container
CLUSTER_DOMAIN_ENV = 'KUBERNETES_CLUSTER_DOMAIN'
CLUSTER_DOMAIN_KEY = 'kubernetesClusterDomain'
DEFAULT_CLUSTER_DOMAIN = 'cluster.local'

# Labels Timoni sets on every object itself
TIMONI_MANAGED_LABELS = (
    'app.kubernetes.io/name',
    'app.kubernetes.io/version',
    'app.kubernetes.io/managed-by',
)

CERT_MANAGER_INJECT_CA_ANNOTATION = 'cert-manager.io/inject-ca-from'

DEFAULT_MODULE_NAME = 'timoni'
NAME_SEPARATORS = '-._'
