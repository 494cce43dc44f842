"""
Tests for RBAC processors
"""
import pytest

from timoni_converter.errors import ProcessingError
from timoni_converter.processors.rbac_processor import (
    RoleBindingProcessor,
    RoleProcessor,
    ServiceAccountProcessor,
)

AGGREGATION_RULE = {
    'clusterRoleSelectors': [
        {'matchLabels': {'rbac.example.com/aggregate-to-monitoring': 'true'}}
    ]
}


class TestRoleProcessor:
    """Test Role and ClusterRole processing"""

    def test_cluster_role_with_aggregation_rule(self, app_meta, make_obj):
        obj = make_obj('ClusterRole', 'monitoring', 'rbac.authorization.k8s.io/v1',
                       aggregationRule=AGGREGATION_RULE, rules=[])
        app_meta.load(obj)
        text = RoleProcessor().process(app_meta, obj).render()

        assert '#MonitoringClusterRole: rbacv1.#ClusterRole & {' in text
        assert 'aggregationRule: {' in text
        assert 'namespace:' not in text

    def test_role_with_aggregation_rule(self, app_meta, make_obj):
        obj = make_obj('Role', 'monitoring', 'rbac.authorization.k8s.io/v1',
                       aggregationRule=AGGREGATION_RULE, rules=[])
        app_meta.load(obj)
        with pytest.raises(ProcessingError, match='aggregationRule'):
            RoleProcessor().process(app_meta, obj)

    def test_role_rules(self, app_meta, make_obj):
        obj = make_obj('Role', 'leader-election', 'rbac.authorization.k8s.io/v1', namespace='system',
                       rules=[{'apiGroups': [''], 'resources': ['configmaps'], 'verbs': ['get', 'list']}])
        app_meta.load(obj)
        text = RoleProcessor().process(app_meta, obj).render()

        assert 'namespace: #config.metadata.namespace' in text
        assert 'verbs: ["get", "list"]' in text


class TestRoleBindingProcessor:
    """Test RoleBinding and ClusterRoleBinding processing"""

    @pytest.fixture
    def binding(self, make_obj):
        return make_obj(
            'RoleBinding', 'app-manager-binding', 'rbac.authorization.k8s.io/v1', namespace='system',
            roleRef={'apiGroup': 'rbac.authorization.k8s.io', 'kind': 'Role', 'name': 'app-manager'},
            subjects=[
                {'kind': 'ServiceAccount', 'name': 'app-controller', 'namespace': 'system'},
                {'kind': 'Group', 'name': 'admins', 'apiGroup': 'rbac.authorization.k8s.io'},
            ],
        )

    @pytest.fixture
    def meta(self, app_meta, make_obj, binding):
        app_meta.load(make_obj('Role', 'app-manager', 'rbac.authorization.k8s.io/v1', namespace='system'))
        app_meta.load(make_obj('ServiceAccount', 'app-controller', namespace='system'))
        app_meta.load(binding)
        return app_meta

    def test_role_ref_and_subjects(self, meta, binding):
        template = RoleBindingProcessor().process(meta, binding)
        body = template.body

        assert body['roleRef']['name'] == '"\\(#config.metadata.name)-manager"'
        assert body['subjects'][0]['name'] == '"\\(#config.metadata.name)-controller"'
        assert body['subjects'][0]['namespace'] == '#config.metadata.namespace'
        # names of objects outside the module are kept
        assert body['subjects'][1]['name'] == 'admins'
        assert body['subjects'][1]['namespace'] == '#config.metadata.namespace'

    def test_cluster_role_binding(self, meta, binding):
        binding['kind'] = 'ClusterRoleBinding'
        template = RoleBindingProcessor().process(meta, binding)

        assert 'namespace' not in template.body['metadata']
        assert template.body['subjects'][0]['namespace'] == '#config.metadata.namespace'

    def test_subject_without_name(self, meta, binding):
        binding['subjects'] = [{'kind': 'ServiceAccount'}]
        template = RoleBindingProcessor().process(meta, binding)

        assert 'name' not in template.body['subjects'][0]


class TestServiceAccountProcessor:
    """Test ServiceAccount processing"""

    def test_annotations_extracted(self, app_meta, make_obj):
        obj = make_obj('ServiceAccount', 'controller', namespace='system')
        obj['metadata']['annotations'] = {'eks.amazonaws.com/role-arn': 'arn:aws:iam::1:role/app'}
        app_meta.load(obj)
        template = ServiceAccountProcessor().process(app_meta, obj)

        assert template.values.values == {
            'controller': {'serviceAccount': {'annotations': {'eks.amazonaws.com/role-arn': 'arn:aws:iam::1:role/app'}}}
        }
        assert template.values.config['controller']['serviceAccount']['annotations'] == 'timoniv1.#Annotations'
        assert template.body['metadata']['annotations'] == '#config.controller.serviceAccount.annotations'
        assert '#ControllerServiceAccount: corev1.#ServiceAccount & {' in template.render()

    def test_without_annotations(self, app_meta, make_obj):
        obj = make_obj('ServiceAccount', 'controller')
        app_meta.load(obj)
        template = ServiceAccountProcessor().process(app_meta, obj)
        assert template.values.values == {'controller': {'serviceAccount': {'annotations': {}}}}
