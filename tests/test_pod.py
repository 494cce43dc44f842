"""
Tests for pod spec normalization
"""
import pytest

from timoni_converter.config import Config
from timoni_converter.cue import Expr
from timoni_converter.errors import ImageFormatError, ProcessingError
from timoni_converter.metadata import AppMetadata
from timoni_converter.processors.pod import RESOURCES_SCHEMA, process_spec, split_image
from timoni_converter.processors.security_context import SECURITY_CONTEXT_SCHEMA


class TestSplitImage:
    """Test image reference splitting"""

    @pytest.mark.parametrize('image,expected', [
        ('nginx:1.14.2', ('nginx', '1.14.2', '')),
        ('docker.io/library/nginx:latest', ('docker.io/library/nginx', 'latest', '')),
        ('localhost:5000/app:v1', ('localhost:5000/app', 'v1', '')),
        ('localhost:5000/app', ('localhost:5000/app', '', '')),
        ('repo:5000/image@sha256:abc123', ('repo:5000/image', '', 'sha256:abc123')),
        ('nginx@sha256:abc123', ('nginx', '', 'sha256:abc123')),
        ('nginx:1.2@sha256:abc123', ('nginx', '', 'sha256:abc123')),
    ])
    def test_split(self, image, expected):
        assert split_image(image) == expected

    @pytest.mark.parametrize('image', ['nginx', 'registry/team/app', ':tag', 'nginx@abc'])
    def test_wrong_format(self, image):
        with pytest.raises(ImageFormatError):
            split_image(image)


class TestProcessSpec:
    """Test process_spec"""

    @pytest.fixture
    def meta(self, make_obj):
        """AppMetadata knowing the objects the pod refers to"""
        app_meta = AppMetadata(Config(module_name='test'))
        for kind, name in [('ConfigMap', 'app-config'), ('Secret', 'app-secret'),
                           ('PersistentVolumeClaim', 'app-data'), ('ServiceAccount', 'app-sa')]:
            app_meta.load(make_obj(kind, name))
        return app_meta

    @pytest.fixture
    def pod_spec(self):
        """Pod spec with one container"""
        return {
            'serviceAccountName': 'app-sa',
            'containers': [
                {
                    'name': 'nginx',
                    'image': 'nginx:1.14.2',
                    'imagePullPolicy': 'IfNotPresent',
                    'env': [
                        {'name': 'LOG_LEVEL', 'value': 'debug'},
                        {'name': 'EMPTY'},
                        {'name': 'PASSWORD', 'valueFrom': {'secretKeyRef': {'name': 'app-secret', 'key': 'pw'}}},
                        {'name': 'POD_IP', 'valueFrom': {'fieldRef': {'fieldPath': 'status.podIP'}}},
                        {'name': 'KUBERNETES_CLUSTER_DOMAIN', 'value': 'example.org'},
                    ],
                    'envFrom': [{'configMapRef': {'name': 'app-config'}}],
                    'resources': {
                        'limits': {'cpu': '100m', 'nvidia.com/gpu': 1},
                        'requests': {'memory': '64Mi'},
                    },
                }
            ],
            'volumes': [
                {'name': 'config', 'configMap': {'name': 'app-config'}},
                {'name': 'secret', 'secret': {'secretName': 'app-secret'}},
                {'name': 'data', 'persistentVolumeClaim': {'claimName': 'app-data'}},
            ],
        }

    def test_image(self, meta, pod_spec):
        spec, values = process_spec('web', meta, pod_spec)
        container = spec['containers'][0]

        assert container['image'] == '#config.web.nginx.image.reference'
        assert isinstance(container['image'], Expr)
        assert values.values['web']['nginx']['image'] == {
            'repository': 'nginx', 'tag': '1.14.2', 'digest': ''}
        assert values.config['web']['nginx']['image'] == 'timoniv1.#Image'

    def test_input_not_modified(self, meta, pod_spec):
        process_spec('web', meta, pod_spec)
        assert pod_spec['containers'][0]['image'] == 'nginx:1.14.2'

    def test_env(self, meta, pod_spec):
        spec, values = process_spec('web', meta, pod_spec)
        env = spec['containers'][0]['env']

        assert env[0] == {'name': 'LOG_LEVEL', 'value': '#config.web.nginx.env.logLevel'}
        assert env[1] == {'name': 'EMPTY', 'value': '#config.web.nginx.env.empty'}
        assert env[2]['valueFrom']['secretKeyRef']['name'] == '"\\(#config.metadata.name)-secret"'
        assert env[3]['valueFrom'] == {'fieldRef': {'fieldPath': 'status.podIP'}}
        assert values.values['web']['nginx']['env'] == {'logLevel': 'debug', 'empty': ''}

    def test_cluster_domain_appended_once(self, meta, pod_spec):
        spec, _ = process_spec('web', meta, pod_spec)
        env = spec['containers'][0]['env']
        domain = [e for e in env if e['name'] == 'KUBERNETES_CLUSTER_DOMAIN']

        assert domain == [{'name': 'KUBERNETES_CLUSTER_DOMAIN', 'value': '#config.kubernetesClusterDomain'}]
        assert env[-1] is domain[0]

    def test_env_from(self, meta, pod_spec):
        spec, _ = process_spec('web', meta, pod_spec)
        assert spec['containers'][0]['envFrom'][0]['configMapRef']['name'] == \
            '"\\(#config.metadata.name)-config"'

    def test_resources(self, meta, pod_spec):
        spec, values = process_spec('web', meta, pod_spec)

        assert spec['containers'][0]['resources'] == '#config.web.nginx.resources'
        assert values.values['web']['nginx']['resources'] == {
            'limits': {'cpu': '100m', 'nvidia.com/gpu': '1'},
            'requests': {'memory': '64Mi'},
        }
        assert values.config['web']['nginx']['resources'] == RESOURCES_SCHEMA

    def test_resources_schema_without_resources(self, meta):
        spec, values = process_spec('web', meta, {'containers': [{'name': 'app', 'image': 'app:v1'}]})

        assert spec['containers'][0]['resources'] == '#config.web.app.resources'
        assert values.config['web']['app']['resources'] == RESOURCES_SCHEMA
        assert 'resources' not in values.values['web']['app']

    def test_image_pull_policy(self, meta, pod_spec):
        spec, values = process_spec('web', meta, pod_spec)
        assert spec['containers'][0]['imagePullPolicy'] == '#config.web.nginx.imagePullPolicy'
        assert values.values['web']['nginx']['imagePullPolicy'] == 'IfNotPresent'
        assert values.config['web']['nginx']['imagePullPolicy'] == 'corev1.#PullPolicy'

    def test_security_context(self, meta, pod_spec):
        pod_spec['containers'][0]['securityContext'] = {'runAsNonRoot': True}
        spec, values = process_spec('web', meta, pod_spec)

        assert spec['containers'][0]['securityContext'] == '#config.web.nginx.containerSecurityContext'
        assert values.values['web']['nginx']['containerSecurityContext'] == {
            'runAsNonRoot': True,
            'allowPrivilegeEscalation': False,
            'capabilities': {'drop': ['ALL']},
        }
        assert values.config['web']['nginx']['containerSecurityContext'] == SECURITY_CONTEXT_SCHEMA

    def test_security_context_hardened(self, meta, pod_spec):
        security_context = {'allowPrivilegeEscalation': True, 'capabilities': {'add': ['NET_ADMIN'], 'drop': []}}
        pod_spec['containers'][0]['securityContext'] = security_context
        _, values = process_spec('web', meta, pod_spec)

        assert values.values['web']['nginx']['containerSecurityContext'] == {
            'allowPrivilegeEscalation': False,
            'capabilities': {'add': ['NET_ADMIN'], 'drop': ['ALL']},
        }
        # the manifest itself is left untouched
        assert security_context['allowPrivilegeEscalation'] is True

    def test_args(self, meta):
        pod_spec = {'containers': [{'name': 'app', 'image': 'app:v1', 'args': ['--port', 8080]}]}
        spec, values = process_spec('web', meta, pod_spec)
        assert spec['containers'][0]['args'] == '#config.web.app.args'
        assert values.values['web']['app']['args'] == ['--port', '8080']

    def test_init_containers(self, meta):
        pod_spec = {
            'containers': [{'name': 'app', 'image': 'app:v1'}],
            'initContainers': [{'name': 'init-db', 'image': 'busybox:1.36'}],
        }
        spec, values = process_spec('web', meta, pod_spec)
        assert spec['initContainers'][0]['image'] == '#config.web.initDb.image.reference'
        assert values.values['web']['initDb']['image']['tag'] == '1.36'

    def test_image_without_tag(self, meta):
        spec, values = process_spec('web', meta, {'containers': [{'name': 'app', 'image': 'localhost:5000/app'}]})

        assert spec['containers'][0]['image'] == '#config.web.app.image.reference'
        assert values.values['web']['app']['image'] == {'repository': 'localhost:5000/app', 'tag': '', 'digest': ''}

    def test_references_without_name(self, meta):
        pod_spec = {
            'containers': [{
                'name': 'app',
                'image': 'app:v1',
                'envFrom': [{'secretRef': {}}],
                'env': [{'name': 'TOKEN', 'valueFrom': {'secretKeyRef': {'key': 'token'}}}],
            }],
            'volumes': [{'name': 'v', 'configMap': {}}, {'name': 'w', 'secret': {'defaultMode': 420}}],
            'imagePullSecrets': [{}],
        }
        spec, _ = process_spec('web', meta, pod_spec)

        assert spec['volumes'][0]['configMap'] == {}
        assert spec['volumes'][1]['secret'] == {'defaultMode': 420}
        assert spec['imagePullSecrets'] == [{}]
        assert spec['containers'][0]['envFrom'] == [{'secretRef': {}}]
        assert spec['containers'][0]['env'][0]['valueFrom'] == {'secretKeyRef': {'key': 'token'}}
        assert 'serviceAccountName' not in spec

    def test_env_without_name(self, meta):
        pod_spec = {'containers': [{'name': 'app', 'image': 'app:v1', 'env': [{'value': 'x'}]}]}
        with pytest.raises(ProcessingError):
            process_spec('web', meta, pod_spec)

    def test_volumes_and_service_account(self, meta, pod_spec):
        spec, _ = process_spec('web', meta, pod_spec)
        volumes = spec['volumes']

        assert volumes[0]['configMap']['name'] == '"\\(#config.metadata.name)-config"'
        assert volumes[1]['secret']['secretName'] == '"\\(#config.metadata.name)-secret"'
        assert volumes[2]['persistentVolumeClaim']['claimName'] == '"\\(#config.metadata.name)-data"'
        assert spec['serviceAccountName'] == '"\\(#config.metadata.name)-sa"'

    def test_node_selector(self, meta, pod_spec):
        pod_spec['nodeSelector'] = {'disktype': 'ssd'}
        spec, values = process_spec('web', meta, pod_spec)
        assert spec['nodeSelector'] == '#config.web.nodeSelector'
        assert values.values['web']['nodeSelector'] == {'disktype': 'ssd'}
        assert values.config['web']['nodeSelector'] == '{[string]: string}'

    def test_image_pull_secrets_enabled(self):
        app_meta = AppMetadata(Config(module_name='test', image_pull_secrets=True))
        spec, values = process_spec('web', app_meta, {'containers': [{'name': 'app', 'image': 'app:v1'}]})

        assert spec['imagePullSecrets'] == '#config.imagePullSecrets'
        assert values.values['imagePullSecrets'] == []
        assert values.config['imagePullSecrets'] == '[...corev1.#LocalObjectReference]'

    def test_image_pull_secrets_defined(self, make_obj):
        app_meta = AppMetadata(Config(module_name='test', image_pull_secrets=True))
        app_meta.load(make_obj('Secret', 'registry'))
        pod_spec = {
            'containers': [{'name': 'app', 'image': 'app:v1'}],
            'imagePullSecrets': [{'name': 'registry'}],
        }
        spec, values = process_spec('web', app_meta, pod_spec)
        assert spec['imagePullSecrets'] == [{'name': '"\\(#config.metadata.name)-registry"'}]
        assert 'imagePullSecrets' not in values.values

    def test_generate_defaults(self):
        app_meta = AppMetadata(Config(module_name='test', generate_defaults=True))
        pod_spec = {
            'containers': [{'name': 'app', 'image': 'app:v1'}],
            'tolerations': [{'key': 'gpu', 'operator': 'Exists'}],
        }
        spec, values = process_spec('web', app_meta, pod_spec)

        assert spec['tolerations'] == '#config.web.tolerations'
        assert spec['topologySpreadConstraints'] == '#config.web.topologySpreadConstraints'
        assert spec['nodeSelector'] == '#config.web.nodeSelector'
        assert values.values['web']['tolerations'] == [{'key': 'gpu', 'operator': 'Exists'}]
        assert values.values['web']['topologySpreadConstraints'] == []
        assert values.values['web']['nodeSelector'] == {}

    def test_wrong_image(self, meta):
        with pytest.raises(ImageFormatError):
            process_spec('web', meta, {'containers': [{'name': 'app', 'image': 'app'}]})

    def test_missing_image(self, meta):
        with pytest.raises(ProcessingError):
            process_spec('web', meta, {'containers': [{'name': 'app'}]})
