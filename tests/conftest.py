"""
Shared fixtures
"""
import pytest

from timoni_converter import logger
from timoni_converter.config import Config
from timoni_converter.metadata import AppMetadata


@pytest.fixture(autouse=True)
def reset_verbosity():
    """Keep the module level log threshold from leaking between tests"""
    yield
    logger.set_verbosity()


@pytest.fixture
def config():
    """Validated default configuration"""
    config = Config(module_name='test-module')
    config.validate()
    return config


@pytest.fixture
def make_obj():
    """Factory for minimal manifests"""
    def _make(kind, name, api_version='v1', namespace=None, **fields):
        metadata = {'name': name}
        if namespace:
            metadata['namespace'] = namespace
        obj = {'apiVersion': api_version, 'kind': kind, 'metadata': metadata}
        obj.update(fields)
        return obj
    return _make


@pytest.fixture
def app_meta(config):
    """AppMetadata without any loaded objects"""
    return AppMetadata(config)


@pytest.fixture
def deployment_manifest():
    """Sample nginx Deployment"""
    return {
        'apiVersion': 'apps/v1',
        'kind': 'Deployment',
        'metadata': {
            'name': 'nginx',
            'namespace': 'web',
            'labels': {
                'app': 'nginx',
                'app.kubernetes.io/managed-by': 'kustomize'
            }
        },
        'spec': {
            'replicas': 3,
            'selector': {
                'matchLabels': {
                    'app': 'nginx'
                }
            },
            'template': {
                'metadata': {
                    'labels': {
                        'app': 'nginx'
                    },
                    'annotations': {
                        'prometheus.io/scrape': 'true'
                    }
                },
                'spec': {
                    'containers': [
                        {
                            'name': 'nginx',
                            'image': 'nginx:1.14.2',
                            'args': ['--test', '--arg'],
                            'ports': [{'containerPort': 80}]
                        }
                    ]
                }
            }
        }
    }
