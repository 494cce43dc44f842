"""
Kubernetes manifests to Timoni module converter
"""

__version__ = '0.1.0'
