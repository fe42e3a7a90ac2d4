"""
Partner Center SDK - resource graph over a templated HTTP core.

Layers:
- core: Resource addressing, operation registry, service client, resource nodes
- sdk: PartnerClient and the resource tables built on the core
"""

from partnercenter.sdk import PartnerClient

__version__ = "0.1.0"
__all__ = ["PartnerClient"]
