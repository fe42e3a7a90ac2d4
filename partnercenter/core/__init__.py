"""
Core layer - addressing, dispatch and types.

This layer provides:
- ResourceContext for addressing one resource instance
- OperationRegistry mapping operation names to verb + path template
- ServiceClient, the generic templated HTTP invoker
- ResourceNode and its lazy child cache
- Typed dataclasses for request and response payloads
"""

from partnercenter.core.client import ServiceClient, Transport, TransportResponse, UrllibTransport
from partnercenter.core.context import ResourceContext
from partnercenter.core.errors import (
    InvalidArgument,
    PartnerCenterError,
    RemoteError,
    TemplateArityMismatch,
    TransportError,
    UnknownOperation,
)
from partnercenter.core.node import Call, Child, ChildCache, Item, ResourceKind, ResourceNode
from partnercenter.core.registry import OperationDescriptor, OperationRegistry, default_registry
from partnercenter.core.types import (
    ActivationLink,
    AzureEntitlement,
    Customer,
    Device,
    DeviceBatch,
    Order,
    OrderLineItem,
    ResourceCollection,
    Subscription,
    SubscriptionActivationResult,
    SupportContact,
)

__all__ = [
    "ActivationLink",
    "AzureEntitlement",
    "Call",
    "Child",
    "ChildCache",
    "Customer",
    "Device",
    "DeviceBatch",
    "InvalidArgument",
    "Item",
    "OperationDescriptor",
    "OperationRegistry",
    "Order",
    "OrderLineItem",
    "PartnerCenterError",
    "RemoteError",
    "ResourceCollection",
    "ResourceContext",
    "ResourceKind",
    "ResourceNode",
    "ServiceClient",
    "Subscription",
    "SubscriptionActivationResult",
    "SupportContact",
    "TemplateArityMismatch",
    "Transport",
    "TransportError",
    "TransportResponse",
    "UnknownOperation",
    "UrllibTransport",
    "default_registry",
]
