"""
Core types for Partner Center payloads.

These dataclasses mirror the camelCase documents the service sends and
accepts. Anything without a dataclass here comes back as a plain dict.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop unset fields so PATCH bodies only carry what changed."""
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# Collections
# =============================================================================


@dataclass
class ResourceCollection(Generic[T]):
    """
    One page of a multi-item response.

    If ``continuation_token`` is set the page is not the whole result set;
    fetching the next page is up to the caller.
    """

    items: list[T] = field(default_factory=list)
    total_count: int = 0
    continuation_token: str | None = None
    links: dict[str, Any] = field(default_factory=dict)

    @property
    def has_more(self) -> bool:
        """Check if there are more results."""
        return self.continuation_token is not None

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        parser: Callable[[dict[str, Any]], T] | None = None,
    ) -> "ResourceCollection[T]":
        """Create from API response dict, parsing each item if a parser is given."""
        raw_items = data.get("items") or []
        items = [parser(item) for item in raw_items] if parser else list(raw_items)
        return cls(
            items=items,
            total_count=data.get("totalCount", len(items)),
            continuation_token=data.get("continuationToken"),
            links=data.get("links") or {},
        )

    @classmethod
    def of(cls, parser: Callable[[dict[str, Any]], T] | None = None) -> Callable[[dict[str, Any]], "ResourceCollection[T]"]:
        """Build a response parser for a collection of ``parser`` items."""

        def parse(data: dict[str, Any]) -> "ResourceCollection[T]":
            return cls.from_dict(data, parser)

        return parse


# =============================================================================
# Customer Types
# =============================================================================


@dataclass
class Customer:
    """A customer of the partner."""

    id: str | None = None
    company_name: str | None = None
    domain: str | None = None
    tenant_id: str | None = None
    relationship_to_partner: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Customer":
        """Create from API response dict."""
        profile = data.get("companyProfile") or {}
        return cls(
            id=data.get("id"),
            company_name=profile.get("companyName"),
            domain=profile.get("domain"),
            tenant_id=profile.get("tenantId"),
            relationship_to_partner=data.get("relationshipToPartner"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "id": self.id,
                "companyProfile": _compact(
                    {
                        "companyName": self.company_name,
                        "domain": self.domain,
                        "tenantId": self.tenant_id,
                    }
                ),
                "relationshipToPartner": self.relationship_to_partner,
            }
        )


# =============================================================================
# Subscription Types
# =============================================================================


@dataclass
class Subscription:
    """A customer's subscription to an offer."""

    id: str | None = None
    offer_id: str | None = None
    offer_name: str | None = None
    friendly_name: str | None = None
    quantity: int | None = None
    unit_type: str | None = None
    status: str | None = None
    auto_renew_enabled: bool | None = None
    billing_cycle: str | None = None
    order_id: str | None = None
    parent_subscription_id: str | None = None
    creation_date: str | None = None
    commitment_end_date: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Subscription":
        """Create from API response dict."""
        return cls(
            id=data.get("id"),
            offer_id=data.get("offerId"),
            offer_name=data.get("offerName"),
            friendly_name=data.get("friendlyName"),
            quantity=data.get("quantity"),
            unit_type=data.get("unitType"),
            status=data.get("status"),
            auto_renew_enabled=data.get("autoRenewEnabled"),
            billing_cycle=data.get("billingCycle"),
            order_id=data.get("orderId"),
            parent_subscription_id=data.get("parentSubscriptionId"),
            creation_date=data.get("creationDate"),
            commitment_end_date=data.get("commitmentEndDate"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "id": self.id,
                "offerId": self.offer_id,
                "offerName": self.offer_name,
                "friendlyName": self.friendly_name,
                "quantity": self.quantity,
                "unitType": self.unit_type,
                "status": self.status,
                "autoRenewEnabled": self.auto_renew_enabled,
                "billingCycle": self.billing_cycle,
                "orderId": self.order_id,
                "parentSubscriptionId": self.parent_subscription_id,
                "creationDate": self.creation_date,
                "commitmentEndDate": self.commitment_end_date,
            }
        )


@dataclass
class SubscriptionActivationResult:
    """Result of activating a third-party subscription."""

    subscription_id: str | None = None
    status: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SubscriptionActivationResult":
        """Create from API response dict."""
        return cls(subscription_id=data.get("subscriptionId"), status=data.get("status"))


@dataclass
class AzureEntitlement:
    """An Azure subscription under an Azure plan."""

    id: str
    friendly_name: str | None = None
    status: str | None = None
    subscription_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AzureEntitlement":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            friendly_name=data.get("friendlyName"),
            status=data.get("status"),
            subscription_id=data.get("subscriptionId"),
        )


@dataclass
class SupportContact:
    """The value-added reseller supporting a subscription."""

    support_tenant_id: str | None = None
    support_mpn_id: str | None = None
    name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SupportContact":
        """Create from API response dict."""
        return cls(
            support_tenant_id=data.get("supportTenantId"),
            support_mpn_id=data.get("supportMpnId"),
            name=data.get("name"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "supportTenantId": self.support_tenant_id,
                "supportMpnId": self.support_mpn_id,
                "name": self.name,
            }
        )


@dataclass
class ActivationLink:
    """A link the customer follows to activate a product."""

    uri: str
    method: str = "GET"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActivationLink":
        """Create from API response dict."""
        # Links are wrapped as {"link": {"uri": ..., "method": ...}}
        link = data.get("link") or data
        return cls(uri=link["uri"], method=link.get("method", "GET"))


# =============================================================================
# Order Types
# =============================================================================


@dataclass
class OrderLineItem:
    """One line of an order."""

    line_item_number: int
    offer_id: str
    quantity: int = 1
    friendly_name: str | None = None
    subscription_id: str | None = None
    parent_subscription_id: str | None = None
    term_duration: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderLineItem":
        """Create from API response dict."""
        return cls(
            line_item_number=data.get("lineItemNumber", 0),
            offer_id=data["offerId"],
            quantity=data.get("quantity", 1),
            friendly_name=data.get("friendlyName"),
            subscription_id=data.get("subscriptionId"),
            parent_subscription_id=data.get("parentSubscriptionId"),
            term_duration=data.get("termDuration"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "lineItemNumber": self.line_item_number,
                "offerId": self.offer_id,
                "quantity": self.quantity,
                "friendlyName": self.friendly_name,
                "subscriptionId": self.subscription_id,
                "parentSubscriptionId": self.parent_subscription_id,
                "termDuration": self.term_duration,
            }
        )


@dataclass
class Order:
    """A customer order."""

    id: str | None = None
    reference_customer_id: str | None = None
    billing_cycle: str | None = None
    currency_code: str | None = None
    status: str | None = None
    creation_date: str | None = None
    line_items: list[OrderLineItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Order":
        """Create from API response dict."""
        return cls(
            id=data.get("id"),
            reference_customer_id=data.get("referenceCustomerId"),
            billing_cycle=data.get("billingCycle"),
            currency_code=data.get("currencyCode"),
            status=data.get("status"),
            creation_date=data.get("creationDate"),
            line_items=[OrderLineItem.from_dict(item) for item in data.get("lineItems") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        result = _compact(
            {
                "id": self.id,
                "referenceCustomerId": self.reference_customer_id,
                "billingCycle": self.billing_cycle,
                "currencyCode": self.currency_code,
                "status": self.status,
                "creationDate": self.creation_date,
            }
        )
        result["lineItems"] = [item.to_dict() for item in self.line_items]
        return result


# =============================================================================
# Device Deployment Types
# =============================================================================


@dataclass
class Device:
    """A device registered for deployment."""

    id: str | None = None
    serial_number: str | None = None
    product_key: str | None = None
    hardware_hash: str | None = None
    model_name: str | None = None
    oem_manufacturer_name: str | None = None
    policies: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Device":
        """Create from API response dict."""
        return cls(
            id=data.get("id"),
            serial_number=data.get("serialNumber"),
            product_key=data.get("productKey"),
            hardware_hash=data.get("hardwareHash"),
            model_name=data.get("modelName"),
            oem_manufacturer_name=data.get("oemManufacturerName"),
            policies=data.get("policies", []),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        result = _compact(
            {
                "id": self.id,
                "serialNumber": self.serial_number,
                "productKey": self.product_key,
                "hardwareHash": self.hardware_hash,
                "modelName": self.model_name,
                "oemManufacturerName": self.oem_manufacturer_name,
            }
        )
        result["policies"] = list(self.policies)
        return result


@dataclass
class DeviceBatch:
    """A batch of devices uploaded together."""

    id: str | None = None
    batch_tracking_id: str | None = None
    devices_count: int = 0
    created_by: str | None = None
    creation_date: str | None = None
    devices: list[Device] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeviceBatch":
        """Create from API response dict."""
        return cls(
            id=data.get("id"),
            batch_tracking_id=data.get("batchTrackingId"),
            devices_count=data.get("devicesCount", 0),
            created_by=data.get("createdBy"),
            creation_date=data.get("creationDate"),
            devices=[Device.from_dict(d) for d in data.get("devices") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        result = _compact(
            {
                "id": self.id,
                "batchTrackingId": self.batch_tracking_id,
                "createdBy": self.created_by,
                "creationDate": self.creation_date,
            }
        )
        result["devicesCount"] = self.devices_count
        result["devices"] = [d.to_dict() for d in self.devices]
        return result
