"""
Partner Center SDK - root client and resource tables.

Each resource (customer, subscription, order, device batch, ...) is a
ResourceKind table over the generic ResourceNode: which operations it can
call, which children it exposes and how its items are addressed.
"""

from typing import Any

from partnercenter.core.client import ServiceClient, Transport
from partnercenter.core.node import Call, Child, Item, ResourceKind, ResourceNode
from partnercenter.core.registry import OperationRegistry
from partnercenter.core.types import (
    ActivationLink,
    AzureEntitlement,
    Customer,
    Device,
    DeviceBatch,
    Order,
    ResourceCollection,
    Subscription,
    SubscriptionActivationResult,
    SupportContact,
)

CUSTOMER = ("customer_id",)
SUBSCRIPTION = CUSTOMER + ("subscription_id",)
ORDER = CUSTOMER + ("order_id",)
ORDER_LINE_ITEM = ORDER + ("line_item_number",)
DEVICE_BATCH = CUSTOMER + ("device_batch_id",)
DEVICE = DEVICE_BATCH + ("device_id",)


# =============================================================================
# Subscription resources
# =============================================================================


SUBSCRIPTION_ADD_ONS = ResourceKind(
    "SubscriptionAddOnCollection",
    SUBSCRIPTION,
    calls={"get": Call("GetSubscriptionAddOns", ResourceCollection.of(Subscription.from_dict))},
)

SUBSCRIPTION_UPGRADES = ResourceKind(
    "SubscriptionUpgradeCollection",
    SUBSCRIPTION,
    calls={
        "get": Call("GetSubscriptionUpgrades", ResourceCollection.of()),
        "create": Call("UpgradeSubscription", payload="upgrade"),
    },
)

SUBSCRIPTION_USAGE_RECORDS = ResourceKind(
    "SubscriptionUsageRecordCollection",
    SUBSCRIPTION,
    calls={"get": Call("GetSubscriptionUsageRecords", ResourceCollection.of())},
)

SUBSCRIPTION_USAGE_SUMMARY = ResourceKind(
    "SubscriptionUsageSummary",
    SUBSCRIPTION,
    calls={"get": Call("GetSubscriptionUsageSummary", required=True)},
)

# get() takes start_time, end_time, granularity, show_details and size
SUBSCRIPTION_UTILIZATION = ResourceKind(
    "UtilizationCollection",
    SUBSCRIPTION,
    calls={"get": Call("GetAzureUtilizationRecords", ResourceCollection.of())},
)

SUBSCRIPTION_PROVISIONING_STATUS = ResourceKind(
    "SubscriptionProvisioningStatus",
    SUBSCRIPTION,
    calls={"get": Call("GetSubscriptionProvisioningStatus")},
)

SUBSCRIPTION_SUPPORT_CONTACT = ResourceKind(
    "SubscriptionSupportContact",
    SUBSCRIPTION,
    calls={
        "get": Call("GetSubscriptionSupportContact", SupportContact.from_dict),
        "update": Call("UpdateSubscriptionSupportContact", SupportContact.from_dict, payload="support_contact"),
    },
)

SUBSCRIPTION_REGISTRATION = ResourceKind(
    "SubscriptionRegistration",
    SUBSCRIPTION,
    calls={"register": Call("RegisterSubscription")},
)

SUBSCRIPTION_REGISTRATION_STATUS = ResourceKind(
    "SubscriptionRegistrationStatus",
    SUBSCRIPTION,
    calls={"get": Call("GetSubscriptionRegistrationStatus")},
)

SUBSCRIPTION_CONVERSIONS = ResourceKind(
    "SubscriptionConversionCollection",
    SUBSCRIPTION,
    calls={
        "get": Call("GetSubscriptionConversions", ResourceCollection.of()),
        "create": Call("CreateSubscriptionConversion", payload="conversion"),
    },
)

SUBSCRIPTION_ACTIVATION_LINKS = ResourceKind(
    "SubscriptionActivationLinks",
    SUBSCRIPTION,
    calls={"get": Call("GetSubscriptionActivationLinks", ResourceCollection.of(ActivationLink.from_dict))},
)

SUBSCRIPTION_OPERATIONS = ResourceKind(
    "Subscription",
    SUBSCRIPTION,
    calls={
        "get": Call("GetSubscription", Subscription.from_dict),
        "patch": Call("UpdateSubscription", Subscription.from_dict, payload="subscription"),
        "activate": Call("Activate3ppSubscription", SubscriptionActivationResult.from_dict),
        "get_azure_entitlements": Call("GetAzureEntitlements", ResourceCollection.of(AzureEntitlement.from_dict)),
    },
    children={
        "activation_links": Child(SUBSCRIPTION_ACTIVATION_LINKS),
        "add_ons": Child(SUBSCRIPTION_ADD_ONS),
        "conversions": Child(SUBSCRIPTION_CONVERSIONS),
        "provisioning_status": Child(SUBSCRIPTION_PROVISIONING_STATUS),
        "registration": Child(SUBSCRIPTION_REGISTRATION),
        "registration_status": Child(SUBSCRIPTION_REGISTRATION_STATUS),
        "support_contact": Child(SUBSCRIPTION_SUPPORT_CONTACT),
        "upgrades": Child(SUBSCRIPTION_UPGRADES),
        "usage_records": Child(SUBSCRIPTION_USAGE_RECORDS),
        "usage_summary": Child(SUBSCRIPTION_USAGE_SUMMARY),
        "utilization": Child(SUBSCRIPTION_UTILIZATION),
    },
)

SUBSCRIPTION_COLLECTION = ResourceKind(
    "SubscriptionCollection",
    CUSTOMER,
    calls={"get": Call("GetCustomerSubscriptions", ResourceCollection.of(Subscription.from_dict))},
    item=Item(SUBSCRIPTION_OPERATIONS, "subscription_id"),
)


# =============================================================================
# Order resources
# =============================================================================


ORDER_LINE_ITEM_ACTIVATION_LINKS = ResourceKind(
    "OrderLineItemActivationLinks",
    ORDER_LINE_ITEM,
    calls={"get": Call("GetOrderLineItemActivationLinks", ResourceCollection.of(ActivationLink.from_dict))},
)

ORDER_LINE_ITEM_OPERATIONS = ResourceKind(
    "OrderLineItem",
    ORDER_LINE_ITEM,
    children={"activation_links": Child(ORDER_LINE_ITEM_ACTIVATION_LINKS)},
)

ORDER_LINE_ITEM_COLLECTION = ResourceKind(
    "OrderLineItemCollection",
    ORDER,
    item=Item(ORDER_LINE_ITEM_OPERATIONS, "line_item_number"),
)

ORDER_OPERATIONS = ResourceKind(
    "Order",
    ORDER,
    calls={
        "get": Call("GetOrder", Order.from_dict),
        "patch": Call("UpdateOrder", Order.from_dict, payload="order"),
    },
    children={"line_items": Child(ORDER_LINE_ITEM_COLLECTION)},
)

ORDER_COLLECTION = ResourceKind(
    "OrderCollection",
    CUSTOMER,
    calls={
        "get": Call("GetOrders", ResourceCollection.of(Order.from_dict)),
        "create": Call("CreateOrder", Order.from_dict, payload="order"),
    },
    item=Item(ORDER_OPERATIONS, "order_id"),
)


# =============================================================================
# Device deployment resources
# =============================================================================


DEVICE_OPERATIONS = ResourceKind(
    "Device",
    DEVICE,
    calls={
        "patch": Call("UpdateDevice", Device.from_dict, payload="device"),
        "delete": Call("DeleteDevice"),
    },
)

DEVICE_COLLECTION = ResourceKind(
    "DeviceCollection",
    DEVICE_BATCH,
    calls={
        "get": Call("GetDevices", ResourceCollection.of(Device.from_dict)),
        "create": Call("CreateDevices", payload="devices"),
    },
    item=Item(DEVICE_OPERATIONS, "device_id"),
)

DEVICES_BATCH_OPERATIONS = ResourceKind(
    "DevicesBatch",
    DEVICE_BATCH,
    children={"devices": Child(DEVICE_COLLECTION)},
)

DEVICE_BATCH_COLLECTION = ResourceKind(
    "DeviceBatchCollection",
    CUSTOMER,
    calls={
        "get": Call("GetDeviceBatches", ResourceCollection.of(DeviceBatch.from_dict)),
        "create": Call("CreateDeviceBatch", payload="device_batch"),
    },
    item=Item(DEVICES_BATCH_OPERATIONS, "device_batch_id"),
)


# =============================================================================
# Customers
# =============================================================================


CUSTOMER_OPERATIONS = ResourceKind(
    "Customer",
    CUSTOMER,
    calls={
        "get": Call("GetCustomer", Customer.from_dict),
        "delete": Call("DeleteCustomer"),
    },
    children={
        "device_batches": Child(DEVICE_BATCH_COLLECTION),
        "orders": Child(ORDER_COLLECTION),
        "subscriptions": Child(SUBSCRIPTION_COLLECTION),
    },
)

CUSTOMER_COLLECTION = ResourceKind(
    "CustomerCollection",
    calls={
        "get": Call("GetCustomers", ResourceCollection.of(Customer.from_dict)),
        "create": Call("CreateCustomer", Customer.from_dict, payload="customer"),
    },
    item=Item(CUSTOMER_OPERATIONS, "customer_id"),
)

PARTNER = ResourceKind(
    "Partner",
    children={"customers": Child(CUSTOMER_COLLECTION)},
)


class PartnerClient:
    """
    Partner Center API client, the root of the resource graph.

    Example:
        client = PartnerClient(access_token=token)

        subscription = client.customers.by_id(customer_id).subscriptions.by_id(subscription_id)
        sub = subscription.get()
        sub.friendly_name = "Renamed"
        subscription.patch(sub)

        # Collections come back as None when the service sends an empty body
        orders = client.customers.by_id(customer_id).orders.get()
        for order in orders or []:
            print(order.id)

    """

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        transport: Transport | None = None,
        registry: OperationRegistry | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize the Partner Center client.

        Args:
            base_url: API base URL (or PARTNER_CENTER_BASE_URL env var)
            access_token: Bearer token (or PARTNER_CENTER_ACCESS_TOKEN env var)
            transport: Transport to send requests with (defaults to urllib)
            registry: Operation registry (defaults to the packaged operations.json)
            timeout: Request timeout in seconds (or PARTNER_CENTER_TIMEOUT env var)

        """
        self._service = ServiceClient(
            base_url=base_url,
            access_token=access_token,
            transport=transport,
            registry=registry,
            timeout=timeout,
        )
        self._root = ResourceNode(self._service, PARTNER)

    @property
    def service_client(self) -> ServiceClient:
        return self._service

    @property
    def customers(self) -> ResourceNode:
        """The partner's customer collection."""
        return self._root.child("customers")

    def customer(self, customer_id: Any) -> ResourceNode:
        """Shortcut for ``customers.by_id(customer_id)``."""
        return self.customers.by_id(customer_id)
