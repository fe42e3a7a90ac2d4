"""Tests for the operation registry and path template expansion."""

import json
import threading

import pytest

from partnercenter.core import registry as registry_module
from partnercenter.core.errors import InvalidArgument, TemplateArityMismatch, UnknownOperation
from partnercenter.core.registry import OperationDescriptor, OperationRegistry, default_registry

SUBSCRIPTION = OperationDescriptor("GetSubscription", "GET", "/customers/{0}/subscriptions/{1}")


class TestDescriptor:
    def test_arity_counts_placeholders(self):
        assert SUBSCRIPTION.arity == 2
        assert OperationDescriptor("GetCustomers", "GET", "/customers").arity == 0

    def test_verb_is_normalised(self):
        assert OperationDescriptor("X", "patch", "/x").verb == "PATCH"

    def test_unknown_verb(self):
        with pytest.raises(InvalidArgument):
            OperationDescriptor("X", "TRACE", "/x")

    @pytest.mark.parametrize("template", ["/customers/{customer}", "/customers/{0!r}", "/customers/{0:>4}"])
    def test_non_positional_placeholder(self, template):
        with pytest.raises(InvalidArgument):
            OperationDescriptor("X", "GET", template)

    def test_placeholder_gap(self):
        with pytest.raises(InvalidArgument):
            OperationDescriptor("X", "GET", "/customers/{0}/orders/{2}")

    def test_expand_in_order(self):
        assert SUBSCRIPTION.expand(("cust-1", "sub-9")) == "/customers/cust-1/subscriptions/sub-9"

    def test_expand_escapes_each_component(self):
        path = SUBSCRIPTION.expand(("a/b", "c?d#e f"))
        assert path == "/customers/a%2Fb/subscriptions/c%3Fd%23e%20f"

    def test_expand_renders_integers(self):
        op = OperationDescriptor("X", "GET", "/customers/{0}/orders/{1}/lineitems/{2}")
        assert op.expand(("c", "o", 2)) == "/customers/c/orders/o/lineitems/2"

    @pytest.mark.parametrize("values", [(), ("cust-1",), ("cust-1", "sub-9", "extra")])
    def test_arity_mismatch_fails_loudly(self, values):
        with pytest.raises(TemplateArityMismatch) as exc_info:
            SUBSCRIPTION.expand(values)
        assert exc_info.value.expected == 2
        assert exc_info.value.given == len(values)
        assert isinstance(exc_info.value, AssertionError)

    @pytest.mark.parametrize(
        "first,second",
        [
            (("a/b", "c"), ("a", "b/c")),
            (("a", "b"), ("b", "a")),
            (("a%2Fb", "c"), ("a/b", "c")),
            (("a?x=1", "c"), ("a", "c")),
            (("..", "c"), (".", ".c")),
        ],
    )
    def test_distinct_contexts_give_distinct_paths(self, first, second):
        assert SUBSCRIPTION.expand(first) != SUBSCRIPTION.expand(second)

    def test_reserved_characters_stay_inside_their_segment(self):
        path = SUBSCRIPTION.expand(("x/../y", "q?a=1&b=2"))
        segments = path.split("/")
        assert segments == ["", "customers", "x%2F..%2Fy", "subscriptions", "q%3Fa%3D1%26b%3D2"]


class TestRegistry:
    def test_descriptor_for(self):
        registry = OperationRegistry({"GetSubscription": SUBSCRIPTION})
        assert registry.descriptor_for("GetSubscription") is SUBSCRIPTION
        assert registry["GetSubscription"] is SUBSCRIPTION

    def test_unknown_operation(self):
        registry = OperationRegistry({})
        with pytest.raises(UnknownOperation) as exc_info:
            registry.descriptor_for("Nope")
        assert exc_info.value.operation == "Nope"
        assert isinstance(exc_info.value, LookupError)

    def test_mapping_protocol(self):
        registry = OperationRegistry({"GetSubscription": SUBSCRIPTION})
        assert "GetSubscription" in registry
        assert "Nope" not in registry
        assert registry.get("Nope") is None
        assert list(registry) == ["GetSubscription"]

    def test_read_only(self):
        registry = OperationRegistry({"GetSubscription": SUBSCRIPTION})
        with pytest.raises(TypeError):
            registry._descriptors["Other"] = SUBSCRIPTION

    def test_from_dict(self):
        registry = OperationRegistry.from_dict(
            {"operations": {"GetOrder": {"verb": "get", "path": "/customers/{0}/orders/{1}"}}}
        )
        op = registry.descriptor_for("GetOrder")
        assert op.verb == "GET"
        assert op.arity == 2

    def test_from_dict_accepts_bare_mapping(self):
        registry = OperationRegistry.from_dict({"GetCustomers": {"verb": "GET", "path": "/customers"}})
        assert len(registry) == 1

    def test_from_dict_requires_verb_and_path(self):
        with pytest.raises(InvalidArgument):
            OperationRegistry.from_dict({"operations": {"GetOrder": {"path": "/orders"}}})

    def test_from_file(self, tmp_path):
        path = tmp_path / "ops.json"
        path.write_text(json.dumps({"operations": {"GetCustomer": {"verb": "GET", "path": "/customers/{0}"}}}))
        assert OperationRegistry.from_file(path).descriptor_for("GetCustomer").arity == 1

    def test_from_file_invalid_json(self, tmp_path):
        path = tmp_path / "ops.json"
        path.write_text("{not json")
        with pytest.raises(InvalidArgument):
            OperationRegistry.from_file(path)


class TestDefaultRegistry:
    def test_packaged_operations_load(self):
        registry = default_registry()
        assert registry.descriptor_for("GetSubscription").path_template == "/customers/{0}/subscriptions/{1}"
        assert registry.descriptor_for("UpdateSubscription").verb == "PATCH"

    def test_loaded_once(self):
        assert default_registry() is default_registry()

    def test_concurrent_first_use_loads_once(self, monkeypatch):
        monkeypatch.setattr(registry_module, "_default_registry", None)
        loads = []
        original = OperationRegistry.from_file.__func__

        def counting_from_file(cls, path):
            loads.append(path)
            return original(cls, path)

        monkeypatch.setattr(OperationRegistry, "from_file", classmethod(counting_from_file))

        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(default_registry())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(loads) == 1
        assert all(r is results[0] for r in results)

    def test_env_var_overrides_file(self, monkeypatch, tmp_path):
        path = tmp_path / "ops.json"
        path.write_text(json.dumps({"operations": {"Ping": {"verb": "GET", "path": "/ping"}}}))
        monkeypatch.setattr(registry_module, "_default_registry", None)
        monkeypatch.setenv("PARTNER_CENTER_OPERATIONS_FILE", str(path))
        assert list(default_registry()) == ["Ping"]
