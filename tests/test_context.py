"""Tests for the resource cache, status store and loop context."""

from __future__ import annotations

import pytest
from conftest import registry_crd

from registry_operator.context import (
    CFG_STA_IMAGE,
    CFG_STA_REPLICA_COUNT,
    RC_KEY_SPEC,
    LoopContext,
    ResourceCache,
    StatusStore,
)
from registry_operator.spec import RegistrySpec


class TestResourceCache:
    def test_miss_reports_absent(self) -> None:
        assert ResourceCache().get(RC_KEY_SPEC) == (None, False)

    def test_last_writer_wins(self) -> None:
        cache = ResourceCache()
        cache.set(RC_KEY_SPEC, "first")
        cache.set(RC_KEY_SPEC, "second")

        assert cache.get(RC_KEY_SPEC) == ("second", True)

    def test_remove_and_clear(self) -> None:
        cache = ResourceCache()
        cache.set(RC_KEY_SPEC, "value")

        assert cache.remove(RC_KEY_SPEC) == "value"
        assert cache.remove(RC_KEY_SPEC) is None

        cache.set(RC_KEY_SPEC, "value")
        cache.clear()
        assert cache.get(RC_KEY_SPEC) == (None, False)


class TestStatusStore:
    def test_absent_keys_yield_zero_values(self) -> None:
        store = StatusStore()

        assert store.get_config(CFG_STA_IMAGE) == ""
        assert store.get_config_int32(CFG_STA_REPLICA_COUNT) == 0

    def test_reads_stored_values(self) -> None:
        store = StatusStore()
        store.set_config(CFG_STA_IMAGE, "apicurio/apicurio-registry-sql:2.0.0")
        store.set_config(CFG_STA_REPLICA_COUNT, 3)

        assert store.get_config(CFG_STA_IMAGE) == "apicurio/apicurio-registry-sql:2.0.0"
        assert store.get_config_int32(CFG_STA_REPLICA_COUNT) == 3

    def test_int32_overflow_is_rejected(self) -> None:
        store = StatusStore()
        store.set_config(CFG_STA_REPLICA_COUNT, 2 ** 31)

        with pytest.raises(ValueError, match="int32"):
            store.get_config_int32(CFG_STA_REPLICA_COUNT)


class TestLoopContext:
    def test_get_spec_on_cache_miss(self) -> None:
        assert LoopContext(app_name="reg1", app_namespace="ns1").get_spec() is None

    def test_from_crd_caches_spec(self) -> None:
        ctx = LoopContext.from_crd(registry_crd())

        assert ctx.app_name == "reg1"
        assert ctx.app_namespace == "ns1"
        assert isinstance(ctx.get_spec(), RegistrySpec)

    def test_from_crd_namespace_override(self) -> None:
        ctx = LoopContext.from_crd(registry_crd(), namespace="other")

        assert ctx.app_namespace == "other"
