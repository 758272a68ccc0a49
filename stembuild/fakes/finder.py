"""A recording fake for the vCenter inventory finder."""

from __future__ import annotations

from typing import Any

from stembuild.fakes.recorder import Fake, FakeMethod


class FakeFinder(Fake):
    """Inventory finder double with one fake per method."""

    def __init__(self) -> None:
        super().__init__()
        self.virtual_machine_fake = FakeMethod("virtual_machine", self)
        self.datacenter_or_default_fake = FakeMethod("datacenter_or_default", self)
        self.resource_pool_or_default_fake = FakeMethod(
            "resource_pool_or_default", self
        )
        self.set_datacenter_fake = FakeMethod("set_datacenter", self)
        self.folder_or_default_fake = FakeMethod("folder_or_default", self)

    def virtual_machine(self, path: str) -> Any:
        return self.virtual_machine_fake(path)

    def datacenter_or_default(self, path: str) -> Any:
        return self.datacenter_or_default_fake(path)

    def resource_pool_or_default(self, path: str) -> Any:
        return self.resource_pool_or_default_fake(path)

    def set_datacenter(self, datacenter: Any) -> Any:
        return self.set_datacenter_fake(datacenter)

    def folder_or_default(self, path: str) -> Any:
        return self.folder_or_default_fake(path)