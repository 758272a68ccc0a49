"""A recording fake for the guest operations manager."""

from __future__ import annotations

from typing import Any

from stembuild.fakes.recorder import Fake, FakeMethod


class FakeOpsManager(Fake):
    """Operations manager double with one fake per method."""

    def __init__(self) -> None:
        super().__init__()
        self.process_manager_fake = FakeMethod("process_manager", self)
        self.file_manager_fake = FakeMethod("file_manager", self)

    def process_manager(self) -> Any:
        return self.process_manager_fake()

    def file_manager(self) -> Any:
        return self.file_manager_fake()