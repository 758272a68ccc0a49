"""A recording fake for the guest process manager."""

from __future__ import annotations

from typing import Any

from stembuild.fakes.recorder import Fake, FakeMethod
from stembuild.guest_manager import GuestAuthentication, GuestProcessInfo, GuestProgramSpec


class FakeProcManager(Fake):
    """Process manager double with one fake per method."""

    def __init__(self) -> None:
        super().__init__()
        self.start_program_fake = FakeMethod("start_program", self)
        self.start_program_fake.returns(0)
        self.list_processes_fake = FakeMethod("list_processes", self)
        self.client_fake = FakeMethod("client", self)

    def start_program(self, auth: GuestAuthentication, spec: GuestProgramSpec) -> int:
        return self.start_program_fake(auth, spec)

    def list_processes(
        self, auth: GuestAuthentication, pids: list[int]
    ) -> list[GuestProcessInfo] | None:
        return self.list_processes_fake(auth, pids)

    def client(self) -> Any:
        return self.client_fake()