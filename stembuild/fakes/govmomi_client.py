"""A recording fake for the vCenter session client."""

from __future__ import annotations

from stembuild.fakes.recorder import Fake, FakeMethod
from stembuild.vcenter_manager import Credentials


class FakeGovmomiClient(Fake):
    """Session client double; configure it through ``login_fake``."""

    def __init__(self) -> None:
        super().__init__()
        self.login_fake = FakeMethod("login", self)

    def login(self, credentials: Credentials) -> None:
        self.login_fake(credentials)