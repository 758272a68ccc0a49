"""Recording fakes for the finder creator and the vim client creator."""

from __future__ import annotations

from typing import Any

from stembuild.fakes.recorder import Fake, FakeMethod


class FakeFinderCreator(Fake):
    """Finder creator double; configure it through ``new_finder_fake``."""

    def __init__(self) -> None:
        super().__init__()
        self.new_finder_fake = FakeMethod("new_finder", self)

    def new_finder(self, client: Any, all_datacenters: bool) -> Any:
        return self.new_finder_fake(client, all_datacenters)


class FakeVim25ClientCreator(Fake):
    """Vim client creator double; configure it through ``new_client_fake``."""

    def __init__(self) -> None:
        super().__init__()
        self.new_client_fake = FakeMethod("new_client", self)

    def new_client(self, round_tripper: Any) -> Any:
        return self.new_client_fake(round_tripper)