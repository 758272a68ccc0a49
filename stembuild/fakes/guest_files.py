"""Recording fakes for the guest file manager and the download client."""

from __future__ import annotations

from typing import Any

from stembuild.fakes.recorder import Fake, FakeMethod


class FakeDownloadClient(Fake):
    """Download client double; configure it through ``download_fake``."""

    def __init__(self) -> None:
        super().__init__()
        self.download_fake = FakeMethod("download", self)
        self.download_fake.returns(None, 0)

    def download(self, url: Any, params: Any) -> Any:
        return self.download_fake(url, params)


class FakeFileManager(Fake):
    """Guest file manager double with one fake per method."""

    def __init__(self) -> None:
        super().__init__()
        self.initiate_file_transfer_from_guest_fake = FakeMethod(
            "initiate_file_transfer_from_guest", self
        )
        self.transfer_url_fake = FakeMethod("transfer_url", self)

    def initiate_file_transfer_from_guest(self, auth: Any, guest_file_path: str) -> Any:
        return self.initiate_file_transfer_from_guest_fake(auth, guest_file_path)

    def transfer_url(self, url: str) -> Any:
        return self.transfer_url_fake(url)