"""Running programs in a VM's guest OS and fetching files from it."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, BinaryIO, Protocol


class GuestManagerError(Exception):
    """Raised when a guest operation fails."""


@dataclass(frozen=True)
class GuestAuthentication:
    """Name and password used to act inside the guest OS."""

    username: str = ""
    password: str = ""


@dataclass(frozen=True)
class GuestProgramSpec:
    """A program to start in the guest and its argument string."""

    program_path: str
    arguments: str = ""


@dataclass(frozen=True)
class GuestProcessInfo:
    """What the guest reports about one process."""

    name: str = ""
    pid: int = 0
    owner: str = ""
    cmd_line: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    exit_code: int = 0


@dataclass(frozen=True)
class FileTransferInformation:
    """Where a file being transferred out of the guest can be fetched."""

    url: str
    size: int = 0


class _ProcManager(Protocol):
    def start_program(self, auth: GuestAuthentication, spec: GuestProgramSpec) -> int:
        ...

    def list_processes(
        self, auth: GuestAuthentication, pids: list[int]
    ) -> list[GuestProcessInfo]:
        ...


class _FileManager(Protocol):
    def initiate_file_transfer_from_guest(
        self, auth: GuestAuthentication, guest_file_path: str
    ) -> FileTransferInformation:
        ...

    def transfer_url(self, url: str) -> Any:
        ...


class _DownloadClient(Protocol):
    def download(self, url: Any, params: dict[str, str]) -> tuple[BinaryIO, int]:
        ...


def _default_download() -> dict[str, str]:
    return {"method": "GET"}


class GuestManager:
    """Starts guest programs, waits for them and downloads guest files."""

    def __init__(
        self,
        auth: GuestAuthentication,
        process_manager: _ProcManager,
        file_manager: _FileManager,
        client: _DownloadClient,
        poll_interval: float = 0.25,
    ) -> None:
        self.auth = auth
        self._process_manager = process_manager
        self._file_manager = file_manager
        self._client = client
        self.poll_interval = poll_interval

    def start_program_in_guest(self, command: str, args: str) -> int:
        """Start ``command`` with ``args`` in the guest and return its PID."""
        spec = GuestProgramSpec(program_path=command, arguments=args)
        try:
            return self._process_manager.start_program(self.auth, spec)
        except Exception as error:
            raise GuestManagerError(
                f"vcenter_client - could not run process: {command} {args} "
                f"on guest os, error: {error}"
            ) from error

    def exit_code_for_program_in_guest(self, pid: int) -> int:
        """Wait for the guest process to end and return its exit code."""
        while True:
            try:
                processes = self._process_manager.list_processes(self.auth, [pid])
            except Exception as error:
                raise GuestManagerError(
                    f"vcenter_client - could not observe program exiting: {error}"
                ) from error

            if processes is None or len(processes) != 1:
                raise GuestManagerError(
                    "vcenter_client - could not observe program exiting"
                )

            process = processes[0]
            if process.end_time is None:
                time.sleep(self.poll_interval)
                continue
            return process.exit_code

    def download_file_in_guest(self, path: str) -> tuple[BinaryIO, int]:
        """Fetch a guest file; returns a readable stream and its length."""
        try:
            info = self._file_manager.initiate_file_transfer_from_guest(self.auth, path)
            url = self._file_manager.transfer_url(info.url)
            reader, size = self._client.download(url, _default_download())
        except Exception as error:
            raise GuestManagerError(
                f"vcenter_client - unable to download file: {error}"
            ) from error
        return reader, size