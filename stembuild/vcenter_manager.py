"""Logging into vCenter, finding and cloning VMs, and reaching their guests."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Any, Protocol

from stembuild.guest_manager import GuestAuthentication, GuestManager


@dataclass(frozen=True)
class Credentials:
    """User name and password for a vCenter session."""

    username: str
    password: str


@dataclass(frozen=True)
class CloneSpec:
    """How a VM clone is placed and whether it starts powered on."""

    pool: Any = None
    power_on: bool = False


class _GovmomiClient(Protocol):
    def login(self, credentials: Credentials) -> None:
        ...


class _Finder(Protocol):
    def virtual_machine(self, path: str) -> Any:
        ...

    def datacenter_or_default(self, path: str) -> Any:
        ...

    def resource_pool_or_default(self, path: str) -> Any:
        ...

    def set_datacenter(self, datacenter: Any) -> Any:
        ...

    def folder_or_default(self, path: str) -> Any:
        ...


class _OpsManager(Protocol):
    def process_manager(self) -> Any:
        ...

    def file_manager(self) -> Any:
        ...


def _clean(path: str) -> str:
    cleaned = posixpath.normpath(path) if path else "."
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _dirname(path: str) -> str:
    """Directory part of a slash-separated inventory path."""
    return _clean(path[: path.rfind("/") + 1])


def _basename(path: str) -> str:
    """Last element of a slash-separated inventory path."""
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped[stripped.rfind("/") + 1 :]


class VCenterManager:
    """High-level vCenter operations built on a client and a finder."""

    def __init__(
        self,
        govmomi_client: _GovmomiClient,
        vim_client: Any,
        finder: _Finder,
        username: str,
        password: str,
    ) -> None:
        self._govmomi_client = govmomi_client
        self._vim_client = vim_client
        self._finder = finder
        self._username = username
        self._password = password

    def login(self) -> None:
        """Open a session with the configured credentials."""
        self._govmomi_client.login(Credentials(self._username, self._password))

    def find_vm(self, inventory_path: str) -> Any:
        """Look a VM up by its inventory path."""
        return self._finder.virtual_machine(inventory_path)

    def clone_vm(self, vm: Any, clone_path: str) -> None:
        """Clone ``vm`` to ``clone_path`` and power the clone on.

        No network configuration is done, so the clone gets no IP address.
        """
        datacenter_name = vm.inventory_path.split("/")[0]
        datacenter = self._finder.datacenter_or_default(datacenter_name)
        self._finder.set_datacenter(datacenter)

        resource_pool = vm.resource_pool()
        # Inventory paths always use forward slashes, whatever the local OS.
        folder = self._finder.folder_or_default(_dirname(clone_path))

        reference = getattr(resource_pool, "reference", None)
        pool = reference() if callable(reference) else resource_pool
        spec = CloneSpec(pool=pool, power_on=True)

        task = vm.clone(folder, _basename(clone_path), spec)
        task.wait()

    def guest_manager(
        self, ops_manager: _OpsManager, username: str, password: str
    ) -> GuestManager:
        """A guest manager acting in the guest OS as the given user."""
        process_manager = ops_manager.process_manager()
        file_manager = ops_manager.file_manager()
        auth = GuestAuthentication(username=username, password=password)
        return GuestManager(auth, process_manager, file_manager, self._vim_client)