"""A vCenter client that drives the govc command line."""

from __future__ import annotations

import json
import os
import re
from typing import Any
from urllib.parse import quote_plus

from stembuild.govc_cli import CliRunner

_WORD = re.compile(r"\S+")


class VcenterClientError(Exception):
    """Raised when a vCenter operation through govc fails."""


def _field(document: dict, name: str) -> Any:
    if name in document:
        return document[name]
    lowered = name.lower()
    for key, value in document.items():
        if key.lower() == lowered:
            return value
    return None


def _exit_codes(output: str) -> list[int]:
    """Exit codes listed in the JSON output of ``govc guest.ps``.

    Raises ValueError when the output is not such a document.
    """
    document = json.loads(output)
    if document is None:
        return []
    if not isinstance(document, dict):
        raise ValueError("expected a JSON object")
    processes = _field(document, "ProcessInfo")
    if processes is None:
        return []
    if not isinstance(processes, list):
        raise ValueError("ProcessInfo is not a list")
    codes = []
    for process in processes:
        if process is None:
            codes.append(0)
            continue
        if not isinstance(process, dict):
            raise ValueError("process entry is not an object")
        code = _field(process, "ExitCode")
        if code is None:
            code = 0
        if isinstance(code, bool) or not isinstance(code, int):
            raise ValueError("ExitCode is not an integer")
        codes.append(code)
    return codes


class VcenterClient:
    """Performs VM operations on a vCenter through a govc runner."""

    def __init__(
        self,
        username: str,
        password: str,
        url: str,
        ca_cert_file: str,
        runner: CliRunner,
    ) -> None:
        encoded_user = quote_plus(username, safe="")
        encoded_password = quote_plus(password, safe="")
        self.url = url
        self.runner = runner
        self._credential_url = f"{encoded_user}:{encoded_password}@{url}"
        self._redacted_url = f"{encoded_user}:REDACTED@{url}"
        self._ca_cert_file = ca_cert_file

    def _govc_command(self, command: str, *args: str) -> list[str]:
        common = ["-u", self._credential_url]
        if self._ca_cert_file:
            common.append(f"-tls-ca-certs={self._ca_cert_file}")
        return [command, *common, *args]

    def _run_with_output(self, args: list[str]) -> tuple[str, int, OSError | None]:
        try:
            output, exit_code = self.runner.run_with_output(args)
        except OSError as error:
            return "", getattr(error, "exit_code", 0) or 0, error
        return output, exit_code, None

    def _run(self, args: list[str], message: str) -> None:
        if self.runner.run(args) != 0:
            raise VcenterClientError(message)

    def validate_url(self) -> None:
        args = ["about", "-u", self.url]
        message = f"vcenter_client - unable to validate url: {self.url}"
        if self._ca_cert_file:
            args.append(f"-tls-ca-certs={self._ca_cert_file}")
            message = f"vcenter_client - invalid ca certs or url: {self.url}"
        self._run(args, message)

    def validate_credentials(self) -> None:
        self._run(
            self._govc_command("about"),
            f"vcenter_client - invalid credentials for: {self._redacted_url}",
        )

    def find_vm(self, vm_inventory_path: str) -> None:
        self._run(
            self._govc_command("find", "-maxdepth=0", vm_inventory_path),
            f"vcenter_client - unable to find VM: {vm_inventory_path}. "
            'Ensure your inventory path is formatted properly and includes "vm" '
            "in its path, example: /my-datacenter/vm/my-folder/my-vm-name",
        )

    def list_devices(self, vm_inventory_path: str) -> list[str]:
        args = self._govc_command("device.ls", "-vm", vm_inventory_path)
        output, exit_code, error = self._run_with_output(args)
        if exit_code != 0:
            raise VcenterClientError(
                "vcenter_client - failed to list devices in vCenter, "
                f"govc exit code {exit_code}"
            ) from error
        if error is not None:
            raise VcenterClientError(
                f"vcenter_client - failed to parse list of devices. Err: {error}"
            ) from error
        devices = []
        for entry in output.split("\n"):
            if entry:
                match = _WORD.search(entry)
                devices.append(match.group() if match else "")
        return devices

    def remove_device(self, vm_inventory_path: str, device_name: str) -> None:
        self._run(
            self._govc_command("device.remove", "-vm", vm_inventory_path, device_name),
            f"vcenter_client - {device_name} could not be removed",
        )

    def eject_cdrom(self, vm_inventory_path: str, device_name: str) -> None:
        self._run(
            self._govc_command(
                "device.cdrom.eject", "-vm", vm_inventory_path, "-device", device_name
            ),
            f"vcenter_client - {device_name} could not be ejected",
        )

    def export_vm(self, vm_inventory_path: str, destination: str) -> None:
        if not os.path.exists(destination):
            raise VcenterClientError(
                f"vcenter_client - provided destination directory: {destination} "
                "does not exist"
            )
        self._run(
            self._govc_command(
                "export.ovf", "-sha", "1", "-vm", vm_inventory_path, destination
            ),
            f"vcenter_client - {vm_inventory_path} could not be exported",
        )

    def upload_artifact(
        self,
        vm_inventory_path: str,
        artifact: str,
        destination: str,
        username: str,
        password: str,
    ) -> None:
        self._run(
            self._govc_command(
                "guest.upload",
                "-f",
                "-l",
                f"{username}:{password}",
                "-vm",
                vm_inventory_path,
                artifact,
                destination,
            ),
            f"vcenter_client - {artifact} could not be uploaded",
        )

    def make_directory(
        self, vm_inventory_path: str, path: str, username: str, password: str
    ) -> None:
        self._run(
            self._govc_command(
                "guest.mkdir",
                "-l",
                f"{username}:{password}",
                "-vm",
                vm_inventory_path,
                "-p",
                path,
            ),
            f"vcenter_client - directory `{path}` could not be created",
        )

    def start(
        self,
        vm_inventory_path: str,
        username: str,
        password: str,
        command: str,
        *args: str,
    ) -> str:
        """Start a program in the guest and return its PID as text."""
        cmd_args = self._govc_command(
            "guest.start",
            "-l",
            f"{username}:{password}",
            "-vm",
            vm_inventory_path,
            command,
            *args,
        )
        pid, exit_code, error = self._run_with_output(cmd_args)
        if error is not None:
            raise VcenterClientError(
                f"vcenter_client - failed to run '{command}': {error}"
            ) from error
        if exit_code != 0:
            raise VcenterClientError(
                f"vcenter_client - '{command}' returned exit code: {exit_code}"
            )
        # govc ends the PID with a newline
        return pid.removesuffix("\n")

    def wait_for_exit(
        self, vm_inventory_path: str, username: str, password: str, pid: str
    ) -> int:
        """Return the exit code of a guest process that has finished."""
        args = self._govc_command(
            "guest.ps",
            "-l",
            f"{username}:{password}",
            "-vm",
            vm_inventory_path,
            "-p",
            pid,
            "-X",
            "-json",
        )
        output, exit_code, error = self._run_with_output(args)
        if error is not None:
            raise VcenterClientError(
                f"vcenter_client - failed to fetch exit code for PID {pid}: {error}"
            ) from error
        if exit_code != 0:
            raise VcenterClientError(
                f"vcenter_client - fetching PID {pid} returned with exit code: "
                f"{exit_code}"
            )
        try:
            codes = _exit_codes(output)
        except ValueError as parse_error:
            raise VcenterClientError(
                f"vcenter_client - received bad JSON output for PID {pid}: {output}"
            ) from parse_error
        if len(codes) != 1:
            raise VcenterClientError(
                f"vcenter_client - couldn't get exit code for PID {pid}"
            )
        return codes[0]

    def is_powered_off(self, vm_inventory_path: str) -> bool:
        args = self._govc_command("vm.info", vm_inventory_path)
        output, exit_code, error = self._run_with_output(args)
        if exit_code != 0:
            raise VcenterClientError(
                f"vcenter_client - failed to get vm info, govc exit code: {exit_code}"
            ) from error
        if error is not None:
            raise VcenterClientError(
                f"vcenter_client - failed to determine vm power state: {error}"
            ) from error
        return "poweredOff" in output