"""Building a VCenterManager from a server address and credentials."""

from __future__ import annotations

import os
import ssl
import string
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import SplitResult, quote, urlsplit

from stembuild.vcenter_manager import Credentials, VCenterManager

_KEEP_ALIVE_SECONDS = 10 * 60
_HOST_CHARACTERS = frozenset(
    string.ascii_letters + string.digits + "-._~!$&'()*+,;=:[]%"
)


class VCenterURLError(ValueError):
    """Raised when a vCenter server address cannot be parsed."""

    def __init__(self, op: str, url: str, reason: str) -> None:
        super().__init__(f'{op} "{url}": {reason}')
        self.op = op
        self.url = url
        self.reason = reason


class _ClientCreator(Protocol):
    def new_client(self, round_tripper: Any) -> Any:
        ...


class _FinderCreator(Protocol):
    def new_finder(self, client: Any, all_datacenters: bool) -> Any:
        ...


def parse_vcenter_url(server: str) -> SplitResult:
    """Parse a vCenter address, defaulting the scheme to https and the path to /sdk."""
    if not server:
        raise VCenterURLError("parse", server, "empty url")
    text = server if "://" in server else "https://" + server
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in text):
        raise VCenterURLError("parse", text, "invalid control character in URL")
    try:
        parts = urlsplit(text)
    except ValueError as error:
        raise VCenterURLError("parse", text, str(error)) from error

    host_port = parts.netloc.rpartition("@")[2]
    for ch in host_port:
        if ch not in _HOST_CHARACTERS:
            raise VCenterURLError("parse", text, f'invalid character "{ch}" in host name')
    try:
        parts.port
    except ValueError as error:
        raise VCenterURLError("parse", text, "invalid port") from error

    if not parts.path:
        parts = parts._replace(path="/sdk")
    return parts


def _with_credentials(url: SplitResult, username: str, password: str) -> SplitResult:
    host_port = url.netloc.rpartition("@")[2]
    user_info = f"{quote(username, safe='')}:{quote(password, safe='')}"
    return url._replace(netloc=f"{user_info}@{host_port}")


class SoapClient:
    """Connection settings for the vCenter SOAP endpoint."""

    def __init__(self, url: str, insecure: bool = False) -> None:
        self.url = url
        self.insecure = insecure
        self.ssl_context: ssl.SSLContext | None = None
        self.keep_alive: float | None = None

    def set_root_cas(self, path: str) -> None:
        """Trust only the CA certificates in these PEM files (os.pathsep separated)."""
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        for name in filter(None, path.split(os.pathsep)):
            with open(os.path.normpath(name), encoding="utf-8", errors="replace") as f:
                pem = f.read()
            try:
                context.load_verify_locations(cadata=pem)
            except (ssl.SSLError, ValueError) as error:
                raise ValueError(
                    f"invalid certificate '{name}', cannot be used as a trusted "
                    "CA certificate"
                ) from error
        self.ssl_context = context


@dataclass
class FactoryConfig:
    """Everything the factory needs to reach a vCenter."""

    vcenter_server: str = ""
    username: str = ""
    password: str = ""
    client_creator: _ClientCreator | None = None
    finder_creator: _FinderCreator | None = None
    root_ca_cert_path: str = ""


@dataclass
class _SessionClient:
    """Session client that logs in through the underlying vim client."""

    client: Any

    def login(self, credentials: Credentials) -> None:
        self.client.login(credentials)


class ManagerFactory:
    """Creates VCenterManager instances from a FactoryConfig."""

    def __init__(self, config: FactoryConfig | None = None) -> None:
        self.config = config if config is not None else FactoryConfig()

    def set_config(self, config: FactoryConfig) -> None:
        self.config = config

    def vcenter_manager(self) -> VCenterManager:
        session_client = self._session_client()
        if self.config.finder_creator is None:
            raise ValueError("no finder creator configured")
        finder = self.config.finder_creator.new_finder(session_client.client, False)
        return VCenterManager(
            session_client,
            session_client.client,
            finder,
            self.config.username,
            self.config.password,
        )

    def _session_client(self) -> _SessionClient:
        soap_client = self._soap_client()
        return _SessionClient(client=self._vim_client(soap_client))

    def _soap_client(self) -> SoapClient:
        url = parse_vcenter_url(self.config.vcenter_server)
        url = _with_credentials(url, self.config.username, self.config.password)
        soap_client = SoapClient(url.geturl(), insecure=False)
        if self.config.root_ca_cert_path:
            soap_client.set_root_cas(self.config.root_ca_cert_path)
        return soap_client

    def _vim_client(self, soap_client: SoapClient) -> Any:
        if self.config.client_creator is None:
            raise ValueError("no client creator configured")
        soap_client.keep_alive = _KEEP_ALIVE_SECONDS
        return self.config.client_creator.new_client(soap_client)