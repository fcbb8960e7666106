"""Shared fixtures: throwaway PKI for mutual-TLS tests and scrape helpers."""

from __future__ import annotations

import dataclasses
import ipaddress
import ssl
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID
from prometheus_client import CollectorRegistry

from metric_registry import Registry


@dataclasses.dataclass(frozen=True)
class TLSMaterial:
    ca_file: str
    server_cert: str
    server_key: str
    client_cert: str
    client_key: str

    def client_context(self, *, with_certificate: bool = True) -> ssl.SSLContext:
        ctx = ssl.create_default_context(cafile=self.ca_file)
        if with_certificate:
            ctx.load_cert_chain(self.client_cert, self.client_key)
        return ctx


def _name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def _key_usage(*, ca: bool) -> x509.KeyUsage:
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=ca,
        crl_sign=ca,
        encipher_only=False,
        decipher_only=False,
    )


def _write_pem(directory: Path, name: str, data: bytes) -> str:
    path = directory / name
    path.write_bytes(data)
    return str(path)


def _private_pem(key: ec.EllipticCurvePrivateKey) -> bytes:
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


def _issue(
    ca_cert: x509.Certificate,
    ca_key: ec.EllipticCurvePrivateKey,
    common_name: str,
    usage: x509.ObjectIdentifier,
    alt_names: list[x509.GeneralName],
) -> tuple[x509.Certificate, ec.EllipticCurvePrivateKey]:
    key = ec.generate_private_key(ec.SECP256R1())
    now = datetime.now(UTC)
    builder = (
        x509.CertificateBuilder()
        .subject_name(_name(common_name))
        .issuer_name(ca_cert.subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=5))
        .not_valid_after(now + timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(_key_usage(ca=False), critical=True)
        .add_extension(x509.ExtendedKeyUsage([usage]), critical=False)
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(ca_key.public_key()),
            critical=False,
        )
    )
    if alt_names:
        builder = builder.add_extension(x509.SubjectAlternativeName(alt_names), critical=False)
    return builder.sign(ca_key, hashes.SHA256()), key


@pytest.fixture(scope="session")
def tls_material(tmp_path_factory: pytest.TempPathFactory) -> TLSMaterial:
    directory = tmp_path_factory.mktemp("tls")
    ca_key = ec.generate_private_key(ec.SECP256R1())
    now = datetime.now(UTC)
    ca_cert = (
        x509.CertificateBuilder()
        .subject_name(_name("metric-registry-test-ca"))
        .issuer_name(_name("metric-registry-test-ca"))
        .public_key(ca_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=5))
        .not_valid_after(now + timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(_key_usage(ca=True), critical=True)
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(ca_key.public_key()), critical=False)
        .sign(ca_key, hashes.SHA256())
    )
    server_cert, server_key = _issue(
        ca_cert,
        ca_key,
        "server",
        ExtendedKeyUsageOID.SERVER_AUTH,
        [x509.DNSName("localhost"), x509.IPAddress(ipaddress.ip_address("127.0.0.1"))],
    )
    client_cert, client_key = _issue(ca_cert, ca_key, "client", ExtendedKeyUsageOID.CLIENT_AUTH, [])

    pem = serialization.Encoding.PEM
    return TLSMaterial(
        ca_file=_write_pem(directory, "ca.crt", ca_cert.public_bytes(pem)),
        server_cert=_write_pem(directory, "server.crt", server_cert.public_bytes(pem)),
        server_key=_write_pem(directory, "server.key", _private_pem(server_key)),
        client_cert=_write_pem(directory, "client.crt", client_cert.public_bytes(pem)),
        client_key=_write_pem(directory, "client.key", _private_pem(client_key)),
    )


@pytest.fixture
def scrape() -> Callable[..., str]:
    """Return ``scrape(port, scheme="http", verify=True) -> body`` over real HTTP."""

    def _scrape(port: str | None, *, scheme: str = "http", verify: ssl.SSLContext | bool = True) -> str:
        resp = httpx.get(f"{scheme}://127.0.0.1:{port}/metrics", verify=verify, timeout=5.0)
        resp.raise_for_status()
        return resp.text

    return _scrape


@pytest.fixture
def registries() -> Iterator[Callable[..., Registry]]:
    """Build registries that are closed when the test ends."""
    created: list[Registry] = []

    def _build(*args: object, **kwargs: object) -> Registry:
        registry = Registry(*args, **kwargs)  # type: ignore[arg-type]
        created.append(registry)
        return registry

    yield _build
    for registry in created:
        registry.close()


@pytest.fixture
def sample_value() -> Callable[..., float | None]:
    """Return ``sample_value(instrument, name, labels=None)`` read through a throwaway registry."""

    def _read(instrument: object, name: str, labels: dict[str, str] | None = None) -> float | None:
        registry = CollectorRegistry(auto_describe=False)
        registry.register(instrument)  # type: ignore[arg-type]
        return registry.get_sample_value(name, labels or {})

    return _read
