"""HTTP adapter – mutual-TLS server context."""
from __future__ import annotations

import ssl

from metric_registry.errors import TLSConfigurationError


def build_server_context(cert_file: str, key_file: str, ca_file: str) -> ssl.SSLContext:
    """Return a server-side context that requires a client certificate signed by *ca_file*."""
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    ctx.verify_mode = ssl.CERT_REQUIRED
    try:
        ctx.load_cert_chain(certfile=cert_file, keyfile=key_file)
    except OSError as exc:
        raise TLSConfigurationError(
            f"Could not load server certificate {cert_file!r} / key {key_file!r}",
            path=cert_file,
            cause=exc,
        ) from exc
    try:
        ctx.load_verify_locations(cafile=ca_file)
    except OSError as exc:
        raise TLSConfigurationError(
            f"Could not load client CA bundle {ca_file!r}",
            path=ca_file,
            cause=exc,
        ) from exc
    return ctx


__all__ = ["build_server_context"]
