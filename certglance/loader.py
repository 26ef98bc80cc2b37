from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from cryptography import x509

log = logging.getLogger(__name__)

BEGIN_CERT = b"-----BEGIN CERTIFICATE-----"
END_CERT = b"-----END CERTIFICATE-----"
BEGIN_CSR1 = b"-----BEGIN CERTIFICATE REQUEST-----"
END_CSR1 = b"-----END CERTIFICATE REQUEST-----"
BEGIN_CSR2 = b"-----BEGIN NEW CERTIFICATE REQUEST-----"
END_CSR2 = b"-----END NEW CERTIFICATE REQUEST-----"

X509Object = Union[x509.Certificate, x509.CertificateSigningRequest]


def _iter_blocks(data: bytes, begin: bytes, end: bytes) -> List[Tuple[int, bytes]]:
    blocks: List[Tuple[int, bytes]] = []
    i = 0
    while True:
        s = data.find(begin, i)
        if s == -1:
            break
        e = data.find(end, s)
        if e == -1:
            break
        e2 = e + len(end)
        blocks.append((s, data[s:e2]))
        i = e2
    return blocks


def _first_pem_cert(data: bytes) -> Optional[x509.Certificate]:
    for _, b in _iter_blocks(data, BEGIN_CERT, END_CERT):
        try:
            return x509.load_pem_x509_certificate(b)
        except ValueError as e:
            log.debug("skipping unparsable PEM certificate: %s", e)
    return None


def _first_pem_csr(data: bytes) -> Optional[x509.CertificateSigningRequest]:
    # les deux en-têtes mélangés, dans l'ordre du fichier
    blocks = _iter_blocks(data, BEGIN_CSR1, END_CSR1)
    blocks += [
        (s, b.replace(b"NEW CERTIFICATE REQUEST", b"CERTIFICATE REQUEST"))
        for s, b in _iter_blocks(data, BEGIN_CSR2, END_CSR2)
    ]
    for _, b in sorted(blocks, key=lambda sb: sb[0]):
        try:
            return x509.load_pem_x509_csr(b)
        except ValueError as e:
            log.debug("skipping unparsable PEM CSR: %s", e)
    return None


def _try_der(data: bytes) -> Optional[X509Object]:
    try:
        return x509.load_der_x509_certificate(data)
    except ValueError:
        pass
    try:
        return x509.load_der_x509_csr(data)
    except ValueError:
        return None


def load_x509(data: bytes) -> X509Object:
    """
    Parse the first certificate (or, failing that, the first CSR) found in
    PEM or DER bytes.
    """
    obj: Optional[X509Object] = _first_pem_cert(data) or _first_pem_csr(data)
    if obj is None:
        obj = _try_der(data)
    if obj is None:
        raise ValueError("no X.509 certificate or certificate request found")
    return obj
