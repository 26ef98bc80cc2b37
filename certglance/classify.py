from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, cast

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa

log = logging.getLogger(__name__)

_INSECURE_HASHES = (hashes.MD5, hashes.SHA1)


class CertificateType(str, Enum):
    ROOT_CA = "Root CA"
    INTERMEDIATE_CA = "Intermediate CA"
    TLS = "TLS"


def classify(is_ca: bool, verifies_self: Callable[[], bool]) -> CertificateType:
    if not is_ca:
        return CertificateType.TLS
    if verifies_self():
        return CertificateType.ROOT_CA
    return CertificateType.INTERMEDIATE_CA


def is_ca(cert: x509.Certificate) -> bool:
    try:
        ext = cert.extensions.get_extension_for_oid(x509.oid.ExtensionOID.BASIC_CONSTRAINTS)
    except x509.ExtensionNotFound:
        return False
    return bool(cast(x509.BasicConstraints, ext.value).ca)


def _may_sign_certificates(cert: x509.Certificate) -> bool:
    try:
        ext = cert.extensions.get_extension_for_oid(x509.oid.ExtensionOID.KEY_USAGE)
    except x509.ExtensionNotFound:
        return True
    return cast(x509.KeyUsage, ext.value).key_cert_sign


def verifies_self(cert: x509.Certificate) -> bool:
    """
    True when the certificate's signature verifies against its own public key.

    Issuer and subject names are not compared: only the signature counts.
    MD5 and SHA-1 signatures are refused, so such a CA never counts as a root.
    """
    if not _may_sign_certificates(cert):
        log.debug("self-signature check skipped", extra={"reason": "keyCertSign not set"})
        return False
    try:
        if isinstance(cert.signature_hash_algorithm, _INSECURE_HASHES):
            log.debug("self-signature check refused", extra={"reason": cert.signature_hash_algorithm.name})
            return False
        pk = cert.public_key()
        sig, tbs = cert.signature, cert.tbs_certificate_bytes
        if isinstance(pk, rsa.RSAPublicKey):
            pk.verify(sig, tbs, cert.signature_algorithm_parameters, cert.signature_hash_algorithm)
        elif isinstance(pk, ec.EllipticCurvePublicKey):
            pk.verify(sig, tbs, cert.signature_algorithm_parameters)
        elif isinstance(pk, dsa.DSAPublicKey):
            pk.verify(sig, tbs, cert.signature_hash_algorithm)
        elif isinstance(pk, (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
            pk.verify(sig, tbs)
        else:
            return False
    except (InvalidSignature, UnsupportedAlgorithm, TypeError, ValueError) as e:
        log.debug("self-signature check failed", extra={"reason": e.__class__.__name__})
        return False
    return True


def classify_certificate(cert: x509.Certificate) -> CertificateType:
    return classify(is_ca(cert), lambda: verifies_self(cert))
