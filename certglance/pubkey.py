from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed25519, ed448, rsa


class PublicKeyAlgorithm(str, Enum):
    RSA = "RSA"
    DSA = "DSA"
    ECDSA = "ECDSA"
    ED25519 = "Ed25519"
    ED448 = "Ed448"
    UNKNOWN = "Unknown"


_ALGORITHM_BY_OID: Dict[str, PublicKeyAlgorithm] = {
    "1.2.840.113549.1.1.1": PublicKeyAlgorithm.RSA,  # rsaEncryption
    "1.2.840.113549.1.1.10": PublicKeyAlgorithm.RSA,  # id-RSASSA-PSS
    "1.2.840.10040.4.1": PublicKeyAlgorithm.DSA,
    "1.2.840.10045.2.1": PublicKeyAlgorithm.ECDSA,  # id-ecPublicKey
    "1.3.101.112": PublicKeyAlgorithm.ED25519,
    "1.3.101.113": PublicKeyAlgorithm.ED448,
}

# noms NIST, comme les affiche la plupart des outils
_CURVE_NAMES = {
    "secp224r1": "P-224",
    "secp256r1": "P-256",
    "secp384r1": "P-384",
    "secp521r1": "P-521",
}

X509Object = Union[x509.Certificate, x509.CertificateSigningRequest]


def load_public_key(obj: X509Object) -> Optional[Any]:
    try:
        return obj.public_key()
    except (UnsupportedAlgorithm, ValueError):
        return None


def _algorithm_from_key(key: Any) -> PublicKeyAlgorithm:
    if isinstance(key, rsa.RSAPublicKey):
        return PublicKeyAlgorithm.RSA
    if isinstance(key, dsa.DSAPublicKey):
        return PublicKeyAlgorithm.DSA
    if isinstance(key, ec.EllipticCurvePublicKey):
        return PublicKeyAlgorithm.ECDSA
    if isinstance(key, ed25519.Ed25519PublicKey):
        return PublicKeyAlgorithm.ED25519
    if isinstance(key, ed448.Ed448PublicKey):
        return PublicKeyAlgorithm.ED448
    return PublicKeyAlgorithm.UNKNOWN


def algorithm_of(obj: X509Object, key: Optional[Any] = None) -> PublicKeyAlgorithm:
    # public_key_algorithm_oid: cryptography>=43
    oid = getattr(obj, "public_key_algorithm_oid", None)
    if oid is not None:
        return _ALGORITHM_BY_OID.get(oid.dotted_string, PublicKeyAlgorithm.UNKNOWN)
    return _algorithm_from_key(key if key is not None else load_public_key(obj))


def _key_parameter(key: Any) -> str:
    if isinstance(key, ec.EllipticCurvePublicKey):
        return _CURVE_NAMES.get(key.curve.name, key.curve.name)
    if isinstance(key, rsa.RSAPublicKey):
        return str((key.key_size + 7) // 8 * 8)
    if isinstance(key, dsa.DSAPublicKey):
        return str(key.parameters().parameter_numbers().q.bit_length())
    if isinstance(key, ed25519.Ed25519PublicKey):
        return str(len(key.public_bytes_raw()) * 8)
    return "unknown"


def describe_public_key(algorithm: PublicKeyAlgorithm, key: Any) -> str:
    """Return ``"<algorithm> <parameter>"``, e.g. ``"RSA 2048"`` or ``"ECDSA P-256"``."""
    return f"{algorithm.value} {_key_parameter(key)}"


def describe(obj: X509Object) -> str:
    key = load_public_key(obj)
    return describe_public_key(algorithm_of(obj, key), key)
