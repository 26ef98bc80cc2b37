from __future__ import annotations
import base64
import datetime as dt
from functools import lru_cache
from typing import Iterable, Optional, Sequence

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa
from cryptography.x509.oid import NameOID

from certglance.provisioner import PROVISIONER_OID

NOT_BEFORE = dt.datetime(2025, 1, 1, 0, 0, 0, tzinfo=dt.timezone.utc)
NOT_AFTER = dt.datetime(2026, 1, 1, 12, 30, 0, tzinfo=dt.timezone.utc)


@lru_cache(maxsize=None)
def rsa_key(bits: int = 2048) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=bits)


@lru_cache(maxsize=None)
def ec_key(curve_name: str = "secp256r1") -> ec.EllipticCurvePrivateKey:
    curves = {"secp256r1": ec.SECP256R1(), "secp384r1": ec.SECP384R1(), "secp256k1": ec.SECP256K1()}
    return ec.generate_private_key(curves[curve_name])


def _hash_for(key):
    if isinstance(key, (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey)):
        return None
    return hashes.SHA256()


def name(cn: Optional[str]) -> x509.Name:
    if cn is None:
        return x509.Name([])
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, cn)])


def make_cert(
    key,
    *,
    cn: Optional[str] = "leaf.example.com",
    issuer_cn: Optional[str] = None,
    signer=None,
    ca: Optional[bool] = False,
    serial: int = 1,
    sans: Sequence[x509.GeneralName] = (),
    key_usage: Optional[x509.KeyUsage] = None,
    extensions: Iterable[x509.ExtensionType] = (),
) -> x509.Certificate:
    """Build a certificate for ``key``, self-signed unless ``signer`` is given."""
    signer = signer or key
    builder = (
        x509.CertificateBuilder()
        .subject_name(name(cn))
        .issuer_name(name(issuer_cn if issuer_cn is not None else cn))
        .public_key(key.public_key())
        .serial_number(serial)
        .not_valid_before(NOT_BEFORE)
        .not_valid_after(NOT_AFTER)
    )
    if ca is not None:
        builder = builder.add_extension(x509.BasicConstraints(ca=ca, path_length=None), critical=True)
    if key_usage is not None:
        builder = builder.add_extension(key_usage, critical=True)
    if sans:
        builder = builder.add_extension(x509.SubjectAlternativeName(list(sans)), critical=False)
    for ext in extensions:
        builder = builder.add_extension(ext, critical=False)
    return builder.sign(signer, _hash_for(signer))


def make_csr(
    key,
    *,
    cn: Optional[str] = "leaf.example.com",
    sans: Sequence[x509.GeneralName] = (),
) -> x509.CertificateSigningRequest:
    builder = x509.CertificateSigningRequestBuilder().subject_name(name(cn))
    if sans:
        builder = builder.add_extension(x509.SubjectAlternativeName(list(sans)), critical=False)
    return builder.sign(key, _hash_for(key))


def key_usage(cert_sign: bool) -> x509.KeyUsage:
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=cert_sign,
        crl_sign=cert_sign,
        encipher_only=False,
        decipher_only=False,
    )


def _tlv(tag: int, payload: bytes) -> bytes:
    # longueurs courtes uniquement (< 128 octets)
    assert len(payload) < 128
    return bytes([tag, len(payload)]) + payload


def provisioner_value(credential_id: bytes, prov_name: bytes, name_tag: int = 0x0C, trailing: bytes = b"") -> bytes:
    """DER ``SEQUENCE { OCTET STRING credential_id, <name_tag> prov_name }``."""
    return _tlv(0x30, _tlv(0x04, credential_id) + _tlv(name_tag, prov_name)) + trailing


def provisioner_extension(value: bytes) -> x509.UnrecognizedExtension:
    return x509.UnrecognizedExtension(x509.ObjectIdentifier(PROVISIONER_OID), value)


def pem_of(obj) -> bytes:
    return obj.public_bytes(serialization.Encoding.PEM)


def der_of(obj) -> bytes:
    return obj.public_bytes(serialization.Encoding.DER)


def b64_of(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")

