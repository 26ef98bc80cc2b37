from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from cryptography import x509
from pyasn1.codec.der import decoder as der_decoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import char, namedtype, univ

from .common import abbreviated

log = logging.getLogger(__name__)

# step-ca provisioner extension
PROVISIONER_OID = "1.3.6.1.4.1.37476.9000.64.1"


class _ProvisionerName(univ.Choice):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("utf8String", char.UTF8String()),
        namedtype.NamedType("printableString", char.PrintableString()),
        namedtype.NamedType("ia5String", char.IA5String()),
        namedtype.NamedType("octetString", univ.OctetString()),
    )


class _ProvisionerRecord(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("credentialID", univ.OctetString()),
        namedtype.NamedType("name", _ProvisionerName()),
    )


@dataclass(frozen=True)
class Provisioner:
    id: str
    name: str

    def as_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


def _text(component) -> str:
    # UTF8String & co. héritent d'OctetString : tester les chaînes d'abord
    if isinstance(component, char.AbstractCharacterString):
        return str(component)
    return component.asOctets().decode("utf-8", "replace")


def _decode(raw: bytes) -> Optional[Provisioner]:
    if not raw:
        return None
    try:
        record, rest = der_decoder.decode(raw, asn1Spec=_ProvisionerRecord())
        if rest:
            log.debug("provisioner extension ignored", extra={"reason": f"{len(rest)} trailing bytes"})
            return None
        credential_id = record["credentialID"].asOctets().decode("utf-8", "replace")
        name = _text(record["name"].getComponent())
    except PyAsn1Error as e:
        log.debug("provisioner extension ignored", extra={"reason": e.__class__.__name__})
        return None
    return Provisioner(id=abbreviated(credential_id), name=name)


def decode_provisioner(extensions: Iterable[Tuple[str, bytes]]) -> Optional[Provisioner]:
    """
    Look for the provisioner extension among ``(dotted_oid, raw_value)`` pairs.

    Only the first matching extension is considered. A value that is not a
    clean ``SEQUENCE { OCTET STRING, name }`` yields ``None``.
    """
    for oid, raw in extensions:
        if oid == PROVISIONER_OID:
            return _decode(raw)
    return None


def extension_pairs(obj: Union[x509.Certificate, x509.CertificateSigningRequest]) -> List[Tuple[str, bytes]]:
    # cryptography ne connaît pas l'OID du provisioner : seules les
    # extensions non reconnues portent une valeur brute utile ici
    pairs: List[Tuple[str, bytes]] = []
    for ext in obj.extensions:
        if isinstance(ext.value, x509.UnrecognizedExtension):
            pairs.append((ext.oid.dotted_string, ext.value.value))
    return pairs
