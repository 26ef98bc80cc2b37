from __future__ import annotations

import ipaddress
from typing import Iterable, List, NamedTuple, Union, cast
from urllib.parse import urlsplit

from cryptography import x509


IPLike = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address]


class SANLists(NamedTuple):
    dns_names: List[str]
    ip_addresses: List[IPLike]
    email_addresses: List[str]
    uris: List[str]


def _ip_text(ip: IPLike) -> str:
    addr = ipaddress.ip_address(ip)
    # ::ffff:a.b.c.d s'affiche en IPv4
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        return str(addr.ipv4_mapped)
    return str(addr)


def _uri_text(uri: str) -> str:
    try:
        return urlsplit(uri).geturl()
    except ValueError:
        return uri


def collect_sans(
    common_name: str,
    dns_names: Iterable[str],
    ip_addresses: Iterable[IPLike],
    email_addresses: Iterable[str],
    uris: Iterable[str],
) -> List[str]:
    """
    Flatten the typed alternative names into display strings.

    Order is DNS, IP, email, URI; inside a category the certificate order is
    kept. Entries equal to the common name are dropped, nothing else is
    de-duplicated.
    """
    out: List[str] = []
    candidates = (
        list(dns_names),
        [_ip_text(ip) for ip in ip_addresses],
        list(email_addresses),
        [_uri_text(u) for u in uris],
    )
    for group in candidates:
        for s in group:
            if s != common_name:
                out.append(s)
    return out


def san_lists(obj: Union[x509.Certificate, x509.CertificateSigningRequest]) -> SANLists:
    try:
        ext = obj.extensions.get_extension_for_oid(x509.oid.ExtensionOID.SUBJECT_ALTERNATIVE_NAME)
        san = cast(x509.SubjectAlternativeName, ext.value)
    except x509.ExtensionNotFound:
        return SANLists([], [], [], [])
    ips: List[IPLike] = [
        ip for ip in san.get_values_for_type(x509.IPAddress)
        if isinstance(ip, (ipaddress.IPv4Address, ipaddress.IPv6Address))
    ]
    return SANLists(
        dns_names=san.get_values_for_type(x509.DNSName),
        ip_addresses=ips,
        email_addresses=san.get_values_for_type(x509.RFC822Name),
        uris=san.get_values_for_type(x509.UniformResourceIdentifier),
    )
