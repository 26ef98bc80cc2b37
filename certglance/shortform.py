from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from cryptography import x509

from .classify import CertificateType, classify_certificate
from .common import abbreviated, common_name, rfc3339
from .provisioner import Provisioner, decode_provisioner, extension_pairs
from .pubkey import describe
from .sans import collect_sans, san_lists

_LABEL = "  Subject:     "
_INDENT = " " * len(_LABEL)


@dataclass(frozen=True)
class CertificateSummary:
    type: CertificateType
    public_key_algorithm: str
    serial: str
    subject: str
    issuer: str
    sans: Tuple[str, ...]
    provisioner: Optional[Provisioner]
    not_before: dt.datetime
    not_after: dt.datetime

    def as_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "public_key_algorithm": self.public_key_algorithm,
            "serial": self.serial,
            "subject": self.subject,
            "issuer": self.issuer,
            "sans": list(self.sans),
            "provisioner": self.provisioner.as_dict() if self.provisioner else None,
            "not_before": rfc3339(self.not_before),
            "not_after": rfc3339(self.not_after),
        }

    def __str__(self) -> str:
        return render_certificate(self)


@dataclass(frozen=True)
class RequestSummary:
    public_key_algorithm: str
    subject: str
    sans: Tuple[str, ...]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "public_key_algorithm": self.public_key_algorithm,
            "subject": self.subject,
            "sans": list(self.sans),
        }

    def __str__(self) -> str:
        return render_request(self)


def _sans(obj: Union[x509.Certificate, x509.CertificateSigningRequest], cn: str) -> Tuple[str, ...]:
    lists = san_lists(obj)
    return tuple(collect_sans(cn, lists.dns_names, lists.ip_addresses, lists.email_addresses, lists.uris))


def summarize_certificate(cert: x509.Certificate) -> CertificateSummary:
    cn = common_name(cert.subject)
    # compat cryptography>=42 (propriétés *_utc)
    nb = getattr(cert, "not_valid_before_utc", None) or cert.not_valid_before.replace(tzinfo=dt.timezone.utc)
    na = getattr(cert, "not_valid_after_utc", None) or cert.not_valid_after.replace(tzinfo=dt.timezone.utc)
    return CertificateSummary(
        type=classify_certificate(cert),
        public_key_algorithm=describe(cert),
        serial=abbreviated(str(cert.serial_number)),
        subject=cn,
        issuer=common_name(cert.issuer),
        sans=_sans(cert, cn),
        provisioner=decode_provisioner(extension_pairs(cert)),
        not_before=nb,
        not_after=na,
    )


def summarize_request(csr: x509.CertificateSigningRequest) -> RequestSummary:
    cn = common_name(csr.subject)
    return RequestSummary(
        public_key_algorithm=describe(csr),
        subject=cn,
        sans=_sans(csr, cn),
    )


def summarize(
    obj: Union[x509.Certificate, x509.CertificateSigningRequest],
) -> Union[CertificateSummary, RequestSummary]:
    if isinstance(obj, x509.Certificate):
        return summarize_certificate(obj)
    if isinstance(obj, x509.CertificateSigningRequest):
        return summarize_request(obj)
    raise TypeError(f"expected a certificate or CSR, got {obj.__class__.__name__}")


def _subject_block(subject: str, sans: Sequence[str]) -> List[str]:
    names = ([subject] if subject else []) + list(sans)
    if not names:
        return ["  Subject: "]
    return [_LABEL + names[0]] + [_INDENT + s for s in names[1:]]


def render_certificate(c: CertificateSummary) -> str:
    lines = [f"X.509v3 {c.type.value} Certificate ({c.public_key_algorithm}) [Serial: {c.serial}]"]
    lines.extend(_subject_block(c.subject, c.sans))
    lines.append(f"  Issuer:      {c.issuer}")
    if c.provisioner is not None:
        if c.provisioner.id:
            lines.append(f"  Provisioner: {c.provisioner.name} [ID: {c.provisioner.id}]")
        else:
            lines.append(f"  Provisioner: {c.provisioner.name}")
    lines.append(f"  Valid from:  {rfc3339(c.not_before)}")
    lines.append(f"          to:  {rfc3339(c.not_after)}")
    return "".join(line + "\n" for line in lines)


def render_request(r: RequestSummary) -> str:
    lines = [f"X.509v3 Certificate Signing Request ({r.public_key_algorithm})"]
    lines.extend(_subject_block(r.subject, r.sans))
    return "".join(line + "\n" for line in lines)


def short_text(obj: Union[x509.Certificate, x509.CertificateSigningRequest]) -> str:
    return str(summarize(obj))
