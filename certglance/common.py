
import datetime as dt
from typing import Optional

from cryptography import x509
from cryptography.x509.oid import NameOID


def abbreviated(s: str) -> str:
    if len(s) <= 8:
        return s
    return s[:4] + "..." + s[-4:]


def rfc3339(d: dt.datetime) -> str:
    # cryptography peut renvoyer des datetimes naïves (UTC)
    if d.tzinfo is None:
        d = d.replace(tzinfo=dt.timezone.utc)
    d = d.astimezone(dt.timezone.utc).replace(microsecond=0)
    return d.isoformat().replace("+00:00", "Z")


def common_name(name: Optional[x509.Name]) -> str:
    if name is None:
        return ""
    attrs = name.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attrs:
        return ""
    # plusieurs CN : le dernier l'emporte
    value = attrs[-1].value
    return value.decode("utf-8", "replace") if isinstance(value, bytes) else value
