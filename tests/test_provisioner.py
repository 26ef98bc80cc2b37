import logging

from certglance.provisioner import PROVISIONER_OID, Provisioner, decode_provisioner, extension_pairs
from _util import ec_key, make_cert, provisioner_extension, provisioner_value

OTHER_OID = "1.2.3.4.5"


def test_absent_extension():
    assert decode_provisioner([]) is None
    assert decode_provisioner([(OTHER_OID, b"\x05\x00")]) is None


def test_valid_record_abbreviates_id():
    raw = provisioner_value(b"4vn46fbZT68Uxfs8rMoy1mmVx1zdSrBOhSXo", b"admin@example.com")
    assert decode_provisioner([(PROVISIONER_OID, raw)]) == Provisioner(id="4vn4...hSXo", name="admin@example.com")


def test_short_and_empty_id_kept():
    assert decode_provisioner([(PROVISIONER_OID, provisioner_value(b"abc", b"jwk"))]) == Provisioner("abc", "jwk")
    assert decode_provisioner([(PROVISIONER_OID, provisioner_value(b"", b"acme"))]) == Provisioner("", "acme")


def test_other_string_types_for_name():
    printable = provisioner_value(b"id", b"my provisioner", name_tag=0x13)
    octets = provisioner_value(b"id", b"raw-name", name_tag=0x04)
    assert decode_provisioner([(PROVISIONER_OID, printable)]).name == "my provisioner"
    assert decode_provisioner([(PROVISIONER_OID, octets)]).name == "raw-name"


def test_trailing_bytes_means_absent(caplog):
    raw = provisioner_value(b"id", b"name", trailing=b"\x00")
    with caplog.at_level(logging.DEBUG, logger="certglance.provisioner"):
        assert decode_provisioner([(PROVISIONER_OID, raw)]) is None
    assert any("trailing" in r.getMessage() for r in caplog.records)


def test_malformed_values_mean_absent():
    for raw in (b"", b"\x30", b"\x04\x02id", b"\x30\x04\x04\x02id", b"\x30\x06\x02\x01\x01\x0c\x01x"):
        assert decode_provisioner([(PROVISIONER_OID, raw)]) is None


def test_first_match_wins():
    good = provisioner_value(b"id", b"first")
    other = provisioner_value(b"id", b"second")
    assert decode_provisioner([(PROVISIONER_OID, good), (PROVISIONER_OID, other)]).name == "first"
    # un premier échec ne laisse pas la place au suivant
    assert decode_provisioner([(PROVISIONER_OID, b"junk"), (PROVISIONER_OID, good)]) is None


def test_extension_pairs_from_certificate():
    raw = provisioner_value(b"credential-0123456789", b"ops")
    cert = make_cert(ec_key(), extensions=[provisioner_extension(raw)])
    pairs = extension_pairs(cert)
    assert pairs == [(PROVISIONER_OID, raw)]
    assert decode_provisioner(pairs) == Provisioner(id="cred...6789", name="ops")


def test_extension_pairs_skip_recognized_extensions():
    assert extension_pairs(make_cert(ec_key(), ca=True)) == []
