import pytest
from eth_utils import is_checksum_address, to_checksum_address

from scanlogs.domain.errors import MalformedResponse
from scanlogs.domain.normalize import normalize_log, normalize_logs

from conftest import ADDRESS, make_record


def test_normalize_fields():
    rec = make_record(0x1a, block=0x1a)
    ev = normalize_log(rec)
    assert ev.address == to_checksum_address(ADDRESS)
    assert is_checksum_address(ev.address)
    assert ev.block_number == 26
    assert ev.log_index == 26
    assert ev.transaction_index == 2
    assert ev.timestamp == 0x65a0f2c0
    assert ev.data == rec["data"]
    assert ev.transaction_hash == rec["transactionHash"]


def test_empty_topics_dropped_in_order():
    ev = normalize_log(make_record(topics=["0xabc", "", "0xdef"]))
    assert ev.topics == ("0xabc", "0xdef")


def test_bare_0x_means_zero():
    rec = make_record()
    rec["logIndex"] = "0x"
    rec["transactionIndex"] = "0x"
    ev = normalize_log(rec)
    assert ev.log_index == 0
    assert ev.transaction_index == 0


@pytest.mark.parametrize("field,value", [("blockNumber", "zz"), ("timeStamp", None), ("logIndex", "")])
def test_bad_hex_is_fatal(field, value):
    rec = make_record()
    rec[field] = value
    with pytest.raises(MalformedResponse):
        normalize_log(rec)


def test_missing_field_is_fatal():
    rec = make_record()
    del rec["transactionHash"]
    with pytest.raises(MalformedResponse):
        normalize_log(rec)


def test_one_bad_record_aborts_page():
    bad = make_record(1)
    bad["address"] = "0xnot-an-address"
    with pytest.raises(MalformedResponse):
        normalize_logs([make_record(0), bad, make_record(2)])
