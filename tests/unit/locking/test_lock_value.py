"""LockValue: stored format, parsing, logical expiry."""

from kvlock.locking.lock_value import SEPARATOR, LockValue, random_owner


def test_build_encodes_expiry_owner_and_ticks():
    value = LockValue.build("user10001", ttl=3, now=1675238190.1234)
    assert value.encode() == "1675238193__lock__user10001_1234"


def test_build_pads_ticks():
    value = LockValue.build("u", ttl=5, now=1675238190.05)
    assert value.ticks == "0500"


def test_parse_roundtrip_keeps_underscored_owner():
    raw = f"1675238193{SEPARATOR}team_a_user_0042"
    value = LockValue.parse(raw)
    assert value == LockValue(expires_at=1675238193, owner="team_a_user", ticks="0042")
    assert value.encode() == raw


def test_parse_without_ticks():
    value = LockValue.parse("1675238193__lock__user")
    assert value.expires_at == 1675238193
    assert value.owner == "user"


def test_parse_rejects_malformed():
    assert LockValue.parse("garbage") is None
    assert LockValue.parse("soon__lock__user_1") is None
    assert LockValue.parse("") is None


def test_is_expired_uses_whole_seconds():
    value = LockValue(expires_at=100, owner="u")
    assert value.is_expired(100.9) is False
    assert value.is_expired(101.0) is True


def test_random_owner_is_positive_int():
    owner = random_owner()
    assert owner.isdigit()
    assert 0 < int(owner) < 2**31


def test_build_truncates_near_second_boundary():
    value = LockValue.build("u", ttl=5, now=1675238190.99996)
    assert value.expires_at == 1675238195
    assert value.ticks == "9999"
    assert value.encode() == "1675238195__lock__u_9999"
