import random
import string

import pytest

from app.modules.groups.service import (
    GROUP_ID_ALPHABET, GroupIdExhaustedError, MAX_GROUP_ID_ATTEMPTS, generate_group_id,
)


class SequenceRandom:
    """Stands in for the random module, returning characters from a fixed string."""

    def __init__(self, chars: str):
        self.chars = iter(chars)

    def choice(self, seq):
        return next(self.chars)


def test_generated_ids_are_six_alphanumeric_characters():
    for _ in range(200):
        group_id = generate_group_id(lambda _: False)
        assert len(group_id) == 6
        assert set(group_id) <= set(string.ascii_uppercase + string.digits)


def test_alphabet_has_36_symbols():
    assert len(set(GROUP_ID_ALPHABET)) == 36


def test_generate_group_id_redraws_whole_code_on_collision():
    rng = SequenceRandom("AAAAAA" + "BBBBBB")
    assert generate_group_id(lambda gid: gid == "AAAAAA", rng=rng) == "BBBBBB"


def test_generate_group_id_gives_up_after_max_attempts():
    calls = []

    def always_taken(group_id):
        calls.append(group_id)
        return True

    with pytest.raises(GroupIdExhaustedError):
        generate_group_id(always_taken, rng=random.Random(1))
    assert len(calls) == MAX_GROUP_ID_ATTEMPTS


def test_create_group_never_reuses_live_id(group_service):
    ids = {group_service.create_group("g").id for _ in range(300)}
    assert len(ids) == 300


def test_create_group_defaults(group_service, clock):
    group = group_service.create_group()
    assert group.name == f"Group {group.id}"
    assert group.refresh_interval == 30
    assert group.expires_at is None
    assert group.created_at == clock.current
    assert group_service.get_group(group.id) == group
    assert group_service.group_exists(group.id)


def test_create_group_with_expiry(group_service, clock):
    group = group_service.create_group("Trip", refresh_interval=10, expiry_duration_hours=2)
    assert group.name == "Trip"
    assert group.refresh_interval == 10
    assert group.expires_at == clock.advance(hours=2)


def test_zero_expiry_means_never_expires(group_service):
    assert group_service.create_group("g", expiry_duration_hours=0).expires_at is None


def test_get_unknown_group(group_service):
    assert group_service.get_group("NOPE00") is None
    assert not group_service.group_exists("NOPE00")


def test_add_member_to_unknown_group_creates_nothing(group_service, store):
    assert group_service.add_member("NOPE00", "m1", "Alice") is None
    assert group_service.get_member("m1") is None
    assert store.members == {}


def test_add_member(group_service, clock):
    group = group_service.create_group("g")
    member = group_service.add_member(group.id, "m1", "Alice")
    assert member.group_id == group.id
    assert member.display_name == "Alice"
    assert member.created_at == clock.current
    assert group_service.get_member("m1") == member


def test_add_member_overwrites_existing_id(group_service):
    first = group_service.create_group("a")
    second = group_service.create_group("b")
    group_service.add_member(first.id, "m1", "Alice")
    group_service.add_member(second.id, "m1", "Alicia")

    assert group_service.get_member("m1").group_id == second.id
    assert group_service.get_group_members(first.id) == []
    assert [m.display_name for m in group_service.get_group_members(second.id)] == ["Alicia"]


def test_get_group_members_in_join_order(group_service):
    group = group_service.create_group("g")
    other = group_service.create_group("h")
    group_service.add_member(group.id, "m1", "Alice")
    group_service.add_member(other.id, "m2", "Bob")
    group_service.add_member(group.id, "m3", "Carol")
    assert [m.id for m in group_service.get_group_members(group.id)] == ["m1", "m3"]


def test_delete_unknown_group_returns_false(group_service):
    assert group_service.delete_group("NOPE00") is False


def test_delete_group_cascades(group_service, location_service, store):
    group = group_service.create_group("g")
    other = group_service.create_group("h")
    group_service.add_member(group.id, "m1", "Alice")
    group_service.add_member(group.id, "m2", "Bob")
    group_service.add_member(other.id, "m3", "Carol")
    location_service.update_location("m1", group.id, 1.0, 2.0)
    location_service.update_location("m2", group.id, 3.0, 4.0)
    location_service.update_location("m3", other.id, 5.0, 6.0)

    assert group_service.delete_group(group.id) is True

    assert not group_service.group_exists(group.id)
    assert group_service.get_group_members(group.id) == []
    assert location_service.get_group_locations(group.id) == []
    assert set(store.members) == {"m3"}
    assert set(store.locations) == {"m3"}


def test_delete_group_drops_locations_of_members_that_moved(group_service, location_service):
    group = group_service.create_group("g")
    other = group_service.create_group("h")
    group_service.add_member(group.id, "m1", "Alice")
    location_service.update_location("m1", group.id, 1.0, 2.0)
    group_service.add_member(other.id, "m1", "Alice")

    group_service.delete_group(group.id)

    assert location_service.get_group_locations(group.id) == []
    assert group_service.get_member("m1").group_id == other.id


def test_cleanup_expired_groups_keeps_groups_without_expiry(group_service, clock):
    group = group_service.create_group("forever")
    clock.advance(days=3650)
    assert group_service.cleanup_expired_groups() == 0
    assert group_service.group_exists(group.id)


def test_cleanup_expired_groups_removes_only_after_expiry(group_service, location_service, clock):
    group = group_service.create_group("short", expiry_duration_hours=1)
    group_service.add_member(group.id, "m1", "Alice")
    location_service.update_location("m1", group.id, 1.0, 2.0)

    clock.advance(minutes=59)
    assert group_service.cleanup_expired_groups() == 0
    clock.advance(minutes=1)
    assert group_service.cleanup_expired_groups() == 0
    assert group_service.group_exists(group.id)

    clock.advance(seconds=1)
    assert group_service.cleanup_expired_groups() == 1
    assert not group_service.group_exists(group.id)
    assert group_service.get_member("m1") is None
    assert location_service.get_group_locations(group.id) == []


def test_cleanup_expired_groups_counts_each_group(group_service, clock):
    group_service.create_group("a", expiry_duration_hours=1)
    group_service.create_group("b", expiry_duration_hours=2)
    keep = group_service.create_group("c", expiry_duration_hours=5)
    clock.advance(hours=3)
    assert group_service.cleanup_expired_groups() == 2
    assert list(group_service.store.groups) == [keep.id]
