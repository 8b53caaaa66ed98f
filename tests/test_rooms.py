def test_join_creates_room_lazily(registry):
    assert "X" not in registry
    assert registry.join("X", "A") is True
    assert "X" in registry
    assert registry.members_of("X") == {"A"}


def test_repeated_join_keeps_size(registry):
    registry.join("X", "A")
    assert registry.join("X", "A") is False
    assert len(registry.members_of("X")) == 1


def test_any_string_is_a_room_id(registry):
    for room_id in ["", "with spaces", "ünïcode", "a/b?c"]:
        registry.join(room_id, "A")
        assert "A" in registry.members_of(room_id)


def test_leave_drops_empty_room(registry):
    registry.join("X", "A")
    registry.join("X", "B")
    assert registry.leave("X", "A") is True
    assert registry.members_of("X") == {"B"}
    registry.leave("X", "B")
    assert "X" not in registry
    assert registry.rooms() == []


def test_leave_unknown_is_noop(registry):
    assert registry.leave("nope", "A") is False
    registry.join("X", "B")
    assert registry.leave("X", "A") is False
    assert registry.members_of("X") == {"B"}


def test_leave_all_removes_from_every_room(registry):
    registry.join("X", "A")
    registry.join("Y", "A")
    registry.join("Y", "B")

    assert sorted(registry.leave_all("A")) == ["X", "Y"]
    assert registry.rooms() == ["Y"]
    assert registry.members_of("Y") == {"B"}
    assert registry.rooms_of("A") == []


def test_leave_all_is_idempotent(registry):
    registry.join("X", "A")
    registry.leave_all("A")
    assert registry.leave_all("A") == []
    assert len(registry) == 0


def test_members_of_missing_room_is_empty(registry):
    assert registry.members_of("ghost") == frozenset()


def test_members_of_is_a_snapshot(registry):
    registry.join("X", "A")
    members = registry.members_of("X")
    registry.join("X", "B")
    assert members == {"A"}


def test_membership_in_rooms_is_independent(registry):
    registry.join("X", "A")
    registry.join("Y", "A")
    registry.leave("X", "A")
    assert registry.rooms_of("A") == ["Y"]
    assert registry.snapshot() == {"Y": ["A"]}
