import pytest

from kartquiz.services.rooms import session
from kartquiz.services.rooms.errors import RoomExists, RoomNotFound
from kartquiz.services.rooms.registry import RoomRegistry
from kartquiz.services.rooms.room import LOBBY


def test_create_and_lookup():
    reg = RoomRegistry()
    room = reg.create('ABCD', 'Capitals', 'H1', 'Quiz Master')
    assert room.state == LOBBY
    assert room.players == {} and room.questions == [] and room.scores == {}
    assert reg.get('ABCD') is room
    assert reg.require('ABCD') is room
    assert len(reg) == 1
    assert 'ABCD' in reg


def test_create_on_taken_code_fails_unless_replacing():
    reg = RoomRegistry()
    first = reg.create('ABCD', 'One', 'H1', 'Host')
    with pytest.raises(RoomExists):
        reg.create('ABCD', 'Two', 'H2', 'Host')
    assert reg.get('ABCD') is first

    second = reg.create('ABCD', 'Two', 'H2', 'Host', replace=True)
    assert reg.get('ABCD') is second
    assert second.host.id == 'H2'


def test_missing_room():
    reg = RoomRegistry()
    assert reg.get('NOPE') is None
    with pytest.raises(RoomNotFound):
        reg.require('NOPE')
    assert reg.delete('NOPE') is None


def test_destroy_if_host_removes_only_hosted_rooms():
    reg = RoomRegistry()
    reg.create('AAAA', 'A', 'H1', 'Host')
    reg.create('BBBB', 'B', 'H1', 'Host')
    kept = reg.create('CCCC', 'C', 'H2', 'Host')
    session.add_player(kept, 'H1', 'Also a player here')

    removed = session.destroy_if_host(reg, 'H1')

    assert sorted(room.code for room in removed) == ['AAAA', 'BBBB']
    assert reg.all() == [kept]
    with pytest.raises(RoomNotFound):
        reg.require('AAAA')


def test_reap_idle_rooms():
    reg = RoomRegistry()
    stale = reg.create('OLD1', 'Old', 'H1', 'Host')
    fresh = reg.create('NEW1', 'New', 'H2', 'Host')
    reg.touch(stale, now=1000.0)
    reg.touch(fresh, now=1900.0)

    expired = reg.reap_idle(600, now=2000.0)

    assert expired == [stale]
    assert reg.get('OLD1') is None
    assert reg.get('NEW1') is fresh


def test_reap_disabled_with_zero_ttl():
    reg = RoomRegistry()
    room = reg.create('OLD1', 'Old', 'H1', 'Host')
    reg.touch(room, now=0.0)
    assert reg.reap_idle(0, now=10_000.0) == []
    assert reg.get('OLD1') is room
