"""Tests for membership and host authority."""

import pytest

from lobby import Membership, ErrorCode


@pytest.fixture
def membership():
    members = Membership('lobby-1', 'alice', 'Alice')
    members.join('bob', 'Bob')
    members.join('carol', 'Carol')
    return members


def hosts(membership):
    return [cid for cid, m in membership.members.items() if m.is_host]


def events(result):
    return [n.event for n in result.notifications]


class TestJoin:
    """Tests for joining."""

    def test_creator_is_sole_host(self):
        members = Membership('lobby-1', 'alice', 'Alice')
        assert members.host == 'alice'
        assert members.host_name == 'Alice'
        assert hosts(members) == ['alice']

    def test_join_adds_non_host_member(self, membership):
        assert [m.display_name for m in membership.members.values()] == ['Alice', 'Bob', 'Carol']
        assert hosts(membership) == ['alice']

    def test_join_notifies_room(self):
        members = Membership('lobby-1', 'alice', 'Alice')
        result = members.join('bob', 'Bob')

        assert result.success
        user_joined, user_list = result.notifications
        assert user_joined.event == 'user_joined'
        assert user_joined.payload == {'name': 'Bob'}
        assert user_joined.skip_sid == 'bob'
        assert user_list.event == 'user_list'
        assert user_list.skip_sid is None
        assert user_list.payload == [
            {'socketId': 'alice', 'name': 'Alice', 'isHost': True},
            {'socketId': 'bob', 'name': 'Bob', 'isHost': False},
        ]

    def test_rejoin_keeps_role_and_position(self, membership):
        membership.join('alice', 'Alice2')

        assert list(membership.members) == ['alice', 'bob', 'carol']
        assert membership.host == 'alice'
        assert membership.host_name == 'Alice2'
        assert hosts(membership) == ['alice']

    def test_banned_connection_cannot_join(self, membership):
        membership.ban('alice', 'bob')
        result = membership.join('bob', 'Bob')

        assert result.error_code == ErrorCode.BANNED
        assert 'bob' not in membership


class TestLeave:
    """Tests for leaving and host promotion."""

    def test_non_host_leaves(self, membership):
        result = membership.leave('carol')

        assert result.success
        assert events(result) == ['user_left', 'user_list']
        assert result.removed_connections == ['carol']
        assert membership.host == 'alice'

    def test_host_leaves_earliest_joiner_promoted(self, membership):
        result = membership.leave('alice')

        assert len(membership) == 2
        assert membership.host == 'bob'
        assert membership.host_name == 'Bob'
        assert hosts(membership) == ['bob']
        assert events(result) == ['user_left', 'user_list', 'host_changed']
        assert result.notifications[-1].payload == {'newHost': 'Bob'}

    def test_user_list_after_host_leave_shows_new_host(self, membership):
        result = membership.leave('alice')
        user_list = result.notifications[1].payload
        assert [u['isHost'] for u in user_list] == [True, False]

    def test_last_member_leaves(self):
        members = Membership('lobby-1', 'alice', 'Alice')
        result = members.leave('alice')

        assert result.success
        assert len(members) == 0
        assert members.host is None
        assert events(result) == ['user_left']

    def test_leave_by_non_member_is_noop(self, membership):
        result = membership.leave('zed')
        assert result.noop
        assert len(membership) == 3


class TestKickAndBan:
    """Tests for kick and ban."""

    def test_host_kicks_member(self, membership):
        result = membership.kick('alice', 'bob')

        assert result.success
        assert 'bob' not in membership
        assert 'bob' not in membership.banned
        kicked = result.notifications[0]
        assert kicked.event == 'kicked'
        assert kicked.to == 'bob'
        assert kicked.payload == {'lobbyId': 'lobby-1'}
        assert events(result) == ['kicked', 'user_left', 'user_list']
        assert result.removed_connections == ['bob']

    def test_kicked_member_can_rejoin(self, membership):
        membership.kick('alice', 'bob')
        assert membership.join('bob', 'Bob').success

    def test_host_bans_member(self, membership):
        result = membership.ban('alice', 'bob')

        assert result.success
        assert 'bob' in membership.banned
        assert result.notifications[0].event == 'banned'
        assert result.notifications[0].to == 'bob'

    @pytest.mark.parametrize('action', ['kick', 'ban'])
    def test_non_host_is_unauthorized(self, membership, action):
        before = (list(membership.members), set(membership.banned), membership.host)
        result = getattr(membership, action)('bob', 'carol')

        assert result.error_code == ErrorCode.UNAUTHORIZED
        assert result.error.message == f"Only the host can {action} users"
        assert result.notifications == []
        assert (list(membership.members), set(membership.banned), membership.host) == before

    @pytest.mark.parametrize('action', ['kick', 'ban'])
    @pytest.mark.parametrize('target', ['alice', 'zed', None])
    def test_invalid_target(self, membership, action, target):
        result = getattr(membership, action)('alice', target)

        assert result.error_code == ErrorCode.INVALID_TARGET
        assert len(membership) == 3
        assert membership.banned == set()


class TestTransferHost:
    """Tests for host transfer."""

    def test_transfer(self, membership):
        result = membership.transfer_host('alice', 'carol')

        assert result.success
        assert membership.host == 'carol'
        assert membership.host_name == 'Carol'
        assert hosts(membership) == ['carol']
        assert events(result) == ['host_changed', 'user_list']
        assert result.notifications[0].payload == {'newHost': 'Carol'}

    def test_old_host_loses_authority(self, membership):
        membership.transfer_host('alice', 'carol')
        result = membership.kick('alice', 'bob')
        assert result.error_code == ErrorCode.UNAUTHORIZED

    def test_non_host_cannot_transfer(self, membership):
        result = membership.transfer_host('bob', 'bob')
        assert result.error_code == ErrorCode.UNAUTHORIZED
        assert membership.host == 'alice'

    @pytest.mark.parametrize('target', ['alice', 'zed'])
    def test_invalid_transfer_target(self, membership, target):
        result = membership.transfer_host('alice', target)
        assert result.error_code == ErrorCode.INVALID_TARGET
        assert membership.host == 'alice'

    def test_ban_survives_host_transfer(self, membership):
        membership.ban('alice', 'bob')
        membership.transfer_host('alice', 'carol')

        assert membership.join('bob', 'Bob').error_code == ErrorCode.BANNED
