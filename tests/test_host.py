"""
Tests for player identity resolution
"""

import random

from minisweeper.host import resolve_player


def test_player_from_host_context():
    player = resolve_player({'fid': 1481, 'username': 'dora'})

    assert player.user_fid == 1481
    assert player.username == 'dora'


def test_missing_username_falls_back_to_fid():
    assert resolve_player({'fid': 7}).username == 'User 7'


def test_demo_identity_outside_host():
    player = resolve_player(None, rng=random.Random(0))

    assert player.username == 'Demo User'
    assert 1 <= player.user_fid < 10000


def test_non_integer_fid_is_demo():
    assert resolve_player({'fid': '12', 'username': 'x'}).username == 'Demo User'
