"""
Unit tests for CommunityService
"""

import pytest

from arena.services.address_registry import InvalidAddressError
from arena.services.community_service import (
    MAX_COMMENT_LENGTH,
    CommentTooLongError,
    CommunityService,
    EmptyCommentError,
    MissingFollowerError,
)
from arena.services.leaderboard_service import WalletNotFoundError

from tests.conftest import ADDRESS_A, ADDRESS_B, VITALIK_MIXED_CASE


@pytest.fixture
async def community(leaderboard, wallet_repo):
    await leaderboard.register(ADDRESS_A)
    return CommunityService(wallet_repo)


class TestFollow:
    """Test suite for follow toggling."""

    @pytest.mark.asyncio
    async def test_follow_then_unfollow(self, community):
        assert community.toggle_follow(ADDRESS_A, ADDRESS_B) == (True, 1)
        assert community.toggle_follow(ADDRESS_A, ADDRESS_B) == (False, 0)

    @pytest.mark.asyncio
    async def test_follower_is_normalized(self, community):
        community.toggle_follow(ADDRESS_A, VITALIK_MIXED_CASE)

        assert community.get_followers(ADDRESS_A) == [VITALIK_MIXED_CASE.lower()]
        # Mismo seguidor con otra capitalización deja de seguir
        assert community.toggle_follow(ADDRESS_A, VITALIK_MIXED_CASE.lower()) == (False, 0)

    @pytest.mark.asyncio
    async def test_missing_follower(self, community):
        with pytest.raises(MissingFollowerError):
            community.toggle_follow(ADDRESS_A, None)

    @pytest.mark.asyncio
    async def test_invalid_follower(self, community):
        with pytest.raises(InvalidAddressError):
            community.toggle_follow(ADDRESS_A, "0xnope")

    @pytest.mark.asyncio
    async def test_unknown_wallet(self, community):
        with pytest.raises(WalletNotFoundError):
            community.toggle_follow(ADDRESS_B, ADDRESS_A)


class TestComments:
    """Test suite for comments."""

    @pytest.mark.asyncio
    async def test_add_comment(self, community, wallet_repo):
        comment = community.add_comment(ADDRESS_A, "  to the moon  ")

        assert comment.text == "to the moon"
        assert comment.author_address == "anonymous"
        assert comment.author_name == "Anonymous"
        assert comment.like_count == 0
        assert wallet_repo.get(ADDRESS_A).comment_count == 1

    @pytest.mark.asyncio
    async def test_comment_ids_are_unique(self, community):
        ids = {community.add_comment(ADDRESS_A, f"comment {i}").id for i in range(5)}

        assert len(ids) == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   "])
    async def test_empty_comment(self, community, text):
        with pytest.raises(EmptyCommentError):
            community.add_comment(ADDRESS_A, text)

    @pytest.mark.asyncio
    async def test_length_limit(self, community):
        community.add_comment(ADDRESS_A, "x" * MAX_COMMENT_LENGTH)

        with pytest.raises(CommentTooLongError):
            community.add_comment(ADDRESS_A, "x" * (MAX_COMMENT_LENGTH + 1))

    @pytest.mark.asyncio
    async def test_too_long_checked_before_lookup(self, community):
        with pytest.raises(CommentTooLongError):
            community.add_comment(ADDRESS_B, "x" * 501)

    @pytest.mark.asyncio
    async def test_unknown_wallet(self, community):
        with pytest.raises(WalletNotFoundError):
            community.add_comment(ADDRESS_B, "hello")

    @pytest.mark.asyncio
    async def test_list_comments_in_order(self, community):
        for i in range(5):
            community.add_comment(ADDRESS_A, f"comment {i}")

        comments, total = community.list_comments(ADDRESS_A, page=2, limit=2)

        assert total == 5
        assert [c.text for c in comments] == ["comment 2", "comment 3"]
