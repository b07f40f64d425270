"""
CommunityService - followers and comments on tracked wallets.

Validation of the request happens before the wallet lookup, so a bad
comment is rejected the same way whether or not the wallet exists.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from arena.models.wallet import Comment
from arena.repositories.wallet_repository import WalletRepository
from arena.services.address_registry import normalize_address
from arena.services.leaderboard_service import WalletNotFoundError


MAX_COMMENT_LENGTH = 500


class CommunityServiceError(Exception):
    """Base exception for community service errors."""
    pass


class MissingFollowerError(CommunityServiceError):
    """Raised when a follow request has no follower address."""
    pass


class EmptyCommentError(CommunityServiceError):
    """Raised when a comment is empty after trimming."""
    pass


class CommentTooLongError(CommunityServiceError):
    """Raised when a comment exceeds MAX_COMMENT_LENGTH characters."""
    pass


class CommunityService:
    def __init__(self, repository: WalletRepository):
        self.repository = repository

    def _require_wallet(self, address: str) -> str:
        try:
            address = normalize_address(address)
        except ValueError:
            raise WalletNotFoundError(f"Wallet {address} not found") from None

        if not self.repository.exists(address):
            raise WalletNotFoundError(f"Wallet {address} not found")
        return address

    def toggle_follow(self, address: str, follower_address: Optional[str]) -> tuple[bool, int]:
        """
        Follow the wallet if not followed yet, unfollow otherwise.

        Returns (is_following, followers_count).
        """
        if not follower_address:
            raise MissingFollowerError("Follower address is required")
        follower = normalize_address(follower_address)

        address = self._require_wallet(address)
        return self.repository.toggle_follower(address, follower)

    def get_followers(self, address: str) -> list[str]:
        address = self._require_wallet(address)
        return sorted(self.repository.get(address).followers)

    def add_comment(
        self,
        address: str,
        text: Optional[str],
        author_address: Optional[str] = None,
        author_name: Optional[str] = None
    ) -> Comment:
        """Attach a comment to a wallet. Max 500 characters."""
        if not text or not text.strip():
            raise EmptyCommentError("Comment cannot be empty")
        if len(text) > MAX_COMMENT_LENGTH:
            raise CommentTooLongError(f"Comment too long (max {MAX_COMMENT_LENGTH} characters)")

        address = self._require_wallet(address)

        comment = Comment(
            id=uuid.uuid4().hex,
            author_address=author_address or "anonymous",
            author_name=author_name or "Anonymous",
            text=text.strip(),
            created_at=datetime.now(timezone.utc),
        )
        return self.repository.add_comment(address, comment)

    def list_comments(self, address: str, page: int = 1, limit: int = 20) -> tuple[list[Comment], int]:
        """Comments in insertion order. Returns (page of comments, total)."""
        address = self._require_wallet(address)

        page = max(1, page)
        offset = (page - 1) * limit
        return (
            self.repository.get_comments(address, offset, limit),
            self.repository.count_comments(address),
        )
