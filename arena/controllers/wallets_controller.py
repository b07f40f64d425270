"""
Controlador de wallets - Alta de wallets, detalle y comunidad (follows y comentarios)
"""

import math
from typing import Optional

from fastapi import APIRouter, Query, status
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from arena.controllers.leaderboard_controller import PaginationResponse
from arena.core.dependencies import Community, Leaderboard
from arena.core.errors import api_error
from arena.models.wallet import Comment, WalletSummary
from arena.services.address_registry import InvalidAddressError
from arena.services.community_service import (
    CommentTooLongError,
    EmptyCommentError,
    MissingFollowerError,
)
from arena.services.leaderboard_service import DuplicateAddressError, WalletNotFoundError


router = APIRouter(prefix="/wallets", tags=["wallets"])


class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class WalletCreateRequest(_CamelModel):
    """Body para añadir una wallet a la batalla."""
    address: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class FollowRequest(_CamelModel):
    follower_address: Optional[str] = None


class FollowResponse(_CamelModel):
    is_following: bool
    followers_count: int


class CommentCreateRequest(_CamelModel):
    comment: Optional[str] = None
    author_address: Optional[str] = None
    author_name: Optional[str] = None


class CommentsResponse(_CamelModel):
    comments: list[Comment]
    pagination: PaginationResponse


class WalletAnalyticsResponse(_CamelModel):
    total_trades: int
    win_rate: float
    risk_score: float
    sharpe_ratio: float
    max_drawdown: float
    avg_trade_size: float
    is_authoritative: bool


class WalletDetailResponse(WalletSummary):
    """Detalle de la wallet: resumen + seguidores, comentarios recientes y métricas."""
    followers: list[str]
    comments: list[Comment]
    analytics: WalletAnalyticsResponse


def _not_found() -> Exception:
    return api_error(status.HTTP_404_NOT_FOUND, "WALLET_NOT_FOUND", "Wallet not found")


@router.post("", response_model=WalletSummary, status_code=status.HTTP_201_CREATED)
async def add_wallet(request: WalletCreateRequest, leaderboard: Leaderboard):
    """
    Añadir una wallet al leaderboard.

    Se obtiene su portfolio (Zerion o datos sintéticos) y se calcula el score inicial.
    """
    if not request.address:
        raise api_error(status.HTTP_400_BAD_REQUEST, "MISSING_ADDRESS", "Wallet address is required")

    try:
        wallet = await leaderboard.register(request.address, request.name, request.description)
    except InvalidAddressError:
        raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_ADDRESS", "Invalid Ethereum address format")
    except DuplicateAddressError:
        raise api_error(status.HTTP_409_CONFLICT, "WALLET_EXISTS", "Wallet already in battle")

    return WalletSummary.from_wallet(wallet)


@router.get("/{address}", response_model=WalletDetailResponse)
async def get_wallet(address: str, leaderboard: Leaderboard, community: Community):
    """
    Obtener el detalle de una wallet.
    """
    try:
        wallet = leaderboard.get_wallet(address)
        comments, _ = community.list_comments(wallet.address, page=1, limit=20)
    except WalletNotFoundError:
        raise _not_found()

    snapshot = wallet.snapshot
    summary = WalletSummary.from_wallet(wallet)

    return WalletDetailResponse(
        **summary.model_dump(),
        followers=sorted(wallet.followers),
        comments=comments,
        analytics=WalletAnalyticsResponse(
            total_trades=snapshot.transaction_count,
            win_rate=snapshot.win_rate,
            risk_score=snapshot.risk_score,
            sharpe_ratio=snapshot.sharpe_ratio,
            max_drawdown=snapshot.max_drawdown,
            avg_trade_size=snapshot.avg_trade_size,
            is_authoritative=snapshot.is_authoritative,
        ),
    )


@router.post("/{address}/follow", response_model=FollowResponse)
async def toggle_follow(address: str, request: FollowRequest, community: Community):
    """
    Seguir / dejar de seguir una wallet (alterna el estado).
    """
    try:
        is_following, followers_count = community.toggle_follow(address, request.follower_address)
    except MissingFollowerError:
        raise api_error(status.HTTP_400_BAD_REQUEST, "MISSING_FOLLOWER", "Follower address is required")
    except InvalidAddressError:
        raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_ADDRESS", "Invalid follower address format")
    except WalletNotFoundError:
        raise _not_found()

    return FollowResponse(is_following=is_following, followers_count=followers_count)


@router.post("/{address}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def add_comment(address: str, request: CommentCreateRequest, community: Community):
    """
    Comentar en una wallet (máximo 500 caracteres).
    """
    try:
        return community.add_comment(
            address,
            request.comment,
            author_address=request.author_address,
            author_name=request.author_name,
        )
    except EmptyCommentError as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "EMPTY_COMMENT", str(e))
    except CommentTooLongError as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "COMMENT_TOO_LONG", str(e))
    except WalletNotFoundError:
        raise _not_found()


@router.get("/{address}/comments", response_model=CommentsResponse)
async def get_comments(
    address: str,
    community: Community,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100)
):
    """
    Obtener los comentarios de una wallet, en orden de publicación.
    """
    try:
        comments, total = community.list_comments(address, page=page, limit=limit)
    except WalletNotFoundError:
        raise _not_found()

    return CommentsResponse(
        comments=comments,
        pagination=PaginationResponse(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        ),
    )
