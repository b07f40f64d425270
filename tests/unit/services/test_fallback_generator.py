"""
Unit tests for the synthetic fallback generator
"""

import logging

import pytest

from arena.services.fallback_generator import (
    PROFILES,
    AddressCategory,
    base_value_for,
    classify_address,
    generate_fallback_snapshot,
)
from arena.services.scoring_service import score_breakdown

from tests.conftest import ADDRESS_A, FIXED_NOW, MAKERDAO, VITALIK_MIXED_CASE


BINANCE_HOT = "0x28c6c06298d514db089934071355e5743bf21d60"


class TestClassifyAddress:
    """Test suite for address buckets."""

    def test_buckets(self):
        assert classify_address(BINANCE_HOT) == AddressCategory.EXCHANGE
        assert classify_address(MAKERDAO) == AddressCategory.PROTOCOL
        assert classify_address(VITALIK_MIXED_CASE) == AddressCategory.INDIVIDUAL
        assert classify_address(ADDRESS_A) == AddressCategory.DEFAULT


class TestGenerateFallbackSnapshot:
    """Test suite for generate_fallback_snapshot."""

    def test_protocol_address(self):
        """Test protocol wallet gets a value inside the protocol range and no live flag."""
        snapshot = generate_fallback_snapshot(MAKERDAO, now=FIXED_NOW)
        profile = PROFILES[AddressCategory.PROTOCOL]

        assert profile.min_value <= snapshot.total_value <= profile.max_value
        assert snapshot.is_authoritative is False
        assert snapshot.pnl_estimated is True
        assert snapshot.risk_score == 45

    def test_protocol_score_has_no_authoritative_bonus(self):
        """Test the score of a synthetic snapshot skips the live data bonus."""
        snapshot = generate_fallback_snapshot(MAKERDAO, now=FIXED_NOW)

        breakdown = score_breakdown(snapshot, FIXED_NOW, FIXED_NOW)

        assert breakdown["authoritative_data"] == 0.0

    @pytest.mark.parametrize("address,category", [
        (BINANCE_HOT, AddressCategory.EXCHANGE),
        (MAKERDAO, AddressCategory.PROTOCOL),
        (VITALIK_MIXED_CASE, AddressCategory.INDIVIDUAL),
        (ADDRESS_A, AddressCategory.DEFAULT),
    ])
    def test_value_within_bucket_range(self, address, category):
        profile = PROFILES[category]
        snapshot = generate_fallback_snapshot(address, now=FIXED_NOW)

        assert profile.min_value <= snapshot.total_value <= profile.max_value

    def test_is_deterministic(self):
        """Test same address gives the same figures."""
        first = generate_fallback_snapshot(ADDRESS_A, now=FIXED_NOW)
        second = generate_fallback_snapshot(ADDRESS_A, now=FIXED_NOW)

        assert first == second

    def test_case_insensitive(self):
        lower = generate_fallback_snapshot(VITALIK_MIXED_CASE.lower(), now=FIXED_NOW)
        mixed = generate_fallback_snapshot(VITALIK_MIXED_CASE, now=FIXED_NOW)

        assert lower.total_value == mixed.total_value

    def test_assets(self):
        """Test five assets sorted by value whose percentages add up to 100."""
        snapshot = generate_fallback_snapshot(ADDRESS_A, now=FIXED_NOW)

        assert {a.symbol for a in snapshot.assets} == {"ETH", "BTC", "USDC", "USDT", "Other"}
        values = [a.value for a in snapshot.assets]
        assert values == sorted(values, reverse=True)
        assert sum(a.percentage for a in snapshot.assets) == pytest.approx(100.0)
        assert sum(values) == pytest.approx(snapshot.total_value)

    def test_derived_metrics(self):
        snapshot = generate_fallback_snapshot(ADDRESS_A, now=FIXED_NOW)

        # Perfil por defecto: riesgo 55
        assert snapshot.pnl_percentage == pytest.approx(12 * 0.45)
        assert snapshot.win_rate == 0.65
        assert snapshot.avg_trade_size == pytest.approx(snapshot.total_value * 0.02)
        assert snapshot.transaction_count == int(snapshot.total_value // 10_000)
        assert snapshot.last_trade_at < FIXED_NOW

    def test_logs_are_tagged(self, caplog):
        with caplog.at_level(logging.INFO, logger="arena.services.fallback_generator"):
            generate_fallback_snapshot(ADDRESS_A, now=FIXED_NOW)

        assert any("[synthetic]" in record.getMessage() for record in caplog.records)


class TestBaseValue:
    """Test suite for base_value_for."""

    def test_extremes(self):
        profile = PROFILES[AddressCategory.DEFAULT]

        assert base_value_for("0x" + "0" * 40, profile) == profile.min_value
        assert base_value_for("0x" + "f" * 40, profile) == profile.max_value
