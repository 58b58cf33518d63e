"""Tests for board texture and draw detection."""

import pytest

from poker_ai.strategy.board_analysis import analyze_board, analyze_draws
from poker_ai.utils.card import Card


def _cards(s: str) -> list[Card]:
    return [Card.from_str(c) for c in s.split()]


class TestBoardTexture:
    def test_empty_board(self) -> None:
        texture = analyze_board([])
        assert texture.wetness == 0.0
        assert not texture.is_paired

    def test_monotone_connected_board_is_wet(self) -> None:
        texture = analyze_board(_cards("Ah Kh Qh"))
        assert texture.is_monotone
        assert texture.has_high_cards
        assert texture.connectivity == pytest.approx(1.0)
        assert texture.wetness == pytest.approx(0.75)
        assert texture.texture_label == "wet"

    def test_rainbow_disconnected_board_is_dry(self) -> None:
        texture = analyze_board(_cards("Kc 7d 2s"))
        assert not texture.is_monotone
        assert not texture.is_two_tone
        assert texture.wetness == pytest.approx(0.0)
        assert texture.texture_label == "dry"

    def test_paired_board_is_drier(self) -> None:
        texture = analyze_board(_cards("8c 8d 2s"))
        assert texture.is_paired
        assert texture.wetness == pytest.approx(0.35 / 3 - 0.10)

    def test_two_tone(self) -> None:
        texture = analyze_board(_cards("9h 6h 2c"))
        assert texture.is_two_tone
        assert not texture.has_high_cards

    def test_wetness_clamped(self) -> None:
        for board in ("Ah Kh Qh Jh Th", "2c 2d 2h 2s Kc", "9s 8s 7s 6d"):
            assert 0.0 <= analyze_board(_cards(board)).wetness <= 1.0


class TestDraws:
    def test_flush_draw(self) -> None:
        draws = analyze_draws(_cards("Ah 5h"), _cards("Kh 9h 2c"))
        assert draws.has_flush_draw
        assert draws.flush_outs == 9
        assert draws.total_outs == 9

    def test_open_ended(self) -> None:
        draws = analyze_draws(_cards("8c 9d"), _cards("Tc Js 2h"))
        assert draws.has_oesd
        assert not draws.has_gutshot
        assert draws.straight_outs == 8

    def test_gutshot(self) -> None:
        draws = analyze_draws(_cards("8c 9d"), _cards("Jc Qs 2h"))
        assert draws.has_gutshot
        assert not draws.has_oesd
        assert draws.straight_outs == 4

    def test_wheel_gutshot(self) -> None:
        draws = analyze_draws(_cards("Ac 2d"), _cards("3h 5s Kc"))
        assert draws.has_gutshot

    def test_combo_draw_outs_overlap(self) -> None:
        draws = analyze_draws(_cards("8h 9h"), _cards("Th Jh 2c"))
        assert draws.is_combo_draw
        assert draws.total_outs == 9 + 8 - 1

    def test_no_draws_on_river(self) -> None:
        draws = analyze_draws(_cards("8h 9h"), _cards("Th Jh 2c 3d Ks"))
        assert not draws.has_draw
        assert draws.total_outs == 0

    def test_no_draws_preflop(self) -> None:
        assert not analyze_draws(_cards("8h 9h"), []).has_draw
