"""
점술 규칙 테스트
- 규칙별 가중 모양
- 입력이 없으면 건너뛰기
- 등록 순서
"""

from __future__ import annotations
from datetime import date, datetime, timezone

import numpy as np
import pytest

import oracle_rules
from oracle_rules import DEFAULT_RULES, DivinationRule, RuleRegistry, chaos_noise, is_prime

def _apply(rule, ctx):
    weights = np.ones(ctx.max, dtype=float)
    message = rule(ctx, weights)
    return weights, message

def _w(weights, n):
    """번호 n 의 가중치"""
    return weights[n - 1]

def test_default_rule_order():
    assert DEFAULT_RULES.keys() == [
        "western_zodiac",
        "chinese_zodiac",
        "sanmei",
        "moon_phase",
        "rokuyo",
        "feng_shui",
        "blood_type",
        "chaos",
        "stats_echo",
    ]

@pytest.mark.parametrize(
    "rule",
    [
        oracle_rules.western_astrology,
        oracle_rules.chinese_zodiac,
        oracle_rules.sanmei,
        oracle_rules.feng_shui,
        oracle_rules.blood_type,
    ],
)
def test_rules_skip_without_their_fact(make_ctx, rule):
    weights, message = _apply(rule, make_ctx())
    assert message is None
    assert np.all(weights == 1.0)

def test_is_prime():
    assert [n for n in range(1, 20) if is_prime(n)] == [2, 3, 5, 7, 11, 13, 17, 19]

# ------------------ 1. 별자리 ------------------
def test_aries_boosts_primes_and_high_range(make_ctx):
    ctx = make_ctx(birth_date=date(1990, 4, 1))
    weights, message = _apply(oracle_rules.western_astrology, ctx)
    assert "Aries" in message
    assert _w(weights, 4) == pytest.approx(1.0)
    assert _w(weights, 2) == pytest.approx(1.3)
    assert _w(weights, 30) == pytest.approx(1.0)
    assert _w(weights, 32) == pytest.approx(1.2)
    assert _w(weights, 31) == pytest.approx(1.2 * 1.3)

def test_taurus_boosts_low_half_and_fives(make_ctx):
    ctx = make_ctx(birth_date=date(1990, 5, 1))
    weights, _ = _apply(oracle_rules.western_astrology, ctx)
    assert _w(weights, 1) == pytest.approx(1.2)
    assert _w(weights, 10) == pytest.approx(1.2 * 1.3)
    assert _w(weights, 22) == pytest.approx(1.0)
    assert _w(weights, 25) == pytest.approx(1.3)

def test_gemini_boosts_repdigits(make_ctx):
    ctx = make_ctx(birth_date=date(1985, 6, 1))
    weights, message = _apply(oracle_rules.western_astrology, ctx)
    assert "Gemini" in message
    boosted = [n for n in range(1, 44) if _w(weights, n) != 1.0]
    assert boosted == [11, 22, 33]
    assert _w(weights, 22) == pytest.approx(1.5)

def test_cancer_boosts_low_third(make_ctx):
    ctx = make_ctx(max_number=37, count=7, birth_date=date(1985, 7, 1))
    weights, message = _apply(oracle_rules.western_astrology, ctx)
    assert "Cancer" in message
    # 37 // 3 = 12
    assert np.all(weights[:12] == pytest.approx(1.3))
    assert np.all(weights[12:] == 1.0)

def test_generic_sign_is_noop(make_ctx):
    ctx = make_ctx(birth_date=date(1990, 8, 1))
    weights, message = _apply(oracle_rules.western_astrology, ctx)
    assert "Generic blessings for Leo" in message
    assert np.all(weights == 1.0)

# ------------------ 2. 띠 ------------------
def test_dragon_boosts_top_ten(make_ctx):
    ctx = make_ctx(birth_date=date(1988, 8, 1))
    weights, _ = _apply(oracle_rules.chinese_zodiac, ctx)
    assert np.all(weights[33:] == pytest.approx(1.5))
    assert np.all(weights[:33] == 1.0)

def test_tiger_boosts_odds(make_ctx):
    ctx = make_ctx(max_number=37, count=7, birth_date=date(1986, 8, 1))
    weights, _ = _apply(oracle_rules.chinese_zodiac, ctx)
    assert _w(weights, 1) == pytest.approx(1.2)
    assert _w(weights, 2) == pytest.approx(1.0)

def test_rat_boosts_first_ten(make_ctx):
    ctx = make_ctx(max_number=37, count=7, birth_date=date(1984, 8, 1))
    weights, message = _apply(oracle_rules.chinese_zodiac, ctx)
    assert "Year of the Rat" in message
    assert np.all(weights[:10] == pytest.approx(1.4))
    assert np.all(weights[10:] == 1.0)

def test_rat_on_small_domain_stays_in_range(make_ctx):
    ctx = make_ctx(max_number=6, count=2, birth_date=date(1996, 8, 1))
    weights, _ = _apply(oracle_rules.chinese_zodiac, ctx)
    assert weights.tolist() == pytest.approx([1.4] * 6)

def test_dragon_on_small_domain_boosts_everything(make_ctx):
    ctx = make_ctx(max_number=5, count=2, birth_date=date(1988, 8, 1))
    weights, _ = _apply(oracle_rules.chinese_zodiac, ctx)
    assert np.all(weights == pytest.approx(1.5))

# ------------------ 3. 산명 ------------------
@pytest.mark.parametrize(
    "year, boosted, plain",
    [
        (1984, [3, 6, 42], [1, 4]),     # Wood
        (1986, [6, 15, 39], [5, 10]),   # Fire
        (1990, [2, 40], [1, 41]),       # Metal
        (1992, [2, 13, 38], [1, 4]),    # Water
    ],
)
def test_sanmei_elements(make_ctx, year, boosted, plain):
    ctx = make_ctx(birth_date=date(year, 8, 1))
    weights, _ = _apply(oracle_rules.sanmei, ctx)
    for n in boosted:
        assert _w(weights, n) == pytest.approx(1.2)
    for n in plain:
        assert _w(weights, n) == pytest.approx(1.0)

def test_sanmei_earth_is_flat(make_ctx):
    ctx = make_ctx(birth_date=date(1988, 8, 1))
    weights, message = _apply(oracle_rules.sanmei, ctx)
    assert "Earth" in message
    assert np.all(weights == pytest.approx(1.05))

# ------------------ 4. 달 ------------------
def test_waxing_ramp(make_ctx):
    ctx = make_ctx(now=datetime(2024, 1, 10, tzinfo=timezone.utc))
    weights, _ = _apply(oracle_rules.moon_phase, ctx)
    xs = np.arange(1, 44)
    assert np.allclose(weights, 1.0 + 0.3 * xs / 43)
    assert np.all(np.diff(weights) > 0)

def test_waning_ramp(make_ctx):
    ctx = make_ctx(now=datetime(2024, 1, 25, tzinfo=timezone.utc))
    weights, _ = _apply(oracle_rules.moon_phase, ctx)
    xs = np.arange(1, 44)
    assert np.allclose(weights, 1.3 - 0.3 * xs / 43)
    assert _w(weights, 43) == pytest.approx(1.0)

def test_new_and_full_moon_halves(make_ctx):
    new, _ = _apply(oracle_rules.moon_phase, make_ctx(now=datetime(2024, 1, 2, tzinfo=timezone.utc)))
    full, _ = _apply(oracle_rules.moon_phase, make_ctx(now=datetime(2024, 1, 16, tzinfo=timezone.utc)))
    assert np.all(new[:21] == pytest.approx(1.2)) and np.all(new[21:] == 1.0)
    assert np.all(full[:21] == 1.0) and np.all(full[21:] == pytest.approx(1.25))

# ------------------ 5. 육요 ------------------
def test_taian_boosts_evens(make_ctx):
    ctx = make_ctx(now=datetime(2024, 1, 6, tzinfo=timezone.utc))
    weights, _ = _apply(oracle_rules.rokuyo, ctx)
    assert _w(weights, 2) == pytest.approx(1.15)
    assert _w(weights, 3) == 1.0

def test_butsumetsu_dampens_extremes(make_ctx):
    ctx = make_ctx(now=datetime(2024, 1, 7, tzinfo=timezone.utc))
    weights, _ = _apply(oracle_rules.rokuyo, ctx)
    assert _w(weights, 1) == pytest.approx(0.8)
    assert _w(weights, 43) == pytest.approx(0.8)
    assert np.all(weights[1:-1] == 1.0)

def test_senkatsu_and_senbu_split_halves(make_ctx):
    early, _ = _apply(oracle_rules.rokuyo, make_ctx(max_number=37, count=7, now=datetime(2024, 1, 9, tzinfo=timezone.utc)))
    late, _ = _apply(oracle_rules.rokuyo, make_ctx(max_number=37, count=7, now=datetime(2024, 1, 10, tzinfo=timezone.utc)))
    assert np.all(early[:18] == pytest.approx(1.2)) and np.all(early[18:] == 1.0)
    assert np.all(late[:18] == 1.0) and np.all(late[18:] == pytest.approx(1.2))

def test_tomobiki_is_narrative_only(make_ctx):
    weights, message = _apply(oracle_rules.rokuyo, make_ctx(now=datetime(2024, 1, 8, tzinfo=timezone.utc)))
    assert "Tomobiki" in message
    assert np.all(weights == 1.0)

# ------------------ 6. 풍수 ------------------
@pytest.mark.parametrize(
    "max_number, color, first, last",
    [
        (43, "green", 1, 9),
        (43, "blue", 10, 19),
        (43, "red", 20, 29),
        (43, "gold", 30, 43),
        (37, "green", 1, 8),
        (37, "blue", 9, 17),
        (37, "red", 18, 26),
        (37, "gold", 27, 37),
    ],
)
def test_aura_quadrants(make_ctx, max_number, color, first, last):
    ctx = make_ctx(max_number=max_number, count=6, aura_color=color)
    weights, _ = _apply(oracle_rules.feng_shui, ctx)
    for n in range(1, max_number + 1):
        expected = 1.3 if first <= n <= last else 1.0
        assert _w(weights, n) == pytest.approx(expected), n

def test_unmapped_aura_is_noop(make_ctx):
    weights, message = _apply(oracle_rules.feng_shui, make_ctx(aura_color="purple"))
    assert "Harmonizing" in message
    assert np.all(weights == 1.0)

def test_aura_on_tiny_domain_stays_in_range(make_ctx):
    green, _ = _apply(oracle_rules.feng_shui, make_ctx(max_number=3, count=1, aura_color="green"))
    gold, _ = _apply(oracle_rules.feng_shui, make_ctx(max_number=3, count=1, aura_color="gold"))
    # 번호가 4개 미만이면 q = 0: 앞 세 사분면은 비고 네 번째가 전부
    assert green.tolist() == [1.0, 1.0, 1.0]
    assert gold.tolist() == pytest.approx([1.3, 1.3, 1.3])

# ------------------ 7. 혈액형 ------------------
def test_blood_type_o_boosts_upper_half(make_ctx):
    weights, _ = _apply(oracle_rules.blood_type, make_ctx(max_number=37, count=7, blood_type="O"))
    assert np.all(weights[18:] == pytest.approx(1.2))
    assert np.all(weights[:18] == 1.0)

def test_blood_type_a_boosts_middle_third(make_ctx):
    weights, _ = _apply(oracle_rules.blood_type, make_ctx(blood_type="A"))
    boosted = [n for n in range(1, 44) if _w(weights, n) > 1.0]
    assert boosted == list(range(14, 29))

def test_blood_type_b_boosts_extremes(make_ctx):
    weights, _ = _apply(oracle_rules.blood_type, make_ctx(blood_type="B"))
    boosted = [n for n in range(1, 44) if _w(weights, n) > 1.0]
    assert boosted == [1, 2, 3, 4, 39, 40, 41, 42, 43]

def test_blood_type_ab_boosts_repdigits(make_ctx):
    weights, _ = _apply(oracle_rules.blood_type, make_ctx(blood_type="AB"))
    boosted = [n for n in range(1, 44) if _w(weights, n) > 1.0]
    assert boosted == [11, 22, 33]

# ------------------ 8. 혼돈 ------------------
def test_chaos_noise_range_and_determinism():
    for seed in (0, 1, 0xCAFEBABE, (1 << 64) - 1):
        values = [chaos_noise(seed, n) for n in range(1, 44)]
        assert all(0.0 <= v < 0.1 for v in values)
        assert values == [chaos_noise(seed, n) for n in range(1, 44)]

@pytest.mark.parametrize("resonance", [0, 1, 12345, (1 << 64) - 1])
def test_chaos_never_drives_weights_non_positive(make_ctx, resonance):
    weights, message = _apply(oracle_rules.chaos, make_ctx(resonance=resonance))
    assert np.all(weights > 0)
    assert np.all(weights >= 1.0) and np.all(weights < 1.1)
    assert message.startswith("[Chaos]")

# ------------------ 9. 통계 ------------------
def test_stats_echo_boosts_day_month_and_sum(make_ctx):
    ctx = make_ctx(now=datetime(2024, 3, 5, tzinfo=timezone.utc))
    weights, _ = _apply(oracle_rules.stats_echo, ctx)
    boosted = [n for n in range(1, 44) if _w(weights, n) > 1.0]
    assert boosted == [3, 5, 8]
    assert _w(weights, 8) == pytest.approx(1.5)

def test_stats_echo_boosts_once_when_day_equals_month(make_ctx):
    ctx = make_ctx(now=datetime(2024, 4, 4, tzinfo=timezone.utc))
    weights, _ = _apply(oracle_rules.stats_echo, ctx)
    assert _w(weights, 4) == pytest.approx(1.5)
    assert _w(weights, 8) == pytest.approx(1.5)

def test_stats_echo_ignores_sums_beyond_domain(make_ctx):
    ctx = make_ctx(max_number=37, count=7, now=datetime(2024, 12, 31, tzinfo=timezone.utc))
    weights, _ = _apply(oracle_rules.stats_echo, ctx)
    assert len(weights) == 37
    assert _w(weights, 12) == pytest.approx(1.5)
    assert _w(weights, 31) == pytest.approx(1.5)

# ------------------ 등록 ------------------
def test_registry_rejects_duplicates_and_unknown_keys():
    registry = RuleRegistry()
    rule = DivinationRule("noop", lambda ctx, w: None)
    registry.register(rule)
    with pytest.raises(ValueError):
        registry.register(rule)
    with pytest.raises(KeyError):
        registry.get("missing")
    assert registry.get("noop") is rule

def test_registry_until_and_without():
    assert DEFAULT_RULES.until("blood_type").keys()[-1] == "blood_type"
    assert len(DEFAULT_RULES.until("blood_type")) == 7
    assert "chaos" not in DEFAULT_RULES.without("chaos").keys()
    assert len(DEFAULT_RULES) == 9
    with pytest.raises(KeyError):
        DEFAULT_RULES.until("tarot")
