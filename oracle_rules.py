#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
오라클 점술 규칙 모듈
- 서양 별자리, 띠, 산명(오행), 달의 위상, 육요
- 풍수(오라 색), 혈액형, 혼돈(엔트로피), 통계(일/월 메아리)

각 규칙은 (ctx, weights) 를 받아 weights 를 제자리에서 곱하거나 더하고,
적용했으면 설명 문자열을, 필요한 입력이 없어 건너뛰었으면 None 을 반환한다.
weights[k] 는 번호 k + 1 의 가중치.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from oracle_facts import (
    MASK64,
    AuraColor,
    BloodType,
    ChineseZodiac,
    MoonPhase,
    OracleContext,
    Rokuyo,
    WesternZodiac,
)

__all__ = [
    'DivinationRule',
    'RuleRegistry',
    'DEFAULT_RULES',
    'is_prime',
    'chaos_noise',
]

CHAOS_MULTIPLIER = 0x517CC1B727220A95

RuleFn = Callable[[OracleContext, np.ndarray], Optional[str]]


def _numbers(weights: np.ndarray) -> np.ndarray:
    """가중치 벡터에 대응하는 번호 배열 1..max"""
    return np.arange(1, len(weights) + 1)


def _lower_half(xs: np.ndarray) -> np.ndarray:
    return xs <= len(xs) // 2


def _upper_half(xs: np.ndarray) -> np.ndarray:
    return xs > len(xs) // 2


def is_prime(n: int) -> bool:
    if n <= 1:
        return False
    i = 2
    while i * i <= n:
        if n % i == 0:
            return False
        i += 1
    return True


# ==================== 1. 서양 별자리 ====================
def western_astrology(ctx: OracleContext, weights: np.ndarray) -> str | None:
    sign = ctx.western_zodiac
    if sign is None:
        return None
    xs = _numbers(weights)
    m = len(xs)

    if sign is WesternZodiac.ARIES:
        weights[xs > m * 7 // 10] *= 1.2
        weights[np.array([is_prime(int(n)) for n in xs], dtype=bool)] *= 1.3
        detail = "Favoring bold prime numbers & high ranges."
    elif sign is WesternZodiac.TAURUS:
        weights[_lower_half(xs)] *= 1.2
        weights[xs % 5 == 0] *= 1.3
        detail = "Favoring stability (numbers ending in 0, 5) and low range."
    elif sign is WesternZodiac.GEMINI:
        weights[(xs > 10) & (xs % 11 == 0)] *= 1.5
        detail = "Favoring duality and communication (double digits)."
    elif sign is WesternZodiac.CANCER:
        weights[xs <= m // 3] *= 1.3
        detail = "Favoring numbers near the home (low range)."
    else:
        detail = f"Generic blessings for {sign.value}."
    return f"[Astrology] Sign: {sign.value} derived from birth date. {detail}"


# ==================== 2. 띠 (십이지) ====================
def chinese_zodiac(ctx: OracleContext, weights: np.ndarray) -> str | None:
    animal = ctx.chinese_zodiac
    if animal is None:
        return None
    xs = _numbers(weights)
    m = len(xs)

    if animal is ChineseZodiac.DRAGON:
        weights[xs > max(m - 10, 0)] *= 1.5
        detail = "Empowering wide spread & large numbers."
    elif animal is ChineseZodiac.RAT:
        weights[xs <= 10] *= 1.4
        detail = "Clever starts; boosting low numbers."
    elif animal is ChineseZodiac.TIGER:
        weights[xs % 2 == 1] *= 1.2
        detail = "Aggressive power; boosting odds."
    else:
        detail = "Standard fortune for this animal."
    return f"[Zodiac(Animal)] Year of the {animal.value} -> {detail}"


# ==================== 3. 산명 (오행) ====================
# 연도 끝자리 -> 오행
_ELEMENTS = {
    4: "Wood", 5: "Wood",
    6: "Fire", 7: "Fire",
    8: "Earth", 9: "Earth",
    0: "Metal", 1: "Metal",
    2: "Water", 3: "Water",
}


def _element_mask(element: str, xs: np.ndarray) -> tuple[np.ndarray, float]:
    if element == "Wood":
        return xs % 3 == 0, 1.2
    if element == "Fire":
        return (xs // 10 + xs % 10) > 5, 1.2
    if element == "Earth":
        return np.ones(len(xs), dtype=bool), 1.05
    if element == "Metal":
        return xs % 2 == 0, 1.2
    return np.isin(xs % 10, (2, 3, 8)), 1.2


def sanmei(ctx: OracleContext, weights: np.ndarray) -> str | None:
    if ctx.birth_date is None:
        return None
    stem = ctx.birth_date.year % 10
    element = _ELEMENTS[stem]
    mask, factor = _element_mask(element, _numbers(weights))
    weights[mask] *= factor
    return f"[Sanmei] Element: {element} (Stem {stem}) -> biased weights."


# ==================== 4. 달의 위상 ====================
def moon_phase(ctx: OracleContext, weights: np.ndarray) -> str | None:
    xs = _numbers(weights)
    m = len(xs)
    phase = ctx.moon_phase

    if phase is MoonPhase.NEW:
        weights[_lower_half(xs)] *= 1.2
        detail = "favoring beginnings (low numbers)."
    elif phase is MoonPhase.WAXING:
        weights *= 1.0 + (xs / m) * 0.3
        detail = "favoring growth (ascending preference)."
    elif phase is MoonPhase.FULL:
        weights[_upper_half(xs)] *= 1.25
        detail = "favoring abundance (high numbers)."
    else:
        weights *= 1.3 - (xs / m) * 0.3
        detail = "favoring release (descending preference)."
    return f"[Moon] Phase: {phase.value} -> {detail}"


# ==================== 5. 육요 ====================
def rokuyo(ctx: OracleContext, weights: np.ndarray) -> str | None:
    xs = _numbers(weights)
    day = ctx.rokuyo

    if day is Rokuyo.TAIAN:
        weights[xs % 2 == 0] *= 1.15
        return "[Rokuyo] Taian (Great Peace) -> Even numbers gain a gentle blessing."
    if day is Rokuyo.BUTSUMETSU:
        # 양 끝 번호를 살짝 누른다
        if len(xs) >= 10:
            weights[0] *= 0.8
            weights[-1] *= 0.8
        return "[Rokuyo] Butsumetsu (Buddha's Death) -> Minimalistic patterns."
    if day is Rokuyo.SENKATSU:
        weights[_lower_half(xs)] *= 1.2
        return "[Rokuyo] Senkatsu (Win Early) -> Boosting first half."
    if day is Rokuyo.SENBU:
        weights[_upper_half(xs)] *= 1.2
        return "[Rokuyo] Senbu (Lose Early, Win Late) -> Boosting second half."
    return f"[Rokuyo] {day.value} -> General luck applied."


# ==================== 6. 풍수 (오라 색) ====================
# 오라 색 -> (사분면 번호, 설명)
_AURA_QUADRANTS = {
    AuraColor.GREEN: (0, "Green Aura (East/Wood) -> Growth in Q1."),
    AuraColor.BLUE: (1, "Blue Aura (North/Water) -> Flow in Q2."),
    AuraColor.RED: (2, "Red Aura (South/Fire) -> Vitality in Q3."),
    AuraColor.GOLD: (3, "Gold Aura (West/Metal) -> Wealth in Q4."),
}


def aura_quadrant_mask(target: int, xs: np.ndarray) -> np.ndarray:
    """
    q = max // 4 경계의 사분면 마스크
    Q1: 1 <= n < q, Q2: q <= n < 2q, Q3: 2q <= n < 3q, Q4: n >= 3q
    (loto6: 1-9, 10-19, 20-29, 30-43)
    """
    q = len(xs) // 4
    if target == 3:
        return xs >= 3 * q
    return (xs >= max(target * q, 1)) & (xs < (target + 1) * q)


def feng_shui(ctx: OracleContext, weights: np.ndarray) -> str | None:
    aura = ctx.aura_color
    if aura is None:
        return None
    if aura not in _AURA_QUADRANTS:
        return f"[FengShui] {aura.value.capitalize()} Aura -> Harmonizing all quadrants."

    target, detail = _AURA_QUADRANTS[aura]
    weights[aura_quadrant_mask(target, _numbers(weights))] *= 1.3
    return f"[FengShui] {detail}"


# ==================== 7. 혈액형 ====================
def blood_type(ctx: OracleContext, weights: np.ndarray) -> str | None:
    bt = ctx.blood_type
    if bt is None:
        return None
    xs = _numbers(weights)
    m = len(xs)

    if bt is BloodType.A:
        weights[(xs >= m // 3) & (xs <= m * 2 // 3)] *= 1.25
        detail = "Favoring balanced gaps and moderate sums."
    elif bt is BloodType.B:
        weights[(xs < 5) | (xs > m - 5)] *= 1.3
        detail = "Favoring individuality (unusual numbers)."
    elif bt is BloodType.O:
        weights[_upper_half(xs)] *= 1.2
        detail = "Favoring broad ranges and big numbers."
    else:
        weights[(xs > 9) & (xs % 11 == 0)] *= 1.5
        detail = "Favoring symmetrical patterns."
    return f"[BloodType] Type {bt.value} -> applying biological bias. {detail}"


# ==================== 8. 혼돈 (엔트로피) ====================
def chaos_noise(seed: int, n: int) -> float:
    """시드와 번호로 [0, 0.1) 범위의 결정적 잡음 생성"""
    x = ((seed ^ n) * CHAOS_MULTIPLIER) & MASK64
    x ^= x >> 12
    return (x % 100) / 1000.0


def chaos(ctx: OracleContext, weights: np.ndarray) -> str | None:
    # 곱하지 않고 더하는 유일한 규칙
    seed = ctx.entropy & MASK64
    noise = np.array([chaos_noise(seed, int(n)) for n in _numbers(weights)])
    weights += noise
    return f"[Chaos] Tortoise shell cracks along unseen lines (entropy: 0x{seed:X}...)."


# ==================== 9. 통계 (일/월 메아리) ====================
def stats_echo(ctx: OracleContext, weights: np.ndarray) -> str | None:
    xs = _numbers(weights)
    day = ctx.now_utc.day
    month = ctx.now_utc.month
    hot = (xs == day) | (xs == month) | (xs == day + month)
    weights[hot] *= 1.5
    return "[Stats] Historical resonance -> boosting numbers that echo the past."


# ------------------ 규칙 등록 ------------------
@dataclass(frozen=True)
class DivinationRule:
    """
    점술 규칙 정의

    Attributes:
        key: 등록 키
        apply: (ctx, weights) -> 설명 문자열 또는 None
        description: 규칙 요약
    """

    key: str
    apply: RuleFn
    description: Optional[str] = None


class RuleRegistry:
    """등록 순서를 유지하는 규칙 목록. 곱셈 효과가 누적되므로 순서가 결과에 영향을 준다."""

    def __init__(self, rules=None) -> None:
        self._rules: list[DivinationRule] = []
        for rule in rules or ():
            self.register(rule)

    def register(self, rule: DivinationRule) -> None:
        if any(r.key == rule.key for r in self._rules):
            raise ValueError(f"Rule '{rule.key}' is already registered")
        self._rules.append(rule)

    def get(self, key: str) -> DivinationRule:
        for rule in self._rules:
            if rule.key == key:
                return rule
        raise KeyError(f"Unknown divination rule '{key}'")

    def keys(self) -> list[str]:
        return [r.key for r in self._rules]

    def until(self, key: str) -> "RuleRegistry":
        """처음부터 key 규칙까지 (포함) 만 담은 새 목록"""
        keys = self.keys()
        if key not in keys:
            raise KeyError(f"Unknown divination rule '{key}'")
        return RuleRegistry(self._rules[: keys.index(key) + 1])

    def without(self, *keys: str) -> "RuleRegistry":
        return RuleRegistry([r for r in self._rules if r.key not in keys])

    def __iter__(self):
        return iter(list(self._rules))

    def __len__(self) -> int:
        return len(self._rules)


DEFAULT_RULES = RuleRegistry([
    DivinationRule("western_zodiac", western_astrology, "별자리별 구간/소수 가중"),
    DivinationRule("chinese_zodiac", chinese_zodiac, "띠별 구간/홀수 가중"),
    DivinationRule("sanmei", sanmei, "출생 연도 끝자리 오행 가중"),
    DivinationRule("moon_phase", moon_phase, "달의 위상별 절반/경사 가중"),
    DivinationRule("rokuyo", rokuyo, "육요별 짝수/양끝/절반 가중"),
    DivinationRule("feng_shui", feng_shui, "오라 색별 사분면 가중"),
    DivinationRule("blood_type", blood_type, "혈액형별 구간 가중"),
    DivinationRule("chaos", chaos, "엔트로피 기반 가산 잡음 [0, 0.1)"),
    DivinationRule("stats_echo", stats_echo, "오늘 일/월/합과 같은 번호 1.5배"),
])
