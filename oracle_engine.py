#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
오라클 엔진
- 균등 가중치에서 시작해 등록 순서대로 점술 규칙 적용
- 0 이하 가중치는 EPSILON 으로 고정
- 평균 1.0 정규화 후 가중치 추출
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

import numpy as np

from lotto_generators import normalize_weights, weighted_ticket
from lotto_utils import get_rng
from oracle_facts import OracleContext
from oracle_rules import DEFAULT_RULES, RuleRegistry

logger = logging.getLogger(__name__)

EPSILON = 1e-9


@dataclass(frozen=True)
class RuleTrace:
    """규칙 하나의 적용 기록 (관찰용)"""

    key: str
    fired: bool
    message: str | None = None
    description: str | None = None


@dataclass
class Divination:
    """
    점술 결과

    Attributes:
        numbers: 오름차순 번호 리스트
        weights: 정규화된 최종 가중치 (index 0 = 번호 1)
        trace: 규칙별 적용 기록 (등록 순서)
    """

    numbers: list[int]
    weights: np.ndarray
    trace: list[RuleTrace] = field(default_factory=list)

    def fired_rules(self) -> list[str]:
        return [t.key for t in self.trace if t.fired]


def accumulate_weights(
    ctx: OracleContext,
    registry: RuleRegistry | None = None,
) -> tuple[np.ndarray, list[RuleTrace]]:
    """
    균등 가중치 벡터에 규칙을 순서대로 적용

    Returns:
        (weights, trace) - weights 는 길이 ctx.max, 모든 값 > 0
    """
    registry = registry if registry is not None else DEFAULT_RULES
    weights = np.ones(ctx.max, dtype=float)
    trace: list[RuleTrace] = []

    for rule in registry:
        message = rule.apply(ctx, weights)
        if message is None:
            logger.debug(f"[skip] {rule.key}: {rule.description or '입력 없음'}")
            trace.append(RuleTrace(rule.key, False, description=rule.description))
            continue
        logger.info(message)
        trace.append(RuleTrace(rule.key, True, message, rule.description))

    weights = np.where(np.isfinite(weights), weights, EPSILON)
    weights = np.maximum(weights, EPSILON)
    return weights, trace


class OracleEngine:
    """컨텍스트를 받아 점술 가중치로 티켓을 뽑는 엔진"""

    def __init__(self, registry: RuleRegistry | None = None, rng=None) -> None:
        self._registry = registry if registry is not None else DEFAULT_RULES
        self._rng = rng if rng is not None else get_rng()

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def divine(self, ctx: OracleContext) -> Divination:
        logger.info("🔮 THE ORACLE ENGAGES (神託起動)")
        logger.info("-" * 40)

        weights, trace = accumulate_weights(ctx, self._registry)

        logger.info("-" * 40)
        logger.info("🌌 Converging timelines (世界線収束)...")

        weights = normalize_weights(weights)
        numbers = weighted_ticket(weights, ctx.count, rng=self._rng)

        logger.info(f"✨ REVELATION (啓示): [{', '.join(map(str, numbers))}]")
        logger.info(
            "(Disclaimer: This is still just biased randomness. "
            "The universe laughs in expected value.)"
        )
        return Divination(numbers=numbers, weights=weights, trace=trace)

    def draw(self, ctx: OracleContext) -> list[int]:
        return self.divine(ctx).numbers
