#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
로또 번호 생성 알고리즘 모듈
- 기본 생성기 (pure: 균등 비복원 추출)
- 가중치 생성기 (정규화 + 거부 샘플링)
"""

from __future__ import annotations
import logging

import numpy as np
from lotto_utils import get_rng, validate_domain

__all__ = [
    'normalize_weights',
    'pure_ticket',
    'weighted_ticket',
    'generate_tickets',
]

logger = logging.getLogger(__name__)

# 전역 랜덤 생성기 사용
_rng = get_rng()

# 거부 샘플링 시 한 번에 뽑아 두는 후보 수
_BATCH = 64
# 이 횟수만큼 배치를 뽑아도 못 채우면 numpy 비복원 추출로 마무리
_MAX_BATCHES = 32


def normalize_weights(weights) -> np.ndarray:
    """
    가중치를 평균 1.0으로 정규화

    평균이 0 이하이면 정규화하지 않고 그대로 반환한다.
    모든 가중치에 같은 양수를 곱해도 결과는 같다.
    """
    w = np.array(weights, dtype=float)
    if w.size == 0:
        return w
    mean = w.mean()
    if mean > 0:
        w = w / mean
    return w


# ------------------ 기본 생성기 ------------------
def pure_ticket(max_number: int, count: int, rng=None) -> list[int]:
    """1..max_number 에서 count 개를 균등하게 비복원 추출 (오름차순)"""
    validate_domain(max_number, count)
    rng = rng if rng is not None else _rng
    xs = np.arange(1, max_number + 1)
    pick = rng.choice(xs, size=count, replace=False)
    return sorted(int(v) for v in pick)


# ------------------ 가중치 생성기 ------------------
def _probabilities(weights) -> np.ndarray | None:
    """가중치를 확률 벡터로 변환. 분포를 만들 수 없으면 None"""
    w = np.array(weights, dtype=float)
    if not np.all(np.isfinite(w)) or np.any(w < 0):
        return None
    s = w.sum()
    if s <= 0:
        return None
    return w / s


def weighted_ticket(weights, count: int, rng=None) -> list[int]:
    """
    가중치 기반으로 중복 없는 count 개 번호 추출

    Parameters:
        weights: 번호 1..len(weights) 의 상대 가중치 (index 0 = 번호 1)
        count: 뽑을 번호 개수
        rng: numpy Generator (생략 시 전역 생성기)

    Returns:
        오름차순 정렬된 번호 리스트

    가중치로 분포를 만들 수 없으면 (전부 0, 음수, NaN 등) 균등 추출로 대체한다.
    """
    rng = rng if rng is not None else _rng
    max_number = len(weights)
    validate_domain(max_number, count)

    # 전부 뽑는 경우는 샘플링할 필요 없음
    if count == max_number:
        return list(range(1, max_number + 1))

    p = _probabilities(normalize_weights(weights))
    if p is None or np.count_nonzero(p) < count:
        logger.warning("[WARN] 가중치 분포를 만들 수 없어 균등 추출로 대체합니다.")
        return pure_ticket(max_number, count, rng=rng)

    xs = np.arange(1, max_number + 1)
    chosen: list[int] = []
    seen: set[int] = set()
    try:
        # 거부 샘플링: 이미 뽑힌 번호는 버리고 다시 뽑는다
        for _ in range(_MAX_BATCHES):
            if len(chosen) == count:
                break
            for v in rng.choice(xs, size=_BATCH, p=p):
                v = int(v)
                if v in seen:
                    continue
                seen.add(v)
                chosen.append(v)
                if len(chosen) == count:
                    break
        if len(chosen) < count:
            # 남은 번호 가중치가 극히 작을 때 (예: epsilon 으로 눌린 번호뿐일 때)
            rest = np.array([x not in seen for x in xs])
            q = p * rest
            extra = rng.choice(xs, size=count - len(chosen), replace=False, p=q / q.sum())
            chosen.extend(int(v) for v in extra)
    except ValueError as e:
        logger.warning(f"[WARN] 가중치 샘플링 실패, 균등 추출로 대체합니다: {e}")
        return pure_ticket(max_number, count, rng=rng)

    return sorted(chosen)


def generate_tickets(
    n_sets: int,
    max_number: int,
    count: int,
    weights=None,
    rng=None,
) -> list[list[int]]:
    """n_sets 개 티켓 생성. weights 가 없으면 pure 추출"""
    result: list[list[int]] = []
    for _ in range(n_sets):
        if weights is None:
            result.append(pure_ticket(max_number, count, rng=rng))
        else:
            result.append(weighted_ticket(weights, count, rng=rng))
    return result
