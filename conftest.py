"""
테스트 공용 fixture
- 고정 시각 / 고정 관측자로 만든 오라클 컨텍스트
- 시드 고정 랜덤 생성기
"""

from __future__ import annotations
from datetime import datetime, timezone

import numpy as np
import pytest

from oracle_facts import OracleContext

FIXED_RESONANCE = 0x1234_5678_9ABC


@pytest.fixture
def rng():
    return np.random.default_rng(20240101)


@pytest.fixture
def make_ctx():
    """OracleContext.from_args 를 입력 대기 없이 호출하는 팩토리"""

    def _make(max_number=43, count=6, *, now=None, resonance=FIXED_RESONANCE, **facts):
        now = now or datetime(2024, 3, 8, 12, 0, tzinfo=timezone.utc)
        return OracleContext.from_args(
            max_number,
            count,
            now=now,
            observer=lambda: resonance,
            **facts,
        )

    return _make
