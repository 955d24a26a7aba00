#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Loto6 / Loto7 랜덤 번호 생성기 (CLI)
- pure: 완전 균등 랜덤 (기본)
- oracle (숨김): 생년월일/혈액형/오라 색 + 시간/달/엔트로피로 가중치를 비튼 추출
- --out 지정 시 CSV 저장
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
from datetime import date

import lotto_generators
from lotto_history import save_tickets_csv
from lotto_utils import GAME_CONFIGS, game_config, get_rng, tickets_to_text
from oracle_engine import OracleEngine
from oracle_facts import AuraColor, BloodType, OracleContext, clock_observer, console_observer

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "LOTO_ORACLE_LOG_LEVEL"

PURE_ALGOS = ("pure", "spread", "cluster", "favorite")
ORACLE_ALGOS = ("oracle", "divine", "destiny")


def parse_algorithm(name: str) -> str:
    """알고리즘 이름 -> "pure" 또는 "oracle" (모르는 이름은 pure)"""
    key = name.strip().lower()
    if key in ORACLE_ALGOS:
        logger.warning(
            "🔮 The forbidden Oracle mode has been invoked. "
            "Probability bends, but math remains unchanged."
        )
        return "oracle"
    if key not in PURE_ALGOS:
        logger.info(f"알 수 없는 알고리즘 '{name}' -> pure 로 진행합니다.")
    # TODO: spread / cluster / favorite 전용 배치 전략 구현 (현재는 pure 와 동일)
    return "pure"


def _birth_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"YYYY-MM-DD 형식이어야 합니다: '{text}'") from exc


def _blood_type(text: str) -> BloodType:
    try:
        return BloodType(text.upper())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"혈액형은 A, B, O, AB 중 하나: '{text}'") from exc


def _aura_color(text: str) -> AuraColor:
    try:
        return AuraColor(text.lower())
    except ValueError as exc:
        colors = ", ".join(c.value for c in AuraColor)
        raise argparse.ArgumentTypeError(f"오라 색은 {colors} 중 하나: '{text}'") from exc


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"1 이상이어야 합니다: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loto-oracle",
        description="ロト6 / ロト7 の完全ランダム数字ジェネレータ",
    )
    parser.add_argument("--type", dest="game_type", choices=sorted(GAME_CONFIGS), default="loto6",
                        help="게임 종류 (loto6: 1~43 중 6개, loto7: 1~37 중 7개)")
    parser.add_argument("--algo", default="pure",
                        help="알고리즘: pure, spread, cluster, favorite")
    parser.add_argument("--n", type=_positive_int, default=10, help="생성할 티켓 수")
    parser.add_argument("--out", default=None, help="CSV 출력 경로 (지정할 때만 저장)")

    oracle = parser.add_argument_group("oracle", "oracle 모드 전용 입력")
    oracle.add_argument("--birth-date", type=_birth_date, default=None, help="생년월일 (YYYY-MM-DD)")
    oracle.add_argument("--blood-type", type=_blood_type, default=None, help="혈액형 (A, B, O, AB)")
    oracle.add_argument("--aura-color", type=_aura_color, default=None,
                        help="오라 색 (red, blue, green, gold, purple, white, black)")
    oracle.add_argument("--no-prompt", action="store_true",
                        help="관측자 엔터 입력을 기다리지 않고 시계로 엔트로피 생성")

    parser.add_argument("--log-level", default=os.environ.get(LOG_LEVEL_ENV, "INFO"),
                        help=f"로그 레벨 (기본: ${LOG_LEVEL_ENV} 또는 INFO)")
    return parser


def generate_tickets(
    algo: str,
    max_number: int,
    picks: int,
    n: int,
    engine: OracleEngine | None = None,
    ctx: OracleContext | None = None,
    rng=None,
) -> list[list[int]]:
    """알고리즘별로 n 개 티켓 생성. oracle 준비가 안 됐으면 pure 로 대체"""
    if algo == "oracle" and engine is not None and ctx is not None:
        return [engine.draw(ctx) for _ in range(n)]
    return lotto_generators.generate_tickets(n, max_number, picks, rng=rng)


def main(argv: list[str] | None = None, stdin=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.getLevelName(str(args.log_level).upper())
    if not isinstance(level, int):
        parser.error(f"알 수 없는 로그 레벨: {args.log_level}")
    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s")

    algo = parse_algorithm(args.algo)
    max_number, picks = game_config(args.game_type)
    rng = get_rng()

    engine = None
    ctx = None
    if algo == "oracle":
        if args.no_prompt:
            observer = clock_observer
        else:
            observer = lambda: console_observer(stdin=stdin)  # noqa: E731
        ctx = OracleContext.from_args(
            max_number,
            picks,
            birth_date=args.birth_date,
            blood_type=args.blood_type,
            aura_color=args.aura_color,
            observer=observer,
        )
        engine = OracleEngine(rng=rng)
    elif any(v is not None for v in (args.birth_date, args.blood_type, args.aura_color)):
        logger.info("oracle 전용 입력은 pure 모드에서 무시됩니다.")

    tickets = generate_tickets(algo, max_number, picks, args.n, engine=engine, ctx=ctx, rng=rng)
    print(tickets_to_text(tickets))

    if args.out:
        try:
            save_tickets_csv(args.out, tickets, picks)
        except OSError as e:
            logger.error(f"[ERROR] CSV 저장 실패: {e}")
            return 1
        logger.info(f"CSV 저장 완료: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
