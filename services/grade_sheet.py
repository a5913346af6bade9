"""
services/grade_sheet.py

성적 입력 표 한 개의 로컬 상태 (화면 컴포넌트가 단독 소유)
- GradeSheet: /v1/grades 라우트를 쓰는 클라이언트 쪽 세션 모델
- store_saver: PATCH /v1/grades/{id} 와 GradeSheet가 공유하는 필드 저장 경로
- load / reset 으로만 전체 상태 전환
- edit: 입력 중 로컬 값 변경 (숫자 아닌 입력은 빈 칸, 예외 없음)
- save: 포커스 해제 시 필드 하나 저장
  · 실패 → 로컬 값 그대로, "Failed to save grade" 알림
  · 성공 → "Grade saved!" 알림, 단 저장 도중 더 최근 edit/save가 있었다면 로컬 값 유지
- (grade_id, field)별 단조 증가 토큰으로 늦게 끝난 저장이 새 입력을 덮어쓰지 않게 함
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from schemas.grades import TERM_FIELDS, ReconciledGrade
from services.grade_store import GradeStore, StoreResult

logger = logging.getLogger(__name__)

Saver = Callable[[int, str, Any], Awaitable[StoreResult]]


@dataclass
class Notification:
    level: str      # "success" | "error"
    message: str


@dataclass
class GradeSheet:
    saver: Saver
    subject_id: Optional[int] = None
    subject_name: Optional[str] = None
    records: List[ReconciledGrade] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    _tokens: Dict[Tuple[int, str], int] = field(default_factory=dict, repr=False)

    # ==========================================================
    # 상태 전환
    # ==========================================================
    def load(self, subject_id: int, subject_name: str, records: Sequence[ReconciledGrade]) -> None:
        self.reset()
        self.subject_id = subject_id
        self.subject_name = subject_name
        self.records = list(records)

    def reset(self) -> None:
        self.subject_id = None
        self.subject_name = None
        self.records = []
        self.notifications = []
        self._tokens = {}

    # ==========================================================
    # 조회 / 로컬 변경
    # ==========================================================
    def get(self, grade_id: int) -> Optional[ReconciledGrade]:
        return next((r for r in self.records if r.id == grade_id), None)

    def _bump(self, grade_id: int, field_name: str) -> int:
        key = (grade_id, field_name)
        self._tokens[key] = self._tokens.get(key, 0) + 1
        return self._tokens[key]

    def _apply(self, grade_id: int, field_name: str, value: Any) -> None:
        self.records = [
            r.model_copy(update={field_name: _cell(value)}) if r.id == grade_id else r
            for r in self.records
        ]

    def edit(self, grade_id: int, field_name: str, value: Any) -> None:
        _check_field(field_name)
        self._bump(grade_id, field_name)
        self._apply(grade_id, field_name, value)

    # ==========================================================
    # 저장
    # ==========================================================
    async def save(self, grade_id: int, field_name: str, value: Any) -> bool:
        _check_field(field_name)
        token = self._bump(grade_id, field_name)

        result = await self.saver(grade_id, field_name, value)

        if not result.ok:
            logger.error(f"Save error for grade {grade_id}.{field_name}: {result.error.message}")
            self.notifications.append(Notification("error", "Failed to save grade"))
            return False

        if self._tokens.get((grade_id, field_name)) == token:
            self._apply(grade_id, field_name, value)
        self.notifications.append(Notification("success", "Grade saved!"))
        return True


def _check_field(field_name: str) -> None:
    if field_name not in TERM_FIELDS:
        raise ValueError(f"Unknown grade field: {field_name}")


def _cell(value: Any) -> Optional[float]:
    # 입력 중인 값: 빈 칸 / 숫자 아님 → 빈 칸으로 표시 (저장 시 검증)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def store_saver(store: GradeStore) -> Saver:
    """동기 GradeStore.update_grade_field → 비동기 saver (기본 executor에서 실행)"""
    async def save(grade_id: int, field_name: str, value: Any) -> StoreResult:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, partial(store.update_grade_field, grade_id, field_name, value)
        )
    return save
