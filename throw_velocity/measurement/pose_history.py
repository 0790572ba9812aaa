"""
pose_history.py - 고정 용량 순환 자세 이력

최근 N개의 시간 태그 자세(TimedPose)를 보관합니다.
- 삽입 O(1), 가장 오래된 항목을 덮어씀
- 생성 시 모든 슬롯을 기본 자세로 채워 항상 C개의 슬롯이 유효

Version: 1.0
"""

from dataclasses import dataclass
from typing import List
import logging

from .pose import Pose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimedPose:
    """
    시간 태그 자세

    Attributes:
        timestamp: 시각 (초, 단조 비감소)
        pose: 루트 자세
    """
    timestamp: float
    pose: Pose

    def with_timestamp(self, timestamp: float) -> 'TimedPose':
        """같은 자세를 다른 시각으로 복제"""
        return TimedPose(timestamp=timestamp, pose=self.pose)


class PoseHistory:
    """
    순환 버퍼 기반 자세 이력

    head는 가장 최근에 기록된 슬롯을 가리킵니다.
    peek(0)은 최신 항목, peek(-1)은 그 직전 항목입니다.

    Example:
        >>> history = PoseHistory(10, Pose.identity(), timestamp=0.0)
        >>> history.add(TimedPose(0.01, pose))
        >>> latest = history.peek()
    """

    def __init__(self, capacity: int, default_pose: Pose, timestamp: float = 0.0):
        """
        Args:
            capacity: 슬롯 수 (1 이상)
            default_pose: 초기 슬롯을 채울 자세
            timestamp: 초기 슬롯의 시각
        """
        if capacity < 1:
            raise ValueError(f"PoseHistory capacity must be >= 1, got {capacity}")

        self._capacity = capacity
        sentinel = TimedPose(timestamp=timestamp, pose=default_pose)
        self._buffer: List[TimedPose] = [sentinel] * capacity
        self._head = capacity - 1

    def add(self, timed_pose: TimedPose):
        """가장 오래된 슬롯을 덮어쓰고 head 전진"""
        self._head = (self._head + 1) % self._capacity
        self._buffer[self._head] = timed_pose

    def peek(self, offset: int = 0) -> TimedPose:
        """
        head 기준 상대 조회

        Args:
            offset: 0 = 최신, 음수 = 과거 방향 (모든 정수 허용)
        """
        return self._buffer[(self._head + offset) % self._capacity]

    def __getitem__(self, index: int) -> TimedPose:
        """물리 슬롯 직접 조회 (head와 무관)"""
        return self._buffer[index % self._capacity]

    def __len__(self) -> int:
        return self._capacity

    @property
    def capacity(self) -> int:
        return self._capacity
