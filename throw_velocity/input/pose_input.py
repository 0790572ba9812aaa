"""
pose_input.py - 외부 자세 입력 인터페이스

추적 장치(손 추적, 컨트롤러 등)로부터 매 틱 들어오는 입력을
TrackingFrame으로 표현하고, 장치 폴링용 프로토콜을 정의합니다.

Version: 1.0
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from ..measurement.pose import Pose


@dataclass(frozen=True)
class TrackingFrame:
    """
    단일 틱의 추적 입력

    Attributes:
        timestamp: 현재 시각 (초)
        root_pose: 추적 루트 자세 (추적 실패 시 None)
        is_valid: 추적 유효 여부
        is_high_confidence: 고신뢰도 여부
    """
    timestamp: float
    root_pose: Optional[Pose] = None
    is_valid: bool = True
    is_high_confidence: bool = True

    @property
    def is_trackable(self) -> bool:
        """자세를 이력에 기록할 수 있는 입력인지"""
        return self.is_valid and self.is_high_confidence and self.root_pose is not None


class PoseInputDevice(Protocol):
    """
    자세 입력 장치 프로토콜

    RANSACVelocityCalculator.update()가 매 틱 폴링합니다.
    """

    @property
    def is_input_valid(self) -> bool:
        ...

    @property
    def is_high_confidence(self) -> bool:
        ...

    def get_root_pose(self) -> Optional[Pose]:
        ...
