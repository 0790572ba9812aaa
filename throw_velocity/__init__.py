"""
throw_velocity - 자세 이력 기반 강건한 투척 속도 추정

주요 특징:
- 고정 용량 순환 자세 이력 (O(1) 삽입/조회)
- 단순화된 RANSAC 선속도/각속도 추정
- 추적 공백 복구 및 저신뢰도 구간 2점 유한차분 대체

Version: 1.0
"""

__version__ = "1.0.0"

from .measurement.pose import Pose, Quaternion
from .measurement.pose_history import PoseHistory, TimedPose
from .measurement.ransac_velocity import (
    RANSACVelocityCalculator,
    ReleaseVelocityInformation,
    run_robust_estimate
)
from .input.pose_input import TrackingFrame, PoseInputDevice
from .config.system_config import SystemConfig, EstimatorConfig, load_config

__all__ = [
    'Pose',
    'Quaternion',
    'PoseHistory',
    'TimedPose',
    'RANSACVelocityCalculator',
    'ReleaseVelocityInformation',
    'run_robust_estimate',
    'TrackingFrame',
    'PoseInputDevice',
    'SystemConfig',
    'EstimatorConfig',
    'load_config',
]
