"""
measurement 모듈 - 자세 이력 및 투척 속도 추정

주요 기능:
- 쿼터니언/자세 합성 및 상대 자세
- 고정 용량 순환 자세 이력
- RANSAC 방식 선속도/각속도 추정 (2점 유한차분 대체 포함)
"""

from .pose import Pose, Quaternion
from .pose_history import PoseHistory, TimedPose
from .ransac_velocity import (
    RANSACVelocityCalculator,
    ReleaseVelocityInformation,
    run_robust_estimate,
    velocity_sampler,
    torque_sampler,
    score_distance,
    score_torque,
    SAMPLES_COUNT,
    SAMPLES_DEAD_ZONE,
    MIN_HIGHCONFIDENCE_SAMPLES
)

__all__ = [
    'Pose',
    'Quaternion',
    'PoseHistory',
    'TimedPose',
    'RANSACVelocityCalculator',
    'ReleaseVelocityInformation',
    'run_robust_estimate',
    'velocity_sampler',
    'torque_sampler',
    'score_distance',
    'score_torque',
    'SAMPLES_COUNT',
    'SAMPLES_DEAD_ZONE',
    'MIN_HIGHCONFIDENCE_SAMPLES',
]
