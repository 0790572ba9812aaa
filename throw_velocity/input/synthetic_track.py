"""
synthetic_track.py - 합성 자세 트랙 생성

등속 직선 운동 + 고정축 등각속도 회전을 하는 루트 자세 시퀀스를 만듭니다.
지터, 이상치 스파이크, 추적 누락 틱을 섞어 추정기 검증에 사용합니다.
"""

import numpy as np
from typing import List, Optional, Sequence
import logging

from ..measurement.pose import Pose, Quaternion
from .pose_input import TrackingFrame

logger = logging.getLogger(__name__)


def generate_track(
    num_frames: int,
    dt: float = 0.01,
    start_time: float = 0.0,
    start_position: Sequence[float] = (0.0, 0.0, 0.0),
    linear_velocity: Sequence[float] = (1.0, 0.0, 0.0),
    angular_velocity: Sequence[float] = (0.0, 0.0, 0.0),
    position_noise: float = 0.0,
    outlier_ratio: float = 0.0,
    outlier_magnitude: float = 0.5,
    dropped_frames: Optional[Sequence[int]] = None,
    seed: Optional[int] = None
) -> List[TrackingFrame]:
    """
    합성 트랙 생성

    Args:
        num_frames: 프레임 수 (프레임 i의 시각 = start_time + i * dt)
        dt: 프레임 간격 (초)
        start_position: 프레임 0의 위치
        linear_velocity: 선속도 (단위/s)
        angular_velocity: 각속도 벡터 (rad/s), 방향 = 회전축
        position_noise: 위치 가우시안 지터 표준편차
        outlier_ratio: 이상치 스파이크 프레임 비율
        outlier_magnitude: 이상치 위치 오차 크기
        dropped_frames: 추적 무효로 표시할 프레임 인덱스
        seed: 난수 시드

    Returns:
        TrackingFrame 리스트
    """
    rng = np.random.default_rng(seed)
    start = np.asarray(start_position, dtype=np.float64)
    velocity = np.asarray(linear_velocity, dtype=np.float64)
    omega = np.asarray(angular_velocity, dtype=np.float64)
    omega_norm = np.linalg.norm(omega)
    dropped = set(dropped_frames or [])

    frames = []
    for i in range(num_frames):
        elapsed = i * dt
        position = start + velocity * elapsed

        if position_noise > 0:
            position = position + rng.normal(0.0, position_noise, 3)
        if outlier_ratio > 0 and rng.random() < outlier_ratio:
            direction = rng.normal(size=3)
            position = position + direction / np.linalg.norm(direction) * outlier_magnitude

        if omega_norm > 0:
            rotation = Quaternion.from_axis_angle(omega, np.rad2deg(omega_norm * elapsed))
        else:
            rotation = Quaternion.identity()

        is_valid = i not in dropped
        frames.append(TrackingFrame(
            timestamp=start_time + elapsed,
            root_pose=Pose(position=position, rotation=rotation) if is_valid else None,
            is_valid=is_valid,
            is_high_confidence=is_valid
        ))

    logger.debug(f"Generated synthetic track: {num_frames} frames, dt={dt}, dropped={len(dropped)}")
    return frames
