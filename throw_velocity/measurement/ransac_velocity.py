"""
ransac_velocity.py - RANSAC 방식 투척 속도 추정

짧은 자세 이력으로부터 놓는 순간(release)의 선속도/각속도를 추정합니다.
추적 지터나 순간적인 추적 손실로 생긴 이상치 샘플에 강건하도록
단순화된 RANSAC(무작위 후보 + 최저 점수 선택)을 사용합니다.

처리 흐름:
1. 매 틱 process_input(): 유효한 루트 자세를 PoseHistory에 기록
2. calculate_throw_velocity(): 이력에서 속도 추정
   - 연속 유효 프레임 < MIN_HIGHCONFIDENCE_SAMPLES: 2점 유한차분
   - 그 외: 선속도/각속도 각각 RANSAC

RANSAC 단계 (S = SAMPLES_COUNT, D = SAMPLES_DEAD_ZONE):
- 슬롯 [D, S+D) 의 모든 쌍 (i < j) 에 대해 sampler로 S×S 상삼각 테이블 구성
- 무작위 쌍 S개를 뽑아 scorer로 테이블 전체와 비교
- 최저 점수 후보 반환 (합의 집합 재추정 없음)

Version: 1.0
"""

import numpy as np
from scipy.spatial.transform import Rotation
from typing import Callable, Optional, Tuple
from dataclasses import dataclass
import time
import logging

from .pose import Pose
from .pose_history import PoseHistory, TimedPose
from ..input.pose_input import PoseInputDevice, TrackingFrame

logger = logging.getLogger(__name__)


SAMPLES_COUNT = 8
SAMPLES_DEAD_ZONE = 2
MIN_HIGHCONFIDENCE_SAMPLES = 2

# sampler(history, offset, idx1, idx2) -> 3-벡터 (정의 불가 시 NaN)
RANSACSampler = Callable[[PoseHistory, Pose, int, int], np.ndarray]
# scorer(sample, samples_table) -> 점수 (낮을수록 좋음)
RANSACScorer = Callable[[np.ndarray, np.ndarray], float]


@dataclass
class ReleaseVelocityInformation:
    """
    투척 속도 추정 결과

    Attributes:
        linear_velocity: [vx, vy, vz] 단위/s
        angular_velocity: 회전축 * 각속력 (rad/s)
        position: 놓는 순간 물체 위치
        valid: 항상 True (최소 2점 추정으로 대체)
    """
    linear_velocity: np.ndarray
    angular_velocity: np.ndarray
    position: np.ndarray
    valid: bool = True

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.linear_velocity))

    @property
    def angular_speed(self) -> float:
        return float(np.linalg.norm(self.angular_velocity))

    def to_dict(self) -> dict:
        """딕셔너리로 변환"""
        return {
            'linear_velocity': self.linear_velocity.tolist(),
            'angular_velocity': self.angular_velocity.tolist(),
            'position': self.position.tolist(),
            'valid': self.valid,
            'speed': self.speed,
            'angular_speed': self.angular_speed
        }


def _undefined_sample() -> np.ndarray:
    return np.full(3, np.nan)


def get_sorted_time_poses(
    history: PoseHistory,
    idx1: int,
    idx2: int
) -> Tuple[TimedPose, TimedPose]:
    """
    두 물리 슬롯을 기록 시각 순으로 정렬

    순환 이후에는 슬롯 번호가 시간 순서와 무관하므로
    실제 timestamp를 비교합니다.

    Returns:
        (older, younger)
    """
    first = history[idx1]
    second = history[idx2]
    if second.timestamp >= first.timestamp:
        return first, second
    return second, first


def linear_velocity_between(
    older: TimedPose,
    younger: TimedPose,
    offset: Pose
) -> Optional[np.ndarray]:
    """오프셋 지점의 유한차분 선속도 (시간차 <= 0 이면 None)"""
    time_shift = younger.timestamp - older.timestamp
    if time_shift <= 0:
        return None

    younger_point = Pose.multiply(younger.pose, offset).position
    older_point = Pose.multiply(older.pose, offset).position
    return (younger_point - older_point) / time_shift


def angular_velocity_between(
    older: TimedPose,
    younger: TimedPose
) -> Optional[np.ndarray]:
    """
    상대 회전의 축-각도 / 경과 시간 (rad/s, 시간차 <= 0 이면 None)
    """
    time_shift = younger.timestamp - older.timestamp
    if time_shift <= 0:
        return None

    delta_rotation = younger.pose.rotation * older.pose.rotation.inverse()
    angle_deg, axis = delta_rotation.to_angle_axis()
    angular_speed = np.deg2rad(angle_deg) / time_shift

    return axis * angular_speed


def velocity_sampler(history: PoseHistory, offset: Pose, idx1: int, idx2: int) -> np.ndarray:
    """두 슬롯 사이의 선속도 샘플"""
    older, younger = get_sorted_time_poses(history, idx1, idx2)
    velocity = linear_velocity_between(older, younger, offset)
    return velocity if velocity is not None else _undefined_sample()


def torque_sampler(history: PoseHistory, offset: Pose, idx1: int, idx2: int) -> np.ndarray:
    """두 슬롯 사이의 각속도 샘플 (오프셋은 회전에 영향 없음)"""
    older, younger = get_sorted_time_poses(history, idx1, idx2)
    torque = angular_velocity_between(older, younger)
    return torque if torque is not None else _undefined_sample()


def _defined_entries(samples_table: np.ndarray) -> np.ndarray:
    """상삼각 테이블에서 값이 정의된 항목만 (N, 3)"""
    rows, cols = np.triu_indices(samples_table.shape[0], k=1)
    entries = samples_table[rows, cols]
    return entries[np.all(np.isfinite(entries), axis=1)]


def score_distance(sample: np.ndarray, samples_table: np.ndarray) -> float:
    """테이블 전체와의 제곱 거리 합"""
    entries = _defined_entries(samples_table)
    return float(np.sum((entries - sample) ** 2))


def score_torque(sample: np.ndarray, samples_table: np.ndarray) -> float:
    """
    테이블 전체와의 |쿼터니언 내적| 합

    각속도 벡터를 오일러 각도(도)로 간주해 쿼터니언으로 바꾼 뒤 비교합니다.
    점수를 최소화하므로 다른 샘플과 가장 덜 비슷한 후보가 선택됩니다.
    선속도의 score_distance(가장 중심적인 후보)와 기준이 다르지만
    기존 동작을 유지합니다.
    """
    entries = _defined_entries(samples_table)
    if len(entries) == 0:
        return 0.0

    # Z, X, Y 순서의 외재적 회전
    sample_quat = Rotation.from_euler(
        'zxy', [sample[2], sample[0], sample[1]], degrees=True
    ).as_quat()
    entry_quats = Rotation.from_euler(
        'zxy', entries[:, [2, 0, 1]], degrees=True
    ).as_quat()

    return float(np.sum(np.abs(entry_quats @ sample_quat)))


def run_robust_estimate(
    history: PoseHistory,
    offset: Pose,
    sampler: RANSACSampler,
    scorer: RANSACScorer,
    sample_count: int = SAMPLES_COUNT,
    dead_zone: int = SAMPLES_DEAD_ZONE,
    rng: Optional[np.random.Generator] = None
) -> Optional[np.ndarray]:
    """
    단순화된 RANSAC 추정

    Args:
        history: 자세 이력
        offset: 루트 -> 측정 지점 로컬 변환
        sampler: 슬롯 쌍 -> 3-벡터 샘플
        scorer: 후보 샘플과 테이블 비교 점수
        sample_count: S
        dead_zone: D
        rng: numpy 난수 생성기

    Returns:
        최저 점수 후보 (모든 후보가 정의 불가하면 None)
    """
    if not callable(sampler) or not callable(scorer):
        raise TypeError("sampler and scorer must be callable")
    if sample_count < 2:
        raise ValueError(f"sample_count must be >= 2, got {sample_count}")
    if dead_zone < 0:
        raise ValueError(f"dead_zone must be >= 0, got {dead_zone}")

    if rng is None:
        rng = np.random.default_rng()

    samples_table = np.full((sample_count, sample_count, 3), np.nan)
    for i in range(sample_count):
        for j in range(i + 1, sample_count):
            sample = np.asarray(
                sampler(history, offset, i + dead_zone, j + dead_zone),
                dtype=np.float64
            )
            if sample.shape != (3,):
                raise ValueError(f"sampler must return a 3-vector, got shape {sample.shape}")
            samples_table[i, j] = sample

    best_sample = None
    best_score = np.inf
    for _ in range(sample_count):
        y = int(rng.integers(0, sample_count - 1))
        x = y + 1 + int(rng.integers(0, sample_count - y - 1))

        sample = samples_table[y, x]
        if not np.all(np.isfinite(sample)):
            continue

        score = scorer(sample, samples_table)
        if score < best_score:
            best_sample = sample
            best_score = score

    if best_sample is None:
        return None

    return best_sample.copy()


class RANSACVelocityCalculator:
    """
    RANSAC 기반 투척 속도 계산기

    추적 대상 하나당 인스턴스 하나를 사용합니다 (이력 공유 없음, 단일 스레드).

    Example:
        >>> calc = RANSACVelocityCalculator(start_time=0.0)
        >>> for frame in frames:
        ...     calc.process_input(frame)
        >>> info = calc.calculate_throw_velocity(object_pose, frames[-1])
        >>> print(f"Speed: {info.speed:.3f}")
    """

    def __init__(
        self,
        pose_input_device: Optional[PoseInputDevice] = None,
        time_provider: Optional[Callable[[], float]] = None,
        sample_count: int = SAMPLES_COUNT,
        dead_zone: int = SAMPLES_DEAD_ZONE,
        min_high_confidence_samples: int = MIN_HIGHCONFIDENCE_SAMPLES,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        start_time: Optional[float] = None
    ):
        """
        Args:
            pose_input_device: update()에서 폴링할 입력 장치 (선택)
            time_provider: 현재 시각 함수 (기본: time.monotonic)
            sample_count: RANSAC 샘플 수 S
            dead_zone: 제외할 최근 슬롯 수 D
            min_high_confidence_samples: RANSAC 사용 최소 연속 유효 프레임
            rng: 난수 생성기 (None이면 seed로 생성)
            seed: 난수 시드
            start_time: 이력 초기 시각 (None이면 time_provider())
        """
        if sample_count < 2:
            raise ValueError(f"sample_count must be >= 2, got {sample_count}")
        if dead_zone < 0:
            raise ValueError(f"dead_zone must be >= 0, got {dead_zone}")

        self.pose_input_device = pose_input_device
        self._time_provider = time_provider or time.monotonic

        self.sample_count = sample_count
        self.dead_zone = dead_zone
        self.min_high_confidence_samples = min_high_confidence_samples
        self._rng = rng if rng is not None else np.random.default_rng(seed)

        if start_time is None:
            start_time = self._time_provider()
        self.reset(start_time)

        logger.info(
            f"RANSACVelocityCalculator initialized: samples={sample_count}, "
            f"dead_zone={dead_zone}, capacity={self.capacity}"
        )

    @classmethod
    def from_config(cls, config, **kwargs) -> 'RANSACVelocityCalculator':
        """EstimatorConfig에서 생성"""
        return cls(
            sample_count=config.sample_count,
            dead_zone=config.dead_zone,
            min_high_confidence_samples=config.min_high_confidence_samples,
            seed=config.seed,
            **kwargs
        )

    @property
    def capacity(self) -> int:
        return self.sample_count + self.dead_zone

    @property
    def history(self) -> PoseHistory:
        return self._poses

    @property
    def consecutive_valid_frames(self) -> int:
        return self._consecutive_valid_frames

    def set_time_provider(self, time_provider: Callable[[], float]):
        """시각 함수 교체 (테스트용 가상 시계 등)"""
        self._time_provider = time_provider

    def reset(self, timestamp: Optional[float] = None):
        """이력을 단위 자세로 다시 채움"""
        if timestamp is None:
            timestamp = self._time_provider()

        self._poses = PoseHistory(self.capacity, Pose.identity(), timestamp=timestamp)
        self._consecutive_valid_frames = 0
        self._previous_position_id = 0.0
        self._last_time = timestamp

    def update(self) -> bool:
        """입력 장치를 폴링하여 한 틱 처리 (매 프레임 호출)"""
        return self.process_input(self._poll_device())

    def process_input(self, frame: TrackingFrame) -> bool:
        """
        한 틱의 추적 입력 처리

        - 같은 시각의 틱은 무시 (한 프레임 내 중복 호출 허용)
        - 추적 무효/저신뢰도/위치 정지 시 연속 유효 프레임 초기화
        - 공백 이후 첫 유효 프레임이면 마지막 샘플을 이전 틱 시각으로 반복 기록

        Returns:
            새 자세가 기록되었는지 여부
        """
        if self._poses.peek().timestamp == frame.timestamp:
            return False

        inserted = False
        root_pose = frame.root_pose

        if (not frame.is_trackable
                or self._position_id(root_pose) == self._previous_position_id):
            if self._consecutive_valid_frames > 0:
                logger.debug(f"Tracking gap at t={frame.timestamp:.4f}")
            self._consecutive_valid_frames = 0
        else:
            if self._consecutive_valid_frames == 0:
                # 공백 구간에 걸친 속도 급증 방지
                self._poses.add(self._poses.peek().with_timestamp(self._last_time))
                logger.debug(f"Gap repair: repeated last sample at t={self._last_time:.4f}")

            self._consecutive_valid_frames += 1
            self._previous_position_id = self._position_id(root_pose)
            self._poses.add(TimedPose(timestamp=frame.timestamp, pose=root_pose))
            inserted = True

        self._last_time = frame.timestamp
        return inserted

    def calculate_throw_velocity(
        self,
        object_pose: Pose,
        frame: Optional[TrackingFrame] = None
    ) -> ReleaseVelocityInformation:
        """
        현재 시점의 투척 속도 계산

        Args:
            object_pose: 던지는 물체(잡기 지점)의 현재 자세
            frame: 현재 틱 입력 (None이면 입력 장치 폴링)

        Returns:
            ReleaseVelocityInformation
        """
        if frame is None:
            frame = self._poll_device()

        self.process_input(frame)

        root_pose = frame.root_pose if frame.root_pose is not None else self._poses.peek().pose
        offset = Pose.delta(root_pose, object_pose)

        velocity = None
        torque = None

        if self._consecutive_valid_frames >= self.min_high_confidence_samples:
            velocity = run_robust_estimate(
                self._poses, offset, velocity_sampler, score_distance,
                self.sample_count, self.dead_zone, self._rng
            )
            torque = run_robust_estimate(
                self._poses, offset, torque_sampler, score_torque,
                self.sample_count, self.dead_zone, self._rng
            )
            if velocity is None or torque is None:
                logger.warning("No defined RANSAC sample, using last two poses")
        else:
            logger.debug(
                f"Low confidence history ({self._consecutive_valid_frames} frames), "
                f"using last two poses"
            )

        if velocity is None or torque is None:
            last_velocity, last_torque = self._last_pose_velocity(offset)
            velocity = last_velocity if velocity is None else velocity
            torque = last_torque if torque is None else torque

        return ReleaseVelocityInformation(
            linear_velocity=velocity,
            angular_velocity=torque,
            position=object_pose.position.copy(),
            valid=True
        )

    def _last_pose_velocity(self, offset: Pose) -> Tuple[np.ndarray, np.ndarray]:
        """최근 두 이력의 2점 유한차분"""
        younger = self._poses.peek(0)
        older = self._poses.peek(-1)

        velocity = linear_velocity_between(older, younger, offset)
        torque = angular_velocity_between(older, younger)

        if velocity is None or torque is None:
            logger.warning(
                f"Zero time delta between last poses (t={younger.timestamp:.4f}), "
                f"returning zero velocity"
            )
            return np.zeros(3), np.zeros(3)

        return velocity, torque

    def _poll_device(self) -> TrackingFrame:
        if self.pose_input_device is None:
            raise RuntimeError("No PoseInputDevice attached. Pass a TrackingFrame instead.")

        device = self.pose_input_device
        is_valid = device.is_input_valid
        root_pose = device.get_root_pose() if is_valid else None

        return TrackingFrame(
            timestamp=self._time_provider(),
            root_pose=root_pose,
            is_valid=is_valid,
            is_high_confidence=device.is_high_confidence
        )

    @staticmethod
    def _position_id(pose: Pose) -> float:
        """위치 변화 감지용 지문 (위치 제곱 크기, 같은 구면 위 위치는 구분 못함)"""
        return float(np.dot(pose.position, pose.position))
