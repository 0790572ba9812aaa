"""
pose_track_loader.py - 기록된 자세 트랙 로더

CSV로 저장된 루트 자세 트랙을 읽어 TrackingFrame 단위로 제공합니다.
재생 장치(PoseTrackReplayDevice)로 감싸면 RANSACVelocityCalculator.update()가
실제 추적 장치처럼 폴링할 수 있습니다.

CSV 컬럼:
    timestamp, x, y, z, qx, qy, qz, qw [, valid, high_confidence]

Version: 1.0
"""

import numpy as np
import pandas as pd
from typing import Iterator, List, Optional
from pathlib import Path
import logging

from ..measurement.pose import Pose, Quaternion
from .pose_input import TrackingFrame

logger = logging.getLogger(__name__)

POSE_COLUMNS = ['timestamp', 'x', 'y', 'z', 'qx', 'qy', 'qz', 'qw']
FLAG_COLUMNS = ['valid', 'high_confidence']


class PoseTrackLoader:
    """
    CSV 자세 트랙 로더

    Example:
        >>> loader = PoseTrackLoader("throw_001.csv")
        >>> for frame in loader:
        ...     calc.process_input(frame)
    """

    def __init__(self, track_path: str):
        self.track_path = Path(track_path)

        if not self.track_path.exists():
            raise FileNotFoundError(f"Pose track not found: {track_path}")

        self._load_track()

        logger.info(f"PoseTrackLoader: {len(self)} frames from {self.track_path.name}")

    def _load_track(self):
        """CSV 로드 및 검증"""
        df = pd.read_csv(self.track_path)

        missing = [c for c in POSE_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Pose track missing columns: {missing}")

        for column in FLAG_COLUMNS:
            if column not in df.columns:
                df[column] = True
            df[column] = df[column].astype(bool)

        # 위치가 비어 있는 행은 추적 실패로 간주
        missing_pose = df[POSE_COLUMNS[1:]].isna().any(axis=1)
        df.loc[missing_pose, 'valid'] = False

        self._df = df.sort_values('timestamp', kind='stable').reset_index(drop=True)

    def __len__(self) -> int:
        return len(self._df)

    def __iter__(self) -> Iterator[TrackingFrame]:
        for idx in range(len(self)):
            yield self.load_frame(idx)

    def load_frame(self, idx: int) -> TrackingFrame:
        """인덱스의 프레임 로드"""
        row = self._df.iloc[idx]
        is_valid = bool(row['valid'])

        root_pose = None
        if is_valid:
            root_pose = Pose(
                position=np.array([row['x'], row['y'], row['z']], dtype=np.float64),
                rotation=Quaternion(
                    x=float(row['qx']), y=float(row['qy']),
                    z=float(row['qz']), w=float(row['qw'])
                ).normalize()
            )

        return TrackingFrame(
            timestamp=float(row['timestamp']),
            root_pose=root_pose,
            is_valid=is_valid,
            is_high_confidence=bool(row['high_confidence'])
        )

    @property
    def duration(self) -> float:
        """트랙 길이 (초)"""
        if len(self) == 0:
            return 0.0
        return float(self._df['timestamp'].iloc[-1] - self._df['timestamp'].iloc[0])


class PoseTrackReplayDevice:
    """
    프레임 시퀀스를 재생하는 PoseInputDevice

    advance()로 한 프레임씩 진행하고, time_provider를 계산기에 넘기면
    현재 프레임 시각이 시계로 사용됩니다.
    """

    def __init__(self, frames: List[TrackingFrame]):
        if not frames:
            raise ValueError("Replay device needs at least one frame")
        self._frames = list(frames)
        self._index = 0

    @property
    def current_frame(self) -> TrackingFrame:
        return self._frames[self._index]

    @property
    def is_input_valid(self) -> bool:
        return self.current_frame.is_valid

    @property
    def is_high_confidence(self) -> bool:
        return self.current_frame.is_high_confidence

    def get_root_pose(self) -> Optional[Pose]:
        return self.current_frame.root_pose

    def time_provider(self) -> float:
        return self.current_frame.timestamp

    def advance(self) -> bool:
        """다음 프레임으로 이동 (끝이면 False)"""
        if self._index + 1 >= len(self._frames):
            return False
        self._index += 1
        return True


def save_track(frames: List[TrackingFrame], filepath: str):
    """TrackingFrame 리스트를 CSV로 저장"""
    rows = []
    for frame in frames:
        pose = frame.root_pose
        if pose is not None:
            position = pose.position
            quat = pose.rotation.to_array()
        else:
            position = np.full(3, np.nan)
            quat = np.full(4, np.nan)

        rows.append({
            'timestamp': frame.timestamp,
            'x': position[0], 'y': position[1], 'z': position[2],
            'qx': quat[0], 'qy': quat[1], 'qz': quat[2], 'qw': quat[3],
            'valid': frame.is_valid,
            'high_confidence': frame.is_high_confidence
        })

    pd.DataFrame(rows, columns=POSE_COLUMNS + FLAG_COLUMNS).to_csv(filepath, index=False)
    logger.info(f"Pose track saved to {filepath}")
