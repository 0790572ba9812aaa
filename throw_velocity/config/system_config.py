"""
system_config.py - 시스템 설정 관리

throw_velocity의 추정기/합성 트랙/출력 설정을 통합 관리합니다.

Version: 1.0
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class EstimatorConfig:
    """RANSAC 속도 추정 설정"""
    sample_count: int = 8                 # S
    dead_zone: int = 2                    # D, 최근 슬롯 제외 수
    min_high_confidence_samples: int = 2  # RANSAC 사용 최소 연속 유효 프레임
    seed: Optional[int] = None            # None이면 비결정적

    @property
    def capacity(self) -> int:
        """이력 버퍼 용량 (S + D)"""
        return self.sample_count + self.dead_zone


@dataclass
class TrackConfig:
    """합성 트랙 설정"""
    fps: float = 100.0
    num_frames: int = 30
    linear_velocity: List[float] = field(default_factory=lambda: [1.0, 0.0, 0.0])   # 단위/s
    angular_velocity: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])  # rad/s
    position_noise: float = 0.0
    outlier_ratio: float = 0.0
    outlier_magnitude: float = 0.5
    dropped_frames: List[int] = field(default_factory=list)

    @property
    def dt(self) -> float:
        return 1.0 / self.fps


@dataclass
class OutputConfig:
    """출력 설정"""
    log_level: str = "INFO"


@dataclass
class SystemConfig:
    """throw_velocity 전체 설정"""
    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    track: TrackConfig = field(default_factory=TrackConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'estimator': asdict(self.estimator),
            'track': asdict(self.track),
            'output': asdict(self.output)
        }

    def save(self, filepath: str):
        """설정을 YAML 파일로 저장"""
        with open(filepath, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False)

        logger.info(f"Config saved to {filepath}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'SystemConfig':
        """딕셔너리에서 설정 생성"""
        return cls(
            estimator=EstimatorConfig(**(d.get('estimator') or {})),
            track=TrackConfig(**(d.get('track') or {})),
            output=OutputConfig(**(d.get('output') or {}))
        )


def load_config(filepath: str) -> SystemConfig:
    """
    YAML 파일에서 설정 로드

    Args:
        filepath: 설정 파일 경로

    Returns:
        SystemConfig: 로드된 설정 (파일이 없으면 기본값)
    """
    path = Path(filepath)

    if not path.exists():
        logger.warning(f"Config file not found: {filepath}, using defaults")
        return SystemConfig()

    with open(path, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return SystemConfig()

    return SystemConfig.from_dict(config_dict)


def create_default_config(save_path: Optional[str] = None) -> SystemConfig:
    """
    기본 설정 생성

    Args:
        save_path: 저장 경로 (None이면 저장 안함)
    """
    config = SystemConfig()

    if save_path:
        config.save(save_path)

    return config
