"""
input 모듈 - 추적 입력 (장치 프로토콜, 기록 트랙, 합성 트랙)
"""

from .pose_input import TrackingFrame, PoseInputDevice
from .pose_track_loader import PoseTrackLoader, PoseTrackReplayDevice, save_track
from .synthetic_track import generate_track

__all__ = [
    'TrackingFrame',
    'PoseInputDevice',
    'PoseTrackLoader',
    'PoseTrackReplayDevice',
    'save_track',
    'generate_track',
]
