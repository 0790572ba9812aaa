"""
throw_velocity 메인 실행

기록된 CSV 자세 트랙 또는 합성 트랙을 재생하며 매 틱 이력을 갱신하고,
놓는 시점(release)에서 투척 속도를 추정합니다.

사용법:
    # 합성 트랙 (설정 파일의 track 섹션 사용)
    throw_velocity --synthetic --config config.yaml

    # 기록된 트랙, 0.25초 시점에 놓기
    throw_velocity --track throw_001.csv --release-time 0.25
"""

import argparse
import json
import logging
from typing import List, Optional

from .config.system_config import SystemConfig, load_config
from .input.pose_input import TrackingFrame
from .input.pose_track_loader import PoseTrackLoader, PoseTrackReplayDevice, save_track
from .input.synthetic_track import generate_track
from .measurement.ransac_velocity import RANSACVelocityCalculator, ReleaseVelocityInformation

logger = logging.getLogger(__name__)


def build_synthetic_frames(config: SystemConfig, seed: Optional[int] = None) -> List[TrackingFrame]:
    """설정의 track 섹션으로 합성 트랙 생성"""
    track = config.track
    return generate_track(
        num_frames=track.num_frames,
        dt=track.dt,
        linear_velocity=track.linear_velocity,
        angular_velocity=track.angular_velocity,
        position_noise=track.position_noise,
        outlier_ratio=track.outlier_ratio,
        outlier_magnitude=track.outlier_magnitude,
        dropped_frames=track.dropped_frames,
        seed=seed
    )


def replay_and_release(
    frames: List[TrackingFrame],
    config: SystemConfig,
    release_time: Optional[float] = None
) -> ReleaseVelocityInformation:
    """
    프레임을 재생하고 release 시점에 속도 계산

    Args:
        frames: 재생할 프레임
        config: 시스템 설정
        release_time: 놓는 시각 (None이면 마지막 프레임)
    """
    device = PoseTrackReplayDevice(frames)
    calculator = RANSACVelocityCalculator.from_config(
        config.estimator,
        pose_input_device=device,
        time_provider=device.time_provider
    )

    # 첫 프레임 시각은 초기 이력 시각과 같아 기록되지 않음
    while True:
        calculator.update()
        if release_time is not None and device.current_frame.timestamp >= release_time:
            break
        if not device.advance():
            break

    release_frame = device.current_frame
    object_pose = release_frame.root_pose
    if object_pose is None:
        object_pose = calculator.history.peek().pose

    info = calculator.calculate_throw_velocity(object_pose)
    logger.info(
        f"Release at t={release_frame.timestamp:.3f}s: "
        f"speed={info.speed:.3f}, angular_speed={info.angular_speed:.3f} rad/s, "
        f"valid_frames={calculator.consecutive_valid_frames}"
    )
    return info


def main():
    """메인 실행"""
    parser = argparse.ArgumentParser(
        description='throw_velocity: RANSAC 기반 투척 속도 추정'
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--track', type=str,
                        help='기록된 자세 트랙 CSV 경로')
    source.add_argument('--synthetic', action='store_true',
                        help='설정의 합성 트랙 사용')
    parser.add_argument('--config', type=str, default=None,
                        help='설정 파일 경로 (YAML)')
    parser.add_argument('--release-time', type=float, default=None,
                        help='놓는 시각 (초, 기본: 마지막 프레임)')
    parser.add_argument('--seed', type=int, default=None,
                        help='난수 시드 (RANSAC 및 합성 트랙)')
    parser.add_argument('--save-track', type=str, default=None,
                        help='재생한 트랙을 CSV로 저장')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='상세 로그 출력')

    args = parser.parse_args()

    config = load_config(args.config) if args.config else SystemConfig()
    if args.seed is not None:
        config.estimator.seed = args.seed

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.output.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.track:
        frames = list(PoseTrackLoader(args.track))
    else:
        frames = build_synthetic_frames(config, seed=args.seed)
        logger.info(f"Synthetic track: {len(frames)} frames at {config.track.fps:.0f} Hz")

    if args.save_track:
        save_track(frames, args.save_track)

    info = replay_and_release(frames, config, release_time=args.release_time)

    print(json.dumps(info.to_dict(), indent=2))


if __name__ == "__main__":
    main()
