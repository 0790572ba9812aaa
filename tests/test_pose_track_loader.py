"""
PoseTrackLoader / 합성 트랙 테스트
"""

import numpy as np
import pandas as pd
import pytest
from throw_velocity.input.pose_track_loader import (
    PoseTrackLoader,
    PoseTrackReplayDevice,
    save_track
)
from throw_velocity.input.synthetic_track import generate_track


class TestSyntheticTrack:
    """합성 트랙 생성 테스트"""

    def test_constant_motion(self):
        frames = generate_track(5, dt=0.1, start_position=(1.0, 0.0, 0.0),
                                linear_velocity=(2.0, 0.0, 0.0))

        assert len(frames) == 5
        assert frames[3].timestamp == pytest.approx(0.3)
        np.testing.assert_array_almost_equal(frames[3].root_pose.position, [1.6, 0.0, 0.0])

    def test_rotation(self):
        frames = generate_track(3, dt=0.5, angular_velocity=(0.0, 0.0, np.pi / 2))
        angle, axis = frames[2].root_pose.rotation.to_angle_axis()
        assert angle == pytest.approx(90.0)
        np.testing.assert_array_almost_equal(axis, [0, 0, 1])

    def test_dropped_frames(self):
        frames = generate_track(5, dropped_frames=[2])
        assert not frames[2].is_valid
        assert frames[2].root_pose is None
        assert not frames[2].is_trackable
        assert frames[3].is_trackable

    def test_seed_reproducible(self):
        a = generate_track(5, position_noise=0.01, seed=42)
        b = generate_track(5, position_noise=0.01, seed=42)
        for fa, fb in zip(a, b):
            np.testing.assert_array_equal(fa.root_pose.position, fb.root_pose.position)


class TestPoseTrackLoader:
    """CSV 트랙 로더 테스트"""

    @pytest.fixture
    def track_path(self, tmp_path):
        frames = generate_track(
            6, dt=0.01, linear_velocity=(1.0, 0.0, 0.0),
            angular_velocity=(0.0, 1.0, 0.0), dropped_frames=[4]
        )
        path = tmp_path / "track.csv"
        save_track(frames, str(path))
        return path

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PoseTrackLoader(str(tmp_path / "missing.csv"))

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        pd.DataFrame({'timestamp': [0.0], 'x': [0.0]}).to_csv(path, index=False)
        with pytest.raises(ValueError):
            PoseTrackLoader(str(path))

    def test_load(self, track_path):
        loader = PoseTrackLoader(str(track_path))

        assert len(loader) == 6
        assert loader.duration == pytest.approx(0.05)

        frame = loader.load_frame(3)
        assert frame.is_valid
        assert frame.timestamp == pytest.approx(0.03)
        np.testing.assert_array_almost_equal(frame.root_pose.position, [0.03, 0.0, 0.0])

    def test_dropped_frame_round_trip(self, track_path):
        frames = list(PoseTrackLoader(str(track_path)))
        assert not frames[4].is_valid
        assert frames[4].root_pose is None

    def test_optional_flag_columns(self, tmp_path):
        """valid / high_confidence 컬럼이 없으면 True"""
        path = tmp_path / "minimal.csv"
        pd.DataFrame({
            'timestamp': [0.0, 0.01],
            'x': [0.0, 0.01], 'y': [0.0, 0.0], 'z': [0.0, 0.0],
            'qx': [0.0, 0.0], 'qy': [0.0, 0.0], 'qz': [0.0, 0.0], 'qw': [1.0, 1.0]
        }).to_csv(path, index=False)

        frames = list(PoseTrackLoader(str(path)))

        assert all(f.is_valid and f.is_high_confidence for f in frames)


class TestReplayDevice:
    """재생 장치 테스트"""

    def test_empty(self):
        with pytest.raises(ValueError):
            PoseTrackReplayDevice([])

    def test_advance(self):
        frames = generate_track(3, dt=0.01, dropped_frames=[1])
        device = PoseTrackReplayDevice(frames)

        assert device.time_provider() == 0.0
        assert device.is_input_valid

        assert device.advance()
        assert not device.is_input_valid
        assert device.get_root_pose() is None

        assert device.advance()
        assert not device.advance()
        assert device.time_provider() == pytest.approx(0.02)
