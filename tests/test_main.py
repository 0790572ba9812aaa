"""
CLI / 재생 파이프라인 테스트
"""

import json
import sys

import numpy as np
import pytest
from throw_velocity import main as cli
from throw_velocity.config.system_config import SystemConfig, EstimatorConfig, TrackConfig
from throw_velocity.input.pose_track_loader import save_track
from throw_velocity.input.synthetic_track import generate_track


class TestReplayAndRelease:
    """재생 후 release 테스트"""

    def test_synthetic_release(self):
        config = SystemConfig(
            estimator=EstimatorConfig(seed=0),
            track=TrackConfig(num_frames=20, linear_velocity=[2.0, 0.0, 0.0])
        )
        frames = cli.build_synthetic_frames(config, seed=0)

        info = cli.replay_and_release(frames, config)

        np.testing.assert_allclose(info.linear_velocity, [2.0, 0.0, 0.0], atol=1e-6)

    def test_release_time(self):
        """release_time 이후 프레임은 재생하지 않음"""
        config = SystemConfig(estimator=EstimatorConfig(seed=1))
        frames = generate_track(30, dt=0.01, linear_velocity=(1.0, 0.0, 0.0))

        info = cli.replay_and_release(frames, config, release_time=0.145)

        np.testing.assert_array_almost_equal(info.position, [0.15, 0.0, 0.0])
        assert info.speed == pytest.approx(1.0, rel=0.01)

    def test_release_on_dropped_frame(self):
        """마지막 프레임이 추적 실패여도 결과 제공"""
        config = SystemConfig(estimator=EstimatorConfig(seed=2))
        frames = generate_track(15, dt=0.01, dropped_frames=[14])

        info = cli.replay_and_release(frames, config)

        assert info.valid
        np.testing.assert_array_almost_equal(info.position, frames[13].root_pose.position)


class TestMain:
    """CLI 테스트"""

    def test_synthetic(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, 'argv', ['throw_velocity', '--synthetic', '--seed', '3'])
        cli.main()

        result = json.loads(capsys.readouterr().out)
        assert result['valid'] is True
        assert result['speed'] == pytest.approx(1.0, rel=0.01)

    def test_track_file(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "track.csv"
        save_track(generate_track(20, dt=0.01, linear_velocity=(0.0, 0.5, 0.0)), str(path))

        monkeypatch.setattr(sys, 'argv', ['throw_velocity', '--track', str(path), '--seed', '4'])
        cli.main()

        result = json.loads(capsys.readouterr().out)
        np.testing.assert_allclose(result['linear_velocity'], [0.0, 0.5, 0.0], atol=1e-6)
