"""
SystemConfig 테스트
"""

import pytest
from throw_velocity.config.system_config import (
    SystemConfig,
    EstimatorConfig,
    TrackConfig,
    load_config,
    create_default_config
)


class TestSystemConfig:
    """설정 생성/저장 테스트"""

    def test_defaults(self):
        config = SystemConfig()
        assert config.estimator.sample_count == 8
        assert config.estimator.dead_zone == 2
        assert config.estimator.min_high_confidence_samples == 2
        assert config.estimator.capacity == 10
        assert config.output.log_level == "INFO"

    def test_track_dt(self):
        assert TrackConfig(fps=50.0).dt == pytest.approx(0.02)

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "config.yaml"
        config = SystemConfig(
            estimator=EstimatorConfig(sample_count=6, dead_zone=1, seed=7),
            track=TrackConfig(num_frames=12, dropped_frames=[3])
        )
        config.save(str(path))

        loaded = load_config(str(path))

        assert loaded.estimator.sample_count == 6
        assert loaded.estimator.dead_zone == 1
        assert loaded.estimator.seed == 7
        assert loaded.track.num_frames == 12
        assert loaded.track.dropped_frames == [3]

    def test_partial_dict(self):
        config = SystemConfig.from_dict({'estimator': {'dead_zone': 3}})
        assert config.estimator.dead_zone == 3
        assert config.estimator.sample_count == 8
        assert config.track.fps == 100.0

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "none.yaml"))
        assert config.estimator.capacity == 10

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)).estimator.sample_count == 8

    def test_create_default_config(self, tmp_path):
        path = tmp_path / "default.yaml"
        create_default_config(str(path))
        assert path.exists()
        assert load_config(str(path)).output.log_level == "INFO"
