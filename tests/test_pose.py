"""
Pose / Quaternion 단위 테스트
"""

import numpy as np
import pytest
from throw_velocity.measurement.pose import Pose, Quaternion


class TestQuaternion:
    """Quaternion 클래스 테스트"""

    def test_identity(self):
        q = Quaternion.identity()
        assert q.x == 0
        assert q.y == 0
        assert q.z == 0
        assert q.w == 1

    def test_rotate_z_90(self):
        """Z축 90도 회전"""
        q = Quaternion.from_axis_angle(np.array([0, 0, 1]), 90)
        rotated = q.rotate(np.array([1.0, 0.0, 0.0]))
        np.testing.assert_array_almost_equal(rotated, [0, 1, 0])

    def test_inverse(self):
        q = Quaternion.from_axis_angle(np.array([1, 2, 3]), 40)
        product = q * q.inverse()
        np.testing.assert_array_almost_equal(product.to_array(), [0, 0, 0, 1])

    def test_to_angle_axis(self):
        q = Quaternion.from_axis_angle(np.array([0, 0, 1]), 30)
        angle, axis = q.to_angle_axis()
        assert angle == pytest.approx(30.0)
        np.testing.assert_array_almost_equal(axis, [0, 0, 1])

    def test_to_angle_axis_identity(self):
        """회전이 없으면 각도 0, 축 X"""
        angle, axis = Quaternion.identity().to_angle_axis()
        assert angle == 0.0
        np.testing.assert_array_equal(axis, [1, 0, 0])

    def test_to_angle_axis_keeps_long_path(self):
        """각도는 [0, 360] 범위로 반환 (최단 경로로 뒤집지 않음)"""
        q = Quaternion.from_axis_angle(np.array([0, 1, 0]), 270)
        angle, axis = q.to_angle_axis()
        assert angle == pytest.approx(270.0)
        np.testing.assert_array_almost_equal(axis, [0, 1, 0])

    def test_from_euler_single_axis(self):
        q = Quaternion.from_euler_degrees(np.array([0, 90, 0]))
        expected = Quaternion.from_axis_angle(np.array([0, 1, 0]), 90)
        assert abs(q.dot(expected)) == pytest.approx(1.0)

    def test_from_euler_order(self):
        """Z -> X -> Y 순서로 적용"""
        q = Quaternion.from_euler_degrees(np.array([30, 45, 60]))
        qx = Quaternion.from_axis_angle(np.array([1, 0, 0]), 30)
        qy = Quaternion.from_axis_angle(np.array([0, 1, 0]), 45)
        qz = Quaternion.from_axis_angle(np.array([0, 0, 1]), 60)
        expected = qy * qx * qz
        assert abs(q.dot(expected)) == pytest.approx(1.0)


class TestPose:
    """Pose 합성/상대 자세 테스트"""

    def test_multiply_applies_rotation_to_offset(self):
        root = Pose(
            position=np.array([1.0, 0.0, 0.0]),
            rotation=Quaternion.from_axis_angle(np.array([0, 0, 1]), 90)
        )
        offset = Pose(position=np.array([0.5, 0.0, 0.0]))

        world = Pose.multiply(root, offset)

        np.testing.assert_array_almost_equal(world.position, [1.0, 0.5, 0.0])

    def test_delta_round_trip(self):
        """multiply(a, delta(a, b)) == b"""
        a = Pose(
            position=np.array([0.2, -1.0, 3.0]),
            rotation=Quaternion.from_axis_angle(np.array([1, 1, 0]), 35)
        )
        b = Pose(
            position=np.array([1.5, 0.4, -0.3]),
            rotation=Quaternion.from_axis_angle(np.array([0, 1, 1]), -70)
        )

        restored = Pose.multiply(a, Pose.delta(a, b))

        np.testing.assert_array_almost_equal(restored.position, b.position)
        assert abs(restored.rotation.dot(b.rotation)) == pytest.approx(1.0)

    def test_delta_of_same_pose_is_identity(self):
        a = Pose(
            position=np.array([1.0, 2.0, 3.0]),
            rotation=Quaternion.from_axis_angle(np.array([0, 0, 1]), 10)
        )
        offset = Pose.delta(a, a)
        np.testing.assert_array_almost_equal(offset.position, [0, 0, 0])
        assert abs(offset.rotation.w) == pytest.approx(1.0)

    def test_to_dict(self):
        pose = Pose(position=np.array([1.0, 2.0, 3.0]))
        d = pose.to_dict()
        assert d['position'] == [1.0, 2.0, 3.0]
        assert d['rotation']['w'] == 1.0
