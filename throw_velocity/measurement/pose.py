"""
pose.py - 강체 자세(Pose) 및 쿼터니언 연산

손/컨트롤러 루트 자세와 잡기 지점(grab point) 오프셋을 다루기 위한
최소한의 자세 대수를 제공합니다.

- Quaternion: (x, y, z, w) scipy 형식
- Pose: 위치 [x, y, z] + 회전 쿼터니언
- Pose.multiply / Pose.delta: 자세 합성과 상대 자세

각도 관련 규칙 (엔진 호환):
- to_angle_axis(): 각도는 도 단위, 범위 [0, 360]
- from_euler_degrees(): Z -> X -> Y 순서의 외재적(extrinsic) 회전

Version: 1.0
"""

import numpy as np
from scipy.spatial.transform import Rotation
from typing import Tuple
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)


@dataclass
class Quaternion:
    """
    쿼터니언 (x, y, z, w) - scipy 형식

    표현: q = w + xi + yj + zk
    """
    x: float
    y: float
    z: float
    w: float

    def to_array(self) -> np.ndarray:
        """[x, y, z, w] 형식 (scipy 표준)"""
        return np.array([self.x, self.y, self.z, self.w], dtype=np.float64)

    @classmethod
    def from_array(cls, arr) -> 'Quaternion':
        """[x, y, z, w] 배열에서 생성"""
        return cls(x=float(arr[0]), y=float(arr[1]), z=float(arr[2]), w=float(arr[3]))

    def normalize(self) -> 'Quaternion':
        """단위 쿼터니언으로 정규화"""
        arr = self.to_array()
        norm = np.linalg.norm(arr)
        if norm < 1e-10:
            return Quaternion.identity()
        return Quaternion.from_array(arr / norm)

    def conjugate(self) -> 'Quaternion':
        """켤레 쿼터니언"""
        return Quaternion(x=-self.x, y=-self.y, z=-self.z, w=self.w)

    def inverse(self) -> 'Quaternion':
        """역 쿼터니언 (q^-1 = q* / |q|^2)"""
        norm_sq = float(np.dot(self.to_array(), self.to_array()))
        if norm_sq < 1e-20:
            return Quaternion.identity()
        conj = self.conjugate()
        return Quaternion(
            x=conj.x / norm_sq,
            y=conj.y / norm_sq,
            z=conj.z / norm_sq,
            w=conj.w / norm_sq
        )

    @property
    def norm(self) -> float:
        return float(np.linalg.norm(self.to_array()))

    def __mul__(self, other: 'Quaternion') -> 'Quaternion':
        """해밀턴 곱 (회전 합성: other를 먼저 적용한 뒤 self)"""
        w1, x1, y1, z1 = self.w, self.x, self.y, self.z
        w2, x2, y2, z2 = other.w, other.x, other.y, other.z

        return Quaternion(
            x=w1*x2 + x1*w2 + y1*z2 - z1*y2,
            y=w1*y2 - x1*z2 + y1*w2 + z1*x2,
            z=w1*z2 + x1*y2 - y1*x2 + z1*w2,
            w=w1*w2 - x1*x2 - y1*y2 - z1*z2
        )

    def dot(self, other: 'Quaternion') -> float:
        """내적"""
        return float(np.dot(self.to_array(), other.to_array()))

    def rotate(self, vector: np.ndarray) -> np.ndarray:
        """벡터 회전 (v' = q v q*)"""
        v = np.asarray(vector, dtype=np.float64)
        q_vec = np.array([self.x, self.y, self.z])
        t = 2.0 * np.cross(q_vec, v)
        return v + self.w * t + np.cross(q_vec, t)

    def to_angle_axis(self) -> Tuple[float, np.ndarray]:
        """
        축-각도 표현으로 변환

        엔진 규칙을 그대로 따릅니다:
        - 각도 = 2 * acos(w), 도 단위, [0, 360] 범위 (최단 경로로 뒤집지 않음)
        - 회전이 없으면 축은 (1, 0, 0)

        Returns:
            (angle_deg, axis)
        """
        q = self.normalize()
        vec = np.array([q.x, q.y, q.z])
        sin_half = float(np.linalg.norm(vec))

        if sin_half < 1e-12:
            return 0.0, np.array([1.0, 0.0, 0.0])

        # atan2는 작은 각도에서도 acos보다 정밀
        angle_rad = 2.0 * np.arctan2(sin_half, q.w)
        return float(np.rad2deg(angle_rad)), vec / sin_half

    def __repr__(self) -> str:
        return f"Quaternion(x={self.x:.4f}, y={self.y:.4f}, z={self.z:.4f}, w={self.w:.4f})"

    @classmethod
    def identity(cls) -> 'Quaternion':
        """단위 쿼터니언 (회전 없음)"""
        return cls(x=0.0, y=0.0, z=0.0, w=1.0)

    @classmethod
    def from_axis_angle(cls, axis: np.ndarray, angle_deg: float) -> 'Quaternion':
        """축-각도에서 생성"""
        axis = np.asarray(axis, dtype=np.float64)
        axis = axis / np.linalg.norm(axis)
        half = np.deg2rad(angle_deg) / 2
        sin_a = np.sin(half)
        return cls(
            x=float(axis[0] * sin_a),
            y=float(axis[1] * sin_a),
            z=float(axis[2] * sin_a),
            w=float(np.cos(half))
        )

    @classmethod
    def from_euler_degrees(cls, euler: np.ndarray) -> 'Quaternion':
        """
        오일러 각도(도)에서 생성

        euler = [x, y, z] 이며 Z축, X축, Y축 순서로 (외재적) 회전합니다.
        """
        euler = np.asarray(euler, dtype=np.float64)
        rot = Rotation.from_euler('zxy', [euler[2], euler[0], euler[1]], degrees=True)
        return cls.from_array(rot.as_quat())


@dataclass(eq=False)
class Pose:
    """
    강체 자세

    Attributes:
        position: [x, y, z]
        rotation: 회전 쿼터니언
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: Quaternion = field(default_factory=Quaternion.identity)

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64).reshape(3)

    @classmethod
    def identity(cls) -> 'Pose':
        return cls(position=np.zeros(3), rotation=Quaternion.identity())

    def transform_point(self, point: np.ndarray) -> np.ndarray:
        """로컬 좌표의 점을 이 자세 기준 월드 좌표로 변환"""
        return self.position + self.rotation.rotate(point)

    @staticmethod
    def multiply(a: 'Pose', b: 'Pose') -> 'Pose':
        """
        자세 합성 a * b

        b를 a의 로컬 좌표계에서 표현된 자세로 보고 월드 자세를 계산합니다.
        """
        return Pose(
            position=a.position + a.rotation.rotate(b.position),
            rotation=a.rotation * b.rotation
        )

    @staticmethod
    def delta(from_pose: 'Pose', to_pose: 'Pose') -> 'Pose':
        """
        상대 자세: from_pose 로컬 좌표계에서 본 to_pose

        Pose.multiply(from_pose, Pose.delta(from_pose, to_pose)) == to_pose
        """
        inv_rot = from_pose.rotation.inverse()
        return Pose(
            position=inv_rot.rotate(to_pose.position - from_pose.position),
            rotation=inv_rot * to_pose.rotation
        )

    def copy(self) -> 'Pose':
        return Pose(position=self.position.copy(), rotation=self.rotation)

    def to_dict(self) -> dict:
        """딕셔너리로 변환"""
        return {
            'position': self.position.tolist(),
            'rotation': {
                'x': self.rotation.x,
                'y': self.rotation.y,
                'z': self.rotation.z,
                'w': self.rotation.w
            }
        }
