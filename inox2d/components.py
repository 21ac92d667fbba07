"""Components that can be attached to puppet nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from .deform import linear_combine
from .transform import TransformOffset


@dataclass
class Composite:
    """Marker: the node composites all of its children."""


class BlendMode(Enum):
    """How a drawable is blended onto what lies below it."""

    NORMAL = "Normal"
    MULTIPLY = "Multiply"
    COLOR_DODGE = "ColorDodge"
    LINEAR_DODGE = "LinearDodge"
    SCREEN = "Screen"
    CLIP_TO_LOWER = "ClipToLower"
    SLICE_FROM_LOWER = "SliceFromLower"

    @classmethod
    def default(cls) -> "BlendMode":
        return cls.NORMAL


@dataclass(eq=False)
class Blending:
    """Blend mode, tints and opacity of a drawable."""

    mode: BlendMode = BlendMode.NORMAL
    tint: np.ndarray = field(default_factory=lambda: np.ones(3))
    screen_tint: np.ndarray = field(default_factory=lambda: np.zeros(3))
    opacity: float = 1.0

    def __post_init__(self) -> None:
        self.tint = np.array(self.tint, dtype=float)
        self.screen_tint = np.array(self.screen_tint, dtype=float)
        self.opacity = float(self.opacity)


class MaskMode(Enum):
    """How a mask source affects the masked drawable."""

    MASK = "Mask"
    DODGE = "DodgeMask"


@dataclass
class Mask:
    """One mask: the node drawn as mask and its mode."""

    source: int
    mode: MaskMode


@dataclass
class Masks:
    """The masks of a drawable and their alpha threshold."""

    threshold: float = 0.5
    masks: list[Mask] = field(default_factory=list)

    def has_masks(self) -> bool:
        """Whether any mask has mode ``MaskMode.MASK``."""
        return any(mask.mode is MaskMode.MASK for mask in self.masks)

    def has_dodge_masks(self) -> bool:
        """Whether any mask has mode ``MaskMode.DODGE``."""
        return any(mask.mode is MaskMode.DODGE for mask in self.masks)


@dataclass(eq=False)
class Drawable:
    """The node renders something."""

    blending: Blending = field(default_factory=Blending)
    masks: Optional[Masks] = None


class PhysicsModel(Enum):
    """Kind of pendulum simulated by a SimplePhysics node."""

    RIGID_PENDULUM = "Pendulum"
    SPRING_PENDULUM = "SpringPendulum"


class PhysicsParamMapMode(Enum):
    """How the simulated bob position maps onto a parameter value."""

    ANGLE_LENGTH = "AngleLength"
    LENGTH_ANGLE = "LengthAngle"
    XY = "XY"
    YX = "YX"


@dataclass(eq=False)
class PhysicsProps:
    """Physical properties of a pendulum."""

    gravity: float = 1.0
    length: float = 1.0
    frequency: float = 1.0
    angle_damping: float = 0.5
    length_damping: float = 0.5
    output_scale: np.ndarray = field(default_factory=lambda: np.ones(2))

    def __post_init__(self) -> None:
        self.output_scale = np.array(self.output_scale, dtype=float)


@dataclass(eq=False)
class SimplePhysics:
    """The node drives a parameter through a physics simulation."""

    param: int
    model_type: PhysicsModel
    map_mode: PhysicsParamMapMode
    props: PhysicsProps = field(default_factory=PhysicsProps)
    local_only: bool = False


@dataclass
class TexturedMesh:
    """Texture indices of a part."""

    tex_albedo: int
    tex_emissive: int = 0
    tex_bumpmap: int = 0


@dataclass(eq=False)
class Mesh:
    """A deformable mesh: vertices, UVs, triangle indices and origin."""

    vertices: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    uvs: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    indices: list[int] = field(default_factory=list)
    origin: np.ndarray = field(default_factory=lambda: np.zeros(2))

    def __post_init__(self) -> None:
        self.vertices = np.array(self.vertices, dtype=float).reshape(-1, 2)
        self.uvs = np.array(self.uvs, dtype=float).reshape(-1, 2)
        self.indices = [int(i) for i in self.indices]
        self.origin = np.array(self.origin, dtype=float)


class DeformSourceKind(Enum):
    """What submitted a deform."""

    PARAM = "param"
    NODE = "node"


@dataclass(frozen=True)
class DeformSource:
    """Identity of the submitter of a deform."""

    kind: DeformSourceKind
    uuid: int


class DeformStack:
    """Direct deforms submitted to one node within a frame, by source."""

    def __init__(self, deform_len: int) -> None:
        self.deform_len = deform_len
        # source -> [enabled, displacements]
        self.stack: dict[DeformSource, list] = {}

    def reset(self) -> None:
        """Disable every stored deform, ready for a new frame."""
        for entry in self.stack.values():
            entry[0] = False

    def combine(self) -> np.ndarray:
        """Sum the enabled deforms into a ``(deform_len, 2)`` array."""
        return linear_combine(
            (deform for enabled, deform in self.stack.values() if enabled),
            self.deform_len,
        )

    def push(self, src: DeformSource, deform) -> None:
        """Submit a direct deform from ``src``; at most once per source per frame."""
        arr = np.array(deform, dtype=float).reshape(-1, 2)
        if arr.shape[0] != self.deform_len:
            raise ValueError("A direct deform with non-matching dimensions is submitted to a node.")
        entry = self.stack.get(src)
        if entry is not None and entry[0]:
            raise ValueError(
                "A same source submitted deform twice for a same node within one frame."
            )
        self.stack[src] = [True, arr]


@dataclass(eq=False)
class TransformStore:
    """Relative transform of a node and its absolute matrix."""

    absolute: np.ndarray = field(default_factory=lambda: np.eye(4))
    relative: TransformOffset = field(default_factory=TransformOffset)


@dataclass
class ZSort:
    """Z-sort value of a node, modifiable between frames."""

    value: float = 0.0