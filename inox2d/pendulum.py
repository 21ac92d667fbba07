"""Pendulum simulations that turn node motion into parameter values."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from .components import PhysicsParamMapMode, SimplePhysics, TransformStore
from .runge_kutta import PhysicsState

_MAX_DT = 10.0
_STEP = 0.01


@dataclass
class PuppetPhysics:
    """Global physics parameters of a puppet."""

    pixels_per_meter: float
    gravity: float


def _normalize(v: np.ndarray) -> np.ndarray:
    with np.errstate(all="ignore"):
        return v / np.linalg.norm(v)


def _gravity(physics: PuppetPhysics, props) -> float:
    return props.gravity * physics.pixels_per_meter * physics.gravity


class Pendulum(ABC):
    """A simulated system with a bob hanging from an anchor that follows a node."""

    bob: np.ndarray

    def calc_anchor(self, physics: PuppetPhysics, simple: SimplePhysics, transform: TransformStore) -> np.ndarray:
        """The anchor position derived from the node transform."""
        if simple.local_only:
            anchor = np.asarray(transform.relative.translation, dtype=float)
        else:
            anchor = np.asarray(transform.absolute, dtype=float) @ np.array([0.0, 0.0, 0.0, 1.0])
        return np.array(anchor[:2], dtype=float)

    @abstractmethod
    def tick(self, physics: PuppetPhysics, simple: SimplePhysics, anchor, t: float, dt: float) -> None:
        """Advance the simulation by ``dt`` and update the bob."""

    def calc_output(
        self, physics: PuppetPhysics, simple: SimplePhysics, transform: TransformStore, anchor
    ) -> np.ndarray:
        """Map the bob position onto a parameter value."""
        anchor = np.asarray(anchor, dtype=float)
        bob = np.asarray(self.bob, dtype=float)
        props = simple.props

        if simple.local_only:
            local = bob
        else:
            try:
                inverse = np.linalg.inv(np.asarray(transform.absolute, dtype=float))
            except np.linalg.LinAlgError:
                inverse = np.full((4, 4), np.nan)
            local = (inverse @ np.array([bob[0], bob[1], 0.0, 1.0]))[:2]

        local_angle = _normalize(local)
        with np.errstate(all="ignore"):
            relative_length = np.linalg.norm(bob - anchor) / np.float64(props.length)

            mode = simple.map_mode
            if mode in (PhysicsParamMapMode.XY, PhysicsParamMapMode.YX):
                result = local_angle * relative_length - np.array([0.0, 1.0])
                result[1] = -result[1]
                if mode is PhysicsParamMapMode.YX:
                    result = result[::-1].copy()
            else:
                angle = np.arctan2(-local_angle[0], local_angle[1]) / math.pi
                if mode is PhysicsParamMapMode.ANGLE_LENGTH:
                    result = np.array([angle, relative_length])
                else:
                    result = np.array([relative_length, angle])

            return result * np.asarray(props.output_scale, dtype=float)

    def update(
        self, physics: PuppetPhysics, simple: SimplePhysics, transform: TransformStore, t: float, dt: float
    ) -> np.ndarray:
        """Simulate one frame in steps of at most 0.01 s and return the parameter value."""
        dt = min(float(dt), _MAX_DT)
        anchor = self.calc_anchor(physics, simple, transform)
        t = float(t)
        while dt > 0.0:
            self.tick(physics, simple, anchor, t, min(dt, _STEP))
            t += _STEP
            dt -= _STEP
        return self.calc_output(physics, simple, transform, anchor)


def _rigid_eval(state: PhysicsState, props, anchor, t: float) -> None:
    physics, p = props
    g = np.float64(_gravity(physics, p))
    theta, omega = state.vars
    with np.errstate(all="ignore"):
        ratio = g / np.float64(p.length)
        d_omega = -ratio * np.sin(theta)
        crit_damp = 2.0 * np.sqrt(ratio)
        damping = -omega * p.angle_damping * crit_damp
        state.derivatives = np.array([omega, d_omega + damping], dtype=float)


class RigidPendulumCtx(Pendulum):
    """A rigid pendulum simulated in terms of its angle and angular velocity."""

    def __init__(self) -> None:
        self.bob = np.zeros(2)
        self.state = PhysicsState(2)

    def tick(self, physics, simple, anchor, t, dt) -> None:
        anchor = np.asarray(anchor, dtype=float)
        d_bob = np.asarray(self.bob, dtype=float) - anchor
        self.state.vars[0] = np.arctan2(-d_bob[0], d_bob[1])

        self.state.tick(_rigid_eval, (physics, simple.props), anchor, t, dt)

        angle = self.state.vars[0]
        direction = np.array([-np.sin(angle), np.cos(angle)])
        self.bob = anchor + direction * simple.props.length


def _spring_eval(state: PhysicsState, props, anchor, t: float) -> None:
    physics, p = props
    anchor = np.asarray(anchor, dtype=float)
    pos = state.vars[:2]
    vel = state.vars[2:]

    with np.errstate(all="ignore"):
        spring_ksqrt = p.frequency * 2.0 * math.pi
        spring_k = spring_ksqrt**2

        g = np.float64(_gravity(physics, p))
        rest_length = p.length - g / spring_k

        off_pos = pos - anchor
        off_norm = off_pos / np.linalg.norm(off_pos)

        length_ratio = g / np.float64(p.length)
        crit_damp_angle = 2.0 * np.sqrt(length_ratio)
        crit_damp_length = 2.0 * spring_ksqrt

        dist = abs(np.linalg.norm(anchor - pos))
        force = np.array([0.0, g]) - off_norm * (dist - rest_length) * spring_k

        nx, ny = off_norm
        vx, vy = vel
        rot_x = vx * ny + vy * nx
        rot_y = vy * ny - vx * nx

        dd_rot_x = -(rot_x * p.angle_damping * crit_damp_angle)
        dd_rot_y = -(rot_y * p.length_damping * crit_damp_length)

        damping = np.array([dd_rot_x * ny - rot_y * nx, dd_rot_y * ny + rot_x * nx])
        state.derivatives = np.concatenate([vel, force + damping])


class SpringPendulumCtx(Pendulum):
    """A bob on a damped spring, simulated in terms of position and velocity."""

    def __init__(self) -> None:
        self.state = PhysicsState(4)

    @property
    def bob(self) -> np.ndarray:
        return np.array(self.state.vars[:2], dtype=float)

    @bob.setter
    def bob(self, value) -> None:
        self.state.vars[:2] = np.asarray(value, dtype=float)

    def tick(self, physics, simple, anchor, t, dt) -> None:
        self.state.tick(_spring_eval, (physics, simple.props), np.asarray(anchor, dtype=float), t, dt)