"""Running all physics nodes of a puppet."""

from __future__ import annotations

from typing import Any

import numpy as np

from .components import PhysicsModel, SimplePhysics, TransformStore
from .pendulum import PuppetPhysics, RigidPendulumCtx, SpringPendulumCtx
from .tree import InoxNodeTree
from .world import World


class PhysicsCtx:
    """Simulation state of a puppet's physics nodes."""

    def __init__(self, puppet: Any) -> None:
        """Install a pendulum context on every SimplePhysics node of ``puppet``."""
        world = puppet.node_comps
        for node in puppet.nodes:
            simple = world.get(SimplePhysics, node.uuid)
            if simple is None:
                continue
            if simple.model_type is PhysicsModel.RIGID_PENDULUM:
                world.add(node.uuid, RigidPendulumCtx())
            else:
                world.add(node.uuid, SpringPendulumCtx())

        self.t = 0.0
        self.param_uuid_to_name: dict[int, str] = {
            param.uuid: name for name, param in puppet.params.items()
        }

    def step(
        self, puppet_physics: PuppetPhysics, nodes: InoxNodeTree, world: World, dt: float
    ) -> dict[str, np.ndarray]:
        """Simulate ``dt`` seconds and return the parameter values to apply."""
        values: dict[str, np.ndarray] = {}
        if dt == 0.0:
            return values
        if dt < 0.0:
            raise ValueError("Time travel has happened.")

        for node in nodes:
            simple = world.get(SimplePhysics, node.uuid)
            if simple is None:
                continue
            transform = world.get(TransformStore, node.uuid)
            if transform is None:
                raise LookupError("All nodes with SimplePhysics must have associated TransformStore.")

            ctx = world.get(RigidPendulumCtx, node.uuid) or world.get(SpringPendulumCtx, node.uuid)
            if ctx is None:
                continue
            value = ctx.update(puppet_physics, simple, transform, self.t, dt)

            name = self.param_uuid_to_name.get(simple.param)
            if name is None:
                raise LookupError("A SimplePhysics node must reference a valid param.")
            if name in values:
                raise ValueError("Two SimplePhysics nodes reference a same param.")
            values[name] = value

        self.t += dt
        return values