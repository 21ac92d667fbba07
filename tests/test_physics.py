from types import SimpleNamespace

import numpy as np
import pytest

from inox2d.components import (
    PhysicsModel,
    PhysicsParamMapMode,
    PhysicsProps,
    SimplePhysics,
    TransformStore,
)
from inox2d.params import AxisPoints, Param
from inox2d.pendulum import PuppetPhysics, RigidPendulumCtx, SpringPendulumCtx
from inox2d.physics import PhysicsCtx
from inox2d.tree import InoxNode, InoxNodeTree
from inox2d.world import World

PHYSICS = PuppetPhysics(pixels_per_meter=1000.0, gravity=9.8)


def simple_physics(model=PhysicsModel.RIGID_PENDULUM, param=7):
    return SimplePhysics(
        param=param,
        model_type=model,
        map_mode=PhysicsParamMapMode.ANGLE_LENGTH,
        props=PhysicsProps(length=100.0),
    )


def build(models=(PhysicsModel.RIGID_PENDULUM,), param_uuid=7):
    tree = InoxNodeTree(InoxNode(uuid=0, name="root"))
    world = World()
    for i, _ in enumerate(models, start=1):
        tree.add(0, i, InoxNode(uuid=i, name=f"phys{i}"))
    for node in tree:
        world.add(node.uuid, TransformStore())
    for i, model in enumerate(models, start=1):
        world.add(i, simple_physics(model, param_uuid))
    params = {
        "swing": Param(
            uuid=7,
            name="swing",
            is_vec2=True,
            min=[-1.0, -1.0],
            max=[1.0, 1.0],
            defaults=[0.0, 0.0],
            axis_points=AxisPoints([0.0, 1.0], [0.0, 1.0]),
        )
    }
    return SimpleNamespace(nodes=tree, node_comps=world, params=params)


def test_init_installs_pendulum_contexts():
    puppet = build((PhysicsModel.RIGID_PENDULUM, PhysicsModel.SPRING_PENDULUM))
    PhysicsCtx(puppet)
    world = puppet.node_comps
    assert isinstance(world.get(RigidPendulumCtx, 1), RigidPendulumCtx)
    assert isinstance(world.get(SpringPendulumCtx, 2), SpringPendulumCtx)
    assert world.get(RigidPendulumCtx, 0) is None
    assert world.get(SpringPendulumCtx, 1) is None


def test_init_maps_param_uuids_to_names():
    ctx = PhysicsCtx(build())
    assert ctx.param_uuid_to_name == {7: "swing"}
    assert ctx.t == 0.0


def test_step_with_zero_dt_returns_nothing():
    puppet = build()
    ctx = PhysicsCtx(puppet)
    assert ctx.step(PHYSICS, puppet.nodes, puppet.node_comps, 0.0) == {}
    assert ctx.t == 0.0


def test_step_with_negative_dt_raises():
    puppet = build()
    ctx = PhysicsCtx(puppet)
    with pytest.raises(ValueError):
        ctx.step(PHYSICS, puppet.nodes, puppet.node_comps, -0.1)


def test_step_returns_param_value_and_advances_time():
    puppet = build()
    ctx = PhysicsCtx(puppet)
    values = ctx.step(PHYSICS, puppet.nodes, puppet.node_comps, 0.05)
    assert set(values) == {"swing"}
    assert np.allclose(values["swing"], [0.0, 1.0])
    assert ctx.t == pytest.approx(0.05)


def test_step_moves_rigid_bob_to_rest_length():
    puppet = build()
    ctx = PhysicsCtx(puppet)
    ctx.step(PHYSICS, puppet.nodes, puppet.node_comps, 0.05)
    bob = puppet.node_comps.get(RigidPendulumCtx, 1).bob
    assert np.linalg.norm(bob) == pytest.approx(100.0)


def test_two_nodes_on_same_param_raise():
    puppet = build((PhysicsModel.RIGID_PENDULUM, PhysicsModel.RIGID_PENDULUM))
    ctx = PhysicsCtx(puppet)
    with pytest.raises(ValueError):
        ctx.step(PHYSICS, puppet.nodes, puppet.node_comps, 0.05)


def test_unknown_param_uuid_raises():
    puppet = build(param_uuid=99)
    ctx = PhysicsCtx(puppet)
    with pytest.raises(LookupError):
        ctx.step(PHYSICS, puppet.nodes, puppet.node_comps, 0.05)


def test_node_without_context_is_skipped():
    puppet = build()
    ctx = PhysicsCtx(SimpleNamespace(nodes=[], node_comps=puppet.node_comps, params=puppet.params))
    values = ctx.step(PHYSICS, puppet.nodes, puppet.node_comps, 0.05)
    assert values == {}
    assert ctx.t == pytest.approx(0.05)