"""A puppet: its node tree, components, parameters and per-frame contexts."""

from __future__ import annotations

from typing import Optional

from .meta import PuppetMeta
from .params import Param, ParamCtx
from .pendulum import PuppetPhysics
from .physics import PhysicsCtx
from .render import RenderCtx
from .transforms import TransformCtx
from .tree import InoxNode, InoxNodeTree
from .world import World


class Puppet:
    """An animatable puppet; contexts are set up with the ``init_*`` methods in order."""

    def __init__(
        self, meta: PuppetMeta, physics: PuppetPhysics, root: InoxNode, params: dict[str, Param]
    ) -> None:
        self.meta = meta
        self.physics = physics
        self.physics_ctx: Optional[PhysicsCtx] = None
        self.nodes = InoxNodeTree(root)
        self.node_comps = World()
        self.transform_ctx: Optional[TransformCtx] = None
        self.render_ctx: Optional[RenderCtx] = None
        self.params: dict[str, Param] = dict(params)
        self.param_ctx: Optional[ParamCtx] = None

    def init_transforms(self) -> None:
        """Give every node modifiable transform and z-sort components."""
        if self.transform_ctx is not None:
            raise RuntimeError("Puppet transforms already initialized.")
        self.transform_ctx = TransformCtx(self)

    def init_rendering(self) -> None:
        """Prepare the puppet for rendering; needs transforms."""
        if self.transform_ctx is None:
            raise RuntimeError("Puppet rendering depends on initialized puppet transforms.")
        if self.render_ctx is not None:
            raise RuntimeError("Puppet already initialized for rendering.")
        self.render_ctx = RenderCtx(self)

    def init_params(self) -> None:
        """Prepare the puppet for animation by parameters; needs rendering."""
        if self.render_ctx is None:
            raise RuntimeError("Only a puppet initialized for rendering can be animated by params.")
        if self.param_ctx is not None:
            raise RuntimeError("Puppet already initialized for params.")
        self.param_ctx = ParamCtx(self.params)

    def init_physics(self) -> None:
        """Prepare the puppet for physics simulation; needs parameters."""
        if self.param_ctx is None:
            raise RuntimeError("Puppet physics depends on initialized puppet params.")
        if self.physics_ctx is not None:
            raise RuntimeError("Puppet already initialized for physics.")
        self.physics_ctx = PhysicsCtx(self)

    def begin_frame(self) -> None:
        """Reset per-frame state; parameters may be set afterwards."""
        if self.render_ctx is not None:
            self.render_ctx.reset(self.nodes, self.node_comps)
        if self.transform_ctx is not None:
            self.transform_ctx.reset(self.nodes, self.node_comps)
        if self.param_ctx is not None:
            self.param_ctx.reset(self.params)

    def end_frame(self, dt: float) -> None:
        """Apply parameters, transforms and physics for one frame of ``dt`` seconds."""
        if self.param_ctx is not None:
            self.param_ctx.apply(self.params, self.node_comps)
        if self.transform_ctx is not None:
            self.transform_ctx.update(self.nodes, self.node_comps)

        if self.physics_ctx is not None:
            values = self.physics_ctx.step(self.physics, self.nodes, self.node_comps, dt)
            self.render_ctx.reset(self.nodes, self.node_comps)
            self.transform_ctx.reset(self.nodes, self.node_comps)
            for name, value in values.items():
                self.param_ctx.set(name, value)
            self.param_ctx.apply(self.params, self.node_comps)
            self.transform_ctx.update(self.nodes, self.node_comps)

        if self.render_ctx is not None:
            self.render_ctx.update(self.nodes, self.node_comps)