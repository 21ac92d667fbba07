"""Building a puppet from the JSON payload of a model file."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

import numpy as np

from .components import (
    BlendMode,
    Blending,
    Composite,
    Drawable,
    Mask,
    MaskMode,
    Masks,
    Mesh,
    PhysicsModel,
    PhysicsParamMapMode,
    PhysicsProps,
    SimplePhysics,
    TexturedMesh,
)
from .interp import InterpolateMode
from .jsonobj import JsonError, JsonObject
from .matrix import Matrix2d, Matrix2dFromSliceVecsError
from .meta import (
    PuppetAllowedModification,
    PuppetAllowedRedistribution,
    PuppetAllowedUsers,
    PuppetMeta,
    PuppetUsageRights,
)
from .params import AxisPoints, Binding, BindingKind, Param
from .pendulum import PuppetPhysics
from .puppet import Puppet
from .transform import TransformOffset
from .tree import InoxNode

_log = logging.getLogger(__name__)

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF

_PARSE_TEMPLATES = {
    "UnknownNodeType": "Unknown node type {}",
    "UnknownParamName": "Unknown param name {}",
    "NoAlbedoTexture": "No albedo texture",
    "UnknownParamMapMode": "Unknown param map mode {}",
    "UnknownPhysicsModel": "Unknown physics model {}",
    "UnknownMaskMode": "Unknown mask mode {}",
    "UnknownInterpolateMode": "Unknown interpolate mode {}",
    "UnknownPuppetAllowedUsers": "Unknown allowed users {}",
    "UnknownPuppetAllowedRedistribution": "Unknown allowed redistribution {}",
    "UnknownPuppetAllowedModification": "Unknown allowed modification {}",
    "OddNumberOfFloatsInList": "Expected even number of floats in list, got {}",
    "Not2FloatsInList": "Expected 2 floats in list, got {}",
}

CustomLoader = Callable[[Puppet, str, JsonObject], None]


class InoxParseError(ValueError):
    """A puppet payload that does not describe a valid puppet; ``kind`` names the problem."""

    def __init__(
        self,
        kind: str,
        value: Any = None,
        *,
        json_error: Optional[JsonError] = None,
    ) -> None:
        self.kind = kind
        self.value = value
        self.json_error = json_error
        if kind == "JsonError":
            if json_error is None:
                raise ValueError("a JsonError kind needs the JSON error it wraps")
            message = str(json_error)
        elif kind == "InvalidMatrix2dData":
            message = str(value)
        elif kind in _PARSE_TEMPLATES:
            shown = json.dumps(value, ensure_ascii=False) if isinstance(value, str) else value
            message = _PARSE_TEMPLATES[kind].format(shown)
        else:
            raise ValueError(f"unknown parse error kind {kind!r}")
        super().__init__(message)

    @classmethod
    def from_json(cls, error: JsonError) -> "InoxParseError":
        """Wrap a JSON access error."""
        return cls("JsonError", json_error=error)

    def nested(self, key: str) -> "InoxParseError":
        """Mark a JSON error as having occurred inside ``key``; other kinds are unchanged."""
        if self.kind == "JsonError":
            return InoxParseError.from_json(self.json_error.nested(key))
        return self


@contextmanager
def _nested(key: str) -> Iterator[None]:
    try:
        yield
    except (JsonError, InoxParseError) as err:
        raise err.nested(key) from None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_uint(value: Any, limit: int) -> Optional[int]:
    if not _is_number(value):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    return value if 0 <= value <= limit else None


def _as_nested_list(index: int, value: Any) -> list:
    if not isinstance(value, (list, tuple)):
        raise JsonError("ValueIsNotList", str(index))
    return list(value)


def _as_object(msg: str, value: Any) -> JsonObject:
    if not isinstance(value, dict):
        raise JsonError("ValueIsNotObject", msg)
    return JsonObject(value)


def _optional(getter: Callable[[str], Any], key: str, default: Any) -> Any:
    try:
        return getter(key)
    except JsonError:
        return default


# nodes


def _deserialize_transform(obj: JsonObject) -> TransformOffset:
    return TransformOffset(
        obj.get_vec3("trans"),
        obj.get_vec3("rot"),
        obj.get_vec2("scale"),
        _optional(obj.get_bool, "pixel_snap", False),
    )


def _deserialize_node(obj: JsonObject) -> tuple[InoxNode, str, JsonObject, list]:
    uuid = obj.get_u32("uuid")
    name = obj.get_str("name")
    enabled = obj.get_bool("enabled")
    zsort = obj.get_f32("zsort")
    transform_obj = obj.get_object("transform")
    with _nested("transform"):
        trans_offset = _deserialize_transform(transform_obj)
    lock_to_root = obj.get_bool("lockToRoot")
    node = InoxNode(
        uuid=uuid,
        name=name,
        enabled=enabled,
        zsort=zsort,
        trans_offset=trans_offset,
        lock_to_root=lock_to_root,
    )
    ty = obj.get_str("type")
    children = _optional(obj.get_list, "children", [])
    return node, ty, obj, children


# components


def _texture_slot(textures: list, index: int) -> int:
    if index >= len(textures) or not _is_number(textures[index]):
        return 0
    value = _as_uint(textures[index], sys.maxsize)
    if value is None:
        raise InoxParseError.from_json(JsonError("ParseIntError", str(index)).nested("textures"))
    return 0 if value == _U32_MAX else value


def _deserialize_textured_mesh(obj: JsonObject) -> TexturedMesh:
    textures = obj.get_list("textures")
    if not textures or not _is_number(textures[0]):
        raise InoxParseError("NoAlbedoTexture")
    albedo = _as_uint(textures[0], sys.maxsize)
    if albedo is None:
        raise InoxParseError.from_json(JsonError("ParseIntError", "0").nested("textures"))
    return TexturedMesh(albedo, _texture_slot(textures, 1), _texture_slot(textures, 2))


def _deserialize_simple_physics(obj: JsonObject) -> SimplePhysics:
    param = obj.get_u32("param")
    model_name = obj.get_str("model_type")
    try:
        model_type = PhysicsModel(model_name)
    except ValueError:
        raise InoxParseError("UnknownPhysicsModel", model_name) from None
    map_name = obj.get_str("map_mode")
    try:
        map_mode = PhysicsParamMapMode(map_name)
    except ValueError:
        raise InoxParseError("UnknownParamMapMode", map_name) from None
    props = PhysicsProps(
        gravity=obj.get_f32("gravity"),
        length=obj.get_f32("length"),
        frequency=obj.get_f32("frequency"),
        angle_damping=obj.get_f32("angle_damping"),
        length_damping=obj.get_f32("length_damping"),
        output_scale=obj.get_vec2("output_scale"),
    )
    return SimplePhysics(
        param=param,
        model_type=model_type,
        map_mode=map_mode,
        props=props,
        local_only=_optional(obj.get_bool, "local_only", False),
    )


def _deserialize_mask(obj: JsonObject) -> Mask:
    source = obj.get_u32("source")
    mode_name = obj.get_str("mode")
    try:
        mode = MaskMode(mode_name)
    except ValueError:
        raise InoxParseError("UnknownMaskMode", mode_name) from None
    return Mask(source, mode)


def _deserialize_drawable(obj: JsonObject) -> Drawable:
    mode_name = obj.get_str("blend_mode")
    try:
        mode = BlendMode(mode_name)
    except ValueError:
        mode = BlendMode.default()
    blending = Blending(
        mode=mode,
        tint=_optional(obj.get_vec3, "tint", np.ones(3)),
        screen_tint=_optional(obj.get_vec3, "screenTint", np.zeros(3)),
        opacity=_optional(obj.get_f32, "opacity", 1.0),
    )
    masks = None
    mask_list = _optional(obj.get_list, "masks", None)
    if mask_list is not None:
        masks = Masks(
            threshold=_optional(obj.get_f32, "mask_threshold", 0.5),
            masks=[_deserialize_mask(_as_object("mask", item)) for item in mask_list],
        )
    return Drawable(blending=blending, masks=masks)


def _deserialize_f32s(values: list) -> list[float]:
    return [float(v) for v in values if _is_number(v)]


def _deserialize_vec2s_flat(values: list) -> np.ndarray:
    if len(values) % 2 != 0:
        raise InoxParseError("OddNumberOfFloatsInList", len(values))
    floats = _deserialize_f32s(values)
    usable = len(floats) - len(floats) % 2
    return np.array(floats[:usable], dtype=float).reshape(-1, 2)


def _deserialize_vec2(values: list) -> np.ndarray:
    if len(values) != 2:
        raise InoxParseError("Not2FloatsInList", len(values))
    return np.array([float(v) if _is_number(v) else 0.0 for v in values], dtype=float)


def _deserialize_vec2s(values: list) -> np.ndarray:
    vec2s = [_deserialize_vec2(_as_nested_list(i, item)) for i, item in enumerate(values)]
    return np.array(vec2s, dtype=float).reshape(-1, 2)


def _deserialize_mesh(obj: JsonObject) -> Mesh:
    vertices = _deserialize_vec2s_flat(obj.get_list("verts"))
    uvs = _deserialize_vec2s_flat(obj.get_list("uvs"))
    indices = []
    for item in obj.get_list("indices"):
        index = _as_uint(item, _U16_MAX)
        if index is None:
            break
        indices.append(index)
    origin = _optional(obj.get_vec2, "origin", np.zeros(2))
    return Mesh(vertices=vertices, uvs=uvs, indices=indices, origin=origin)


# parameters


def _matrix(rows: list) -> Matrix2d:
    try:
        return Matrix2d.from_slice_vecs(rows, True)
    except Matrix2dFromSliceVecsError as err:
        raise InoxParseError("InvalidMatrix2dData", err) from err


def _deserialize_inner_binding_values(values: list) -> Matrix2d:
    rows = [_deserialize_f32s(item) for item in values if isinstance(item, (list, tuple))]
    return _matrix(rows)


def _deserialize_binding_values(param_name: str, values: list) -> tuple[BindingKind, Optional[Matrix2d]]:
    try:
        kind = BindingKind(param_name)
    except ValueError:
        raise InoxParseError("UnknownParamName", param_name) from None
    if kind is BindingKind.OPACITY:
        return kind, None
    if kind is BindingKind.DEFORM:
        parsed = []
        for j, column in enumerate(values):
            nested = _as_nested_list(j, column)
            parsed.append([_deserialize_vec2s(_as_nested_list(i, item)) for i, item in enumerate(nested)])
        return kind, _matrix(parsed)
    return kind, _deserialize_inner_binding_values(values)


def _deserialize_binding(obj: JsonObject) -> Binding:
    is_set_rows = []
    for row in obj.get_list("isSet"):
        bools = []
        if isinstance(row, (list, tuple)):
            for item in row:
                if not isinstance(item, bool):
                    break
                bools.append(item)
        is_set_rows.append(bools)

    node = obj.get_u32("node")
    is_set = _matrix(is_set_rows)
    mode_name = obj.get_str("interpolate_mode")
    try:
        interpolate_mode = InterpolateMode(mode_name)
    except ValueError:
        raise InoxParseError("UnknownInterpolateMode", mode_name) from None
    kind, values = _deserialize_binding_values(obj.get_str("param_name"), obj.get_list("values"))
    return Binding(node, is_set, interpolate_mode, kind, values)


def _deserialize_bindings(values: list) -> list[Binding]:
    bindings = []
    for item in values:
        if not isinstance(item, dict):
            _log.error("Encountered binding that is not a JSON object, ignoring")
            continue
        try:
            bindings.append(_deserialize_binding(JsonObject(item)))
        except (JsonError, InoxParseError) as err:
            _log.error("Invalid binding: %s", err)
    return bindings


def _deserialize_axis_points(values: list) -> AxisPoints:
    x = _deserialize_f32s(_as_nested_list(0, values[0] if len(values) > 0 else None))
    y = _deserialize_f32s(_as_nested_list(1, values[1] if len(values) > 1 else None))
    return AxisPoints(x, y)


def _deserialize_param(obj: JsonObject) -> tuple[str, Param]:
    name = obj.get_str("name")
    param = Param(
        uuid=obj.get_u32("uuid"),
        name=name,
        is_vec2=obj.get_bool("is_vec2"),
        min=obj.get_vec2("min"),
        max=obj.get_vec2("max"),
        defaults=obj.get_vec2("defaults"),
        axis_points=_deserialize_axis_points(obj.get_list("axis_points")),
        bindings=_deserialize_bindings(obj.get_list("bindings")),
    )
    return name, param


def _deserialize_params(values: list) -> dict[str, Param]:
    params: dict[str, Param] = {}
    for item in values:
        name, param = _deserialize_param(_as_object("param", item))
        params[name] = param
    return params


# puppet-wide data


def _deserialize_puppet_physics(obj: JsonObject) -> PuppetPhysics:
    return PuppetPhysics(
        pixels_per_meter=obj.get_f32("pixelsPerMeter"),
        gravity=obj.get_f32("gravity"),
    )


def _enum_value(enum_type: type, value: str, error_kind: str) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        raise InoxParseError(error_kind, value) from None


def _deserialize_usage_rights(obj: JsonObject) -> PuppetUsageRights:
    return PuppetUsageRights(
        allowed_users=_enum_value(
            PuppetAllowedUsers, obj.get_str("allowed_users"), "UnknownPuppetAllowedUsers"
        ),
        allow_violence=obj.get_bool("allow_violence"),
        allow_sexual=obj.get_bool("allow_sexual"),
        allow_commercial=obj.get_bool("allow_commercial"),
        allow_redistribution=_enum_value(
            PuppetAllowedRedistribution,
            obj.get_str("allow_redistribution"),
            "UnknownPuppetAllowedRedistribution",
        ),
        allow_modification=_enum_value(
            PuppetAllowedModification,
            obj.get_str("allow_modification"),
            "UnknownPuppetAllowedModification",
        ),
        require_attribution=obj.get_bool("require_attribution"),
    )


def _deserialize_puppet_meta(obj: JsonObject) -> PuppetMeta:
    name = obj.get_nullable_str("name")
    version = obj.get_str("version")
    rigger = obj.get_nullable_str("rigger")
    artist = obj.get_nullable_str("artist")
    rights_obj = _optional(obj.get_object, "rights", None)
    rights = _deserialize_usage_rights(rights_obj) if rights_obj is not None else None
    return PuppetMeta(
        name=name,
        version=version,
        rigger=rigger,
        artist=artist,
        rights=rights,
        copyright=obj.get_nullable_str("copyright"),
        license_url=obj.get_nullable_str("licenseURL"),
        contact=obj.get_nullable_str("contact"),
        reference=obj.get_nullable_str("reference"),
        thumbnail_id=_optional(obj.get_u32, "thumbnailId", None),
        preserve_pixels=obj.get_bool("preservePixels"),
    )


def _load_node_data(
    puppet: Puppet, uuid: int, ty: str, data: JsonObject, custom: Optional[CustomLoader]
) -> None:
    world = puppet.node_comps
    if ty == "Node":
        return
    if ty == "Part":
        world.add(uuid, _deserialize_drawable(data))
        world.add(uuid, _deserialize_textured_mesh(data))
        mesh_obj = data.get_object("mesh")
        with _nested("mesh"):
            world.add(uuid, _deserialize_mesh(mesh_obj))
    elif ty == "Composite":
        world.add(uuid, _deserialize_drawable(data))
        world.add(uuid, Composite())
    elif ty == "SimplePhysics":
        world.add(uuid, _deserialize_simple_physics(data))
    elif custom is not None:
        custom(puppet, ty, data)


def _load_children(puppet: Puppet, parent: int, children: list, custom: Optional[CustomLoader]) -> None:
    for i, child in enumerate(children):
        msg = f"children[{i}]"
        with _nested(msg):
            node, ty, data, grandchildren = _deserialize_node(_as_object("child", child))
        child_id = node.uuid
        puppet.nodes.add(parent, child_id, node)
        with _nested(msg):
            _load_node_data(puppet, child_id, ty, data, custom)
            if grandchildren:
                _load_children(puppet, child_id, grandchildren, custom)


def puppet_from_json(payload: Any, load_node_data_custom: Optional[CustomLoader] = None) -> Puppet:
    """Build a puppet from a parsed JSON payload.

    ``load_node_data_custom`` is called as ``(puppet, type, data)`` for nodes of
    types other than the standard ones.
    """
    try:
        obj = _as_object("(puppet)", payload)

        meta_obj = obj.get_object("meta")
        with _nested("meta"):
            meta = _deserialize_puppet_meta(meta_obj)
        physics_obj = obj.get_object("physics")
        with _nested("physics"):
            physics = _deserialize_puppet_physics(physics_obj)
        params = _deserialize_params(obj.get_list("param"))

        nodes_obj = obj.get_object("nodes")
        with _nested("nodes"):
            root, ty, data, children = _deserialize_node(nodes_obj)

        puppet = Puppet(meta, physics, root, params)
        _load_node_data(puppet, root.uuid, ty, data, load_node_data_custom)
        _load_children(puppet, root.uuid, children, load_node_data_custom)
        return puppet
    except JsonError as err:
        raise InoxParseError.from_json(err) from None