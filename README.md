# inox2d

A library for loading and animating Inochi2D puppets.

It reads `.inp` and `.inx` puppet files and builds a puppet that you can
animate with parameters and pendulum physics. It does not draw anything
itself. You supply a rendering backend, and the library tells it what to draw
and in which order.

## Installation

```
pip install .
```

To install with the test dependencies:

```
pip install .[test]
```

## Inspecting a puppet file

To print a file's puppet metadata and its vendor data sections:

```
inox2d-parse-inp path/to/puppet.inp
```

The command also reports how long parsing took. If the file is malformed, it
prints the parse error instead.

## Using the library

```python
from inox2d.inp import parse_inp

with open("puppet.inp", "rb") as f:
    model = parse_inp(f.read())

print(model.puppet.meta)
for vendor in model.vendors:
    print(vendor)
```

`parse_inp` accepts bytes or a binary stream. It returns a `Model` (from
`inox2d.model`), which holds three things:

- `puppet`, the `Puppet`;
- `textures`, the encoded `ModelTexture` entries (PNG or TGA);
- `vendors`, any `VendorData` sections.

A file that cannot be read raises `ParseInpError`. Its `kind` attribute names
the problem, for example `IncorrectMagic`, `NoTexSect`, `Bc7NotSupported` or
`InoxParse`.

If you already have a parsed JSON payload, `inox2d.payload.puppet_from_json`
builds the puppet directly. Its optional second argument is called as
`(puppet, type, data)` for nodes of non-standard types. A payload that does not
describe a valid puppet raises `InoxParseError`.

### Preparing a puppet for animation

Call the initialisation steps once each, in this order:

```python
puppet = model.puppet
puppet.init_transforms()
puppet.init_rendering()
puppet.init_params()
puppet.init_physics()
```

Calling a step twice raises `RuntimeError`. Calling a step before the one it
depends on also raises `RuntimeError`.

### The frame loop

Run this for every frame:

```python
puppet.begin_frame()
puppet.param_ctx.set("Head:: Yaw-Pitch", (0.5, -0.2))
puppet.end_frame(dt)   # dt: seconds since the previous frame, 0 on the first call
```

`end_frame` does the following, in order:

1. Applies the parameter bindings.
2. Recomputes the absolute transforms.
3. If physics was initialised, steps the pendulums. It then writes their
   outputs into the parameters and applies the parameters and transforms
   again.
4. Writes the combined mesh deformations into the shared `VertexBuffers`
   (`puppet.render_ctx.vertex_buffers`) and refreshes the draw order.

Setting a parameter name that does not exist raises `SetParamError`. A
negative `dt` raises `ValueError`.

### Rendering

Subclass `InoxRenderer` from `inox2d.render` and implement the backend hooks:

- `on_begin_masks`
- `on_begin_mask`
- `on_begin_masked_content`
- `on_end_mask`
- `draw_textured_mesh_content`
- `begin_composite_content`
- `finish_composite_content`

Then call `renderer.draw(puppet)` after `end_frame`. It walks the top-level
drawables in z-sort order and calls the hooks for masks and composites.

`inox2d.camera.Camera` computes an orthographic view-projection matrix for a
viewport size, which a backend may use.

### Textures

`decode_model_textures` in `inox2d.texture` decodes a model's textures in
parallel into `ShallowTexture` objects. Each holds RGBA pixel bytes with a
width and a height, ready to upload to your graphics API. Textures that fail to
decode are logged and skipped. `decode_texture` decodes a single texture and
raises `TextureDecodeError` on failure.

## What this package does not do

- It has no graphics backend and opens no window. Displaying a puppet needs an
  `InoxRenderer` subclass that you write against your own graphics API.
- BC7-encoded textures are rejected.
- Opacity bindings are parsed but have no effect when parameters are applied.

## Running the tests

```
pytest
```