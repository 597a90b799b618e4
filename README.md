# cubraycaster

A small first-person raycaster. It reads a `.cub` scene file that names four
wall textures, a floor and a ceiling colour and lays out a grid map, checks
that the scene is well formed, and then opens a 1280×720 window where you can
walk around it.

## Installing

```
pip install .
```

This installs `numpy` and `pygame`.

## Running

```
cubraycaster scene.cub
```

Exactly one argument is expected. The name is looked up under a `map/`
directory relative to the current directory, so the command above opens
`map/scene.cub`. The name must end in `.cub`.

When the arguments, the scene or one of its textures is rejected, the program
writes `Error` and the reason to standard error and exits with status 1.
When you quit, it prints `End game..`.

## Controls

| Key          | Action              |
|--------------|---------------------|
| W            | move forward        |
| S            | move back           |
| A            | strafe left         |
| D            | strafe right        |
| Left arrow   | turn left           |
| Right arrow  | turn right          |
| Escape       | quit                |

Closing the window quits as well. Movement stops short of walls, and a
diagonal step between two wall cells that touch at a corner is refused.

## Scene files

A scene file starts with six elements, in any order, each on its own line,
an identifier and its value separated by spaces:

```
NO textures/north.xpm
SO textures/south.xpm
WE textures/west.xpm
EA textures/east.xpm
F 220,100,0
C 225,30,0
```

- `NO`, `SO`, `WE`, `EA` name XPM texture files. Each file must be readable
  and the four paths must all differ. Each identifier may appear only once.
- `F` and `C` give the floor and ceiling colours as `R,G,B`: digits and
  exactly two commas, each channel from 0 to 255.

Blank lines may appear between elements. A map line before all six elements
are read is an error. The map follows, using these characters:

- `1` wall
- `0` empty floor
- `N`, `S`, `E`, `W` the starting position and the direction faced
- space: outside the map

Every map line must start with a space, `0` or `1`. Blank lines may come
before and after the map but not inside it. There must be exactly one
starting position, and every floor cell must be fenced in by walls or other
floor cells on all four sides. Short rows are padded with spaces.

### Textures

Textures are read from XPM text images. Colours may be given as `#rgb`,
`#rrggbb` or `#rrrrggggbbbb`, as `None`, or as one of a few names (black,
white, red, green, blue, yellow, cyan, magenta, gray/grey). Texture heights
are used as a bit mask when sampling, so they should be powers of two, such
as 64.

## Using it as a library

```python
from cubraycaster.errors import CubError
from cubraycaster.game import Game, Key, build_texture_set
from cubraycaster.mapfile import load_file
from cubraycaster.player import init_player

info = load_file("map/scene.cub")       # MapInfo: grid, height, width, texture
player = init_player(info)              # Player at the centre of the start cell
player.move_forward(info)               # True if the step was allowed

game = Game(info, build_texture_set(info.texture))
game.handle_key(Key.LEFT)               # turn; returns whether the game is running
frame = game.render()                   # FrameBuffer; frame.pixels[y, x] is 0xRRGGBB
```

The modules:

- `cubraycaster.errors` — `CubError`, raised for every rejected input; its
  `message` is the reason shown to the user. Also `format_error`,
  `trim_path`, `ensure_readable` and `render_map`.
- `cubraycaster.inputpath` — `check_map_name`, `make_map_path`, `parse_input`.
- `cubraycaster.elements` — `Identifier`, `TextureSpec`, `identify`,
  `is_texture_element`, `is_map_element`, `parse_color`.
- `cubraycaster.mapfile` — `MapInfo`, `read_lines`, `read_textures`,
  `measure_map`, `build_grid`, `check_starting_position`,
  `check_map_is_closed`, `parse_lines`, `load_file`. Row 0 of
  `MapInfo.grid` is the last map line of the file.
- `cubraycaster.player` — `Player`, `Heading`, `init_player`,
  `is_movable_place` and the diagonal-step checks.
- `cubraycaster.texture` — `Texture`, `parse_xpm`, `load_xpm`.
- `cubraycaster.raycast` — `Ray`, `TextureSet`, `FrameBuffer`, `cast_ray`,
  `calculate_wall_x`, `calculate_tex_x`, `draw_background`, `fill_column`,
  `render_frame`.
- `cubraycaster.game` — `Key`, `Game`, `build_texture_set`, `main`.

## What it does not do

The view is walls, a flat floor colour and a flat ceiling colour only: there
are no sprites, doors, minimap, mouse look or sound. Textures can only be
XPM files. Scene names are always looked up under `map/`.

## Tests

```
pip install ".[test]"
pytest
```