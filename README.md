# raycub

raycub is a small first-person maze explorer. It reads a `.cub` scene file,
loads wall textures in XPM format, and draws a textured raycast view in a
pygame window, with a minimap, doors that open and close, and an animated
weapon sprite.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running

```
raycub path/to/level.cub
```

Besides the four wall textures named in the scene, the game loads these files
relative to the current working directory, so they must exist there:

- `asset/doors.xpm` — the door texture
- `sprites/test1.xpm`, `sprites/test2.xpm`, `sprites/test3.xpm` — the weapon
  animation frames

If the scene is invalid or a picture cannot be read, `raycub` prints `Error`
and a message on standard error and exits with status 1. Without an argument
it prints a usage message the same way.

The game ends on Escape or when the window is closed.

### Controls

| Key             | Action                         |
|-----------------|--------------------------------|
| W / S           | move forward / backward        |
| A / D           | strafe left / right            |
| Left / Right    | turn                           |
| Mouse           | turn                           |
| Left Shift      | run                            |
| E               | open or close an adjacent door |
| Escape          | quit                           |

The mouse pointer is pulled back to the centre of the window after each turn.
A door is not closed while the player stands in it or too close to it.

## Scene files

A `.cub` file starts with six settings, in any order, blank lines allowed:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0
```

`F` and `C` are the floor and ceiling colours, three values from 0 to 255
separated by exactly two commas. Texture lines must end in `.xpm`; after the
key and its spaces, two characters (normally `./`) are skipped and the rest is
the path, which must point to a readable file.

The map starts at the first line beginning with `1` or a space. It uses `1`
for walls, `0` for floor, `D` for doors, spaces for void, and exactly one of
`N`, `S`, `E`, `W` for the player's start and facing. The map must be closed:
its first and last rows hold only walls and spaces, every row starts with a
wall or a space, and every floor cell is bordered by no space and no row end.

```
1111111
100D001
10N1001
1111111
```

A scene that breaks one of these rules is rejected with a `SceneError`
carrying a short message.

## Using it as a library

- `raycub.scene.load_scene(path)` parses and checks a `.cub` file into a
  `Scene`; `raycub.scene.parse_scene_lines(lines)` does the same from lines in
  memory without touching texture files.
- `raycub.xpm.load_xpm(path)` and `raycub.xpm.xpm_from_data(lines)` read XPM
  pictures into a `raycub.image.Image` of 32-bit pixels, raising `XpmError`
  on bad data.
- `raycub.colors.lookup_color(name)` resolves an X11 colour name, ignoring
  case; `"none"` gives -1.
- `raycub.world.World.from_scene(scene)` builds the game state: the player,
  door states, walkability checks and key handling (`press`, `release`,
  `update`, `toggle_door`, `mouse_move`).
- `raycub.raycast.cast_ray(world, angle)` and `cast_all(world, count)` cast
  rays and return `RayHit` values; `draw_walls(canvas, world, textures)`
  renders the textured columns.
- `raycub.overlay` draws the background, the minimap and the weapon sprite
  (`WeaponAnimator`).
- `raycub.display.Display` and `Window` provide an in-memory window with event
  hooks and an event loop; `raycub.app.Game` ties everything together.

## What it does not do

The weapon is only an animation: there is no shooting, no enemies, no
sound and no saving. One scene is played per run.