"""The game: frame updates, rendering and the command-line entry point."""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence

import pygame

from raycub.display import Display, Event, Window
from raycub.image import Image
from raycub.overlay import WeaponAnimator, draw_background, draw_minimap
from raycub.raycast import DOOR_SURFACE, draw_walls
from raycub.scene import Facing, Scene, SceneError, load_scene
from raycub.world import SCREEN_HEIGHT, SCREEN_WIDTH, Key, World
from raycub.xpm import XpmError, load_xpm

TITLE = "CUB3D"
DOOR_TEXTURE = "asset/doors.xpm"
WEAPON_SPRITES = ("sprites/test1.xpm", "sprites/test2.xpm", "sprites/test3.xpm")
FRAME_RATE = 60


class Game:
    """A running game: the world, its textures and the frame being drawn."""

    def __init__(
        self, scene: Scene, textures: Mapping[object, Image], sprites: Sequence[Image]
    ) -> None:
        self.scene = scene
        self.world = World.from_scene(scene)
        self.textures = dict(textures)
        self.weapon = WeaponAnimator(sprites)
        self.canvas = Image(SCREEN_WIDTH, SCREEN_HEIGHT)

    def frame(self) -> bool:
        """Apply held keys and redraw; False when the game should end."""
        if not self.world.update():
            return False
        self.render()
        return True

    def render(self) -> None:
        """Draw background, walls, minimap and weapon onto the canvas."""
        draw_background(self.canvas, self.scene.floor, self.scene.ceiling)
        draw_walls(self.canvas, self.world, self.textures)
        draw_minimap(self.canvas, self.world)
        self.weapon.draw(self.canvas)


def load_textures(scene: Scene) -> dict[object, Image]:
    """Load the four wall textures of a scene and the door texture."""
    textures: dict[object, Image] = {
        facing: load_xpm(scene.textures[facing]) for facing in Facing
    }
    textures[DOOR_SURFACE] = load_xpm(DOOR_TEXTURE)
    return textures


def _error(message: str) -> int:
    print(f"Error\n{message}", file=sys.stderr)
    return 1


_SPECIAL_KEYS = {
    pygame.K_ESCAPE: Key.ESC,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_UP: Key.UP,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_LSHIFT: Key.RUN,
}


def _keysym(key: int) -> int:
    return int(_SPECIAL_KEYS.get(key, key))


def _to_rgb(image: Image) -> bytes:
    rgb = bytearray(image.width * image.height * 3)
    rgb[0::3] = image.data[2::4]
    rgb[1::3] = image.data[1::4]
    rgb[2::3] = image.data[0::4]
    return bytes(rgb)


def _run(game: Game) -> None:
    width, height = game.canvas.width, game.canvas.height
    center = (width // 2, height // 2)
    pygame.init()
    try:
        screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(TITLE)
        clock = pygame.time.Clock()
        display = Display()
        window = display.new_window(width, height, TITLE)

        def present(target: Window) -> None:
            display.put_image(target, game.canvas, 0, 0)
            surface = pygame.image.frombuffer(
                _to_rgb(target.framebuffer), (width, height), "RGB"
            )
            screen.blit(surface, (0, 0))
            pygame.display.flip()

        def on_motion(x: int, y: int) -> None:
            if game.world.mouse_move(x, y):
                display.mouse_move(window, *center)
                pygame.mouse.set_pos(center)

        def poll() -> None:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    display.events.append((window, Event.DESTROY_NOTIFY, ()))
                elif event.type == pygame.KEYDOWN:
                    display.events.append((window, Event.KEY_PRESS, (_keysym(event.key),)))
                elif event.type == pygame.KEYUP:
                    display.events.append((window, Event.KEY_RELEASE, (_keysym(event.key),)))
                elif event.type == pygame.MOUSEMOTION:
                    display.events.append((window, Event.MOTION_NOTIFY, tuple(event.pos)))

        def tick() -> None:
            if not game.frame():
                display.loop_end()
                return
            present(window)
            clock.tick(FRAME_RATE)

        window.hook(Event.DESTROY_NOTIFY, display.loop_end)
        window.hook(Event.KEY_PRESS, game.world.press)
        window.hook(Event.KEY_RELEASE, game.world.release)
        window.hook(Event.MOTION_NOTIFY, on_motion)
        display.poll = poll
        display.loop_hook(tick)

        draw_background(game.canvas, game.scene.floor, game.scene.ceiling)
        draw_walls(game.canvas, game.world, game.textures)
        draw_minimap(game.canvas, game.world)
        present(window)
        display.loop()
    finally:
        pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Load the scene named on the command line and play it."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        return _error("Usage: raycub <map.cub>")
    try:
        scene = load_scene(args[0])
    except SceneError as exc:
        return _error(str(exc))
    try:
        textures = load_textures(scene)
        sprites = [load_xpm(path) for path in WEAPON_SPRITES]
    except XpmError as exc:
        return _error(f"cannot load textures: {exc}")
    _run(Game(scene, textures, sprites))
    return 0