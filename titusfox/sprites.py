"""Sprite graphics and sprite state.

Sprite and tile graphics are stored as four bit planes. Each bit plane is
``width * height / 8`` bytes long, and the planes follow one another. A
pixel is the palette index built from the matching bit of each plane, with
plane 0 as the least significant bit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

BytesLike = Union[bytes, bytearray, memoryview]

FIRST_OBJET = 30
TILE_SIZE = 16
_TILE_PLANE_SIZE = 0x20

PLAYER_NORMAL_SPRITE = 0
PLAYER_PAUSE_SPRITE = 29
CARPET_SPRITE = FIRST_OBJET + 21
CARPET_SPRITE_2 = FIRST_OBJET + 22
SMALL_SPRING_SPRITE = FIRST_OBJET + 24
BIG_SPRING_SPRITE = FIRST_OBJET + 25
CAGE_SPRITE = FIRST_OBJET + 26
CAGE_SPRITE_2 = FIRST_OBJET + 27

PAUSE_DELAY = 35 * 4
PAUSE_RESET = 35 * 5
SPRING_PUSH = 5


@dataclass
class Surface:
    """An 8-bit image of palette indices; index 0 is transparent."""

    width: int
    height: int
    pixels: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("surface dimensions must not be negative")
        if not self.pixels:
            self.pixels = bytearray(self.width * self.height)
        elif len(self.pixels) != self.width * self.height:
            raise ValueError("pixel count does not match the surface size")
        else:
            self.pixels = bytearray(self.pixels)

    def rows(self) -> List[bytearray]:
        """The rows of the image, top first."""
        w = self.width
        return [self.pixels[y * w:(y + 1) * w] for y in range(self.height)]


@dataclass
class SpriteData:
    """Graphics and collision geometry of one sprite image."""

    surface: Surface
    collheight: int
    collwidth: int
    refheight: int
    refwidth: int


@dataclass
class _CacheEntry:
    surface: Optional[Surface] = None
    spritedata: Optional[SpriteData] = None
    index: int = 0


@dataclass
class SpriteCache:
    """A fixed number of slots for prepared (flipped/flashed) sprite images."""

    count: int
    tmpcount: int
    cycle: int = 0
    cycle2: int = field(init=False)
    entries: List[_CacheEntry] = field(init=False)

    def __post_init__(self) -> None:
        if self.count < 0 or self.tmpcount < 0:
            raise ValueError("sprite cache sizes must not be negative")
        self.cycle2 = (self.count - self.tmpcount) & 0xFFFF
        self.entries = [_CacheEntry() for _ in range(self.count)]


@dataclass
class Sprite:
    """A sprite on the level: position, speed, image and state flags."""

    x: int = 0
    y: int = 0
    speed_x: int = 0
    speed_y: int = 0
    number: int = 0
    visible: bool = False
    flash: bool = False
    flipped: bool = False
    enabled: bool = False
    spritedata: Optional[SpriteData] = None
    under: int = 0
    ontop: Optional["Sprite"] = None
    animation: Optional[Sequence[int]] = None
    droptobottom: bool = False
    killing: bool = False
    invisible: bool = False

    def update(
        self,
        sprite_table: Sequence[SpriteData],
        number: int,
        clearflags: bool = False,
    ) -> None:
        """Show sprite image ``number``; optionally reset the state flags."""
        self.number = number
        self.spritedata = sprite_table[number]
        self.enabled = True
        if clearflags:
            self.flipped = False
            self.flash = False
            self.visible = False
            self.droptobottom = False
            self.killing = False
        self.invisible = False

    def copy_from(self, sprite_table: Sequence[SpriteData], other: "Sprite") -> None:
        """Take over the image and display flags of another sprite."""
        self.number = other.number
        self.spritedata = sprite_table[other.number]
        self.enabled = other.enabled
        self.flipped = other.flipped
        self.flash = other.flash
        self.visible = other.visible
        self.invisible = False


@dataclass
class AnimationState:
    """Game-wide values the sprite animation reads and changes."""

    gravity_flag: int = 0
    last_order: int = 0
    pocket_flag: bool = False
    action_timer: int = 0


def _planar_pixels(data: bytes, start: int, stride: int, count: int) -> bytearray:
    """Combine ``count`` bytes of four planes, ``stride`` bytes apart, into pixels."""
    end = start + stride * 3 + count
    if start < 0 or end > len(data):
        raise ValueError(
            f"planar data too short: need {end} bytes, have {len(data)}"
        )
    planes = [data[start + stride * k:start + stride * k + count] for k in range(4)]
    out = bytearray()
    for p0, p1, p2, p3 in zip(*planes):
        for shift in range(7, -1, -1):
            out.append(
                ((p0 >> shift) & 1)
                | (((p1 >> shift) & 1) << 1)
                | (((p2 >> shift) & 1) << 2)
                | (((p3 >> shift) & 1) << 3)
            )
    return out


def decode_planar(data: BytesLike, width: int, height: int, offset: int = 0) -> Surface:
    """Decode a four-plane image of the given size starting at ``offset``."""
    if width < 0 or height < 0:
        raise ValueError("sprite dimensions must not be negative")
    group = (width * height) >> 3
    surface = Surface(width, height)
    pixels = _planar_pixels(bytes(data), offset, group, group)
    surface.pixels[:len(pixels)] = pixels
    return surface


def decode_tile(data: BytesLike, index: int) -> Surface:
    """Decode the 16x16 tile whose first plane byte is at ``index``."""
    pixels = _planar_pixels(bytes(data), index, _TILE_PLANE_SIZE, _TILE_PLANE_SIZE)
    return Surface(TILE_SIZE, TILE_SIZE, pixels)


def copy_surface(surface: Surface, flip: bool = False, flash: bool = False) -> Surface:
    """Return a copy, mirrored horizontally and/or flashed.

    Flashing keeps only the lowest bit of every non-transparent pixel.
    """
    if flip:
        pixels = bytearray()
        for row in surface.rows():
            pixels.extend(reversed(row))
    else:
        pixels = bytearray(surface.pixels)
    if flash:
        pixels = bytearray(p & 0x01 if p else 0 for p in pixels)
    return Surface(surface.width, surface.height, pixels)


def load_sprites(
    data: BytesLike,
    dimensions: Iterable[Tuple[int, int, int, int, int, int]],
) -> List[SpriteData]:
    """Decode consecutive sprites from one data block.

    ``dimensions`` gives, per sprite, ``(width, height, collwidth,
    collheight, refwidth, refheight)``.
    """
    data = bytes(data)
    sprites: List[SpriteData] = []
    offset = 0
    for width, height, collwidth, collheight, refwidth, refheight in dimensions:
        sprites.append(
            SpriteData(
                surface=decode_planar(data, width, height, offset),
                collheight=collheight,
                collwidth=collwidth,
                refheight=height - refheight,
                refwidth=refwidth,
            )
        )
        offset += (width * height) >> 1
    return sprites


def _spring_release(sprite: Sprite, state: AnimationState) -> None:
    if state.gravity_flag > 1:
        sprite.under = 0
    else:
        sprite.under &= 0x01


def animate_sprite(
    sprite: Sprite,
    sprite_table: Sequence[SpriteData],
    image_counter: int,
    state: AnimationState,
) -> None:
    """Advance the built-in animations: cage, flying carpet and springs."""
    if not sprite.visible or not sprite.enabled:
        return
    number = sprite.number
    if number == CAGE_SPRITE:
        if image_counter & 0x07 == 0:
            sprite.update(sprite_table, CAGE_SPRITE_2)
    elif number == CAGE_SPRITE_2:
        if image_counter & 0x3F == 0:
            sprite.update(sprite_table, CAGE_SPRITE)
    elif number == CARPET_SPRITE:
        if image_counter & 0x07 == 0:
            sprite.update(sprite_table, CARPET_SPRITE_2)
    elif number == CARPET_SPRITE_2:
        if image_counter & 0x07 == 0:
            sprite.update(sprite_table, CARPET_SPRITE)
    elif number == SMALL_SPRING_SPRITE:
        if image_counter & 0x01 == 0:
            if sprite.under == 0:
                sprite.update(sprite_table, BIG_SPRING_SPRITE)
            else:
                _spring_release(sprite, state)
    elif number == BIG_SPRING_SPRITE:
        if image_counter & 0x01 == 0:
            if sprite.under == 0:
                return
            _spring_release(sprite, state)
            if sprite.ontop is not None:
                sprite.ontop.y += SPRING_PUSH
            state.gravity_flag = 3
            sprite.update(sprite_table, SMALL_SPRING_SPRITE)


def animate_player(
    player: Sprite,
    sprite_table: Sequence[SpriteData],
    state: AnimationState,
) -> None:
    """Show the idle pose after a while without input, then reset it."""
    if state.last_order == 0 and state.pocket_flag and state.action_timer >= PAUSE_DELAY:
        player.update(sprite_table, PLAYER_PAUSE_SPRITE)
        if state.action_timer >= PAUSE_RESET:
            player.update(sprite_table, PLAYER_NORMAL_SPRITE)
            state.action_timer = 0


def animate_sprites(
    sprites: Iterable[Sprite],
    sprite_table: Sequence[SpriteData],
    image_counter: int,
    state: AnimationState,
) -> None:
    """Run :func:`animate_sprite` on every sprite, in order."""
    for sprite in sprites:
        animate_sprite(sprite, sprite_table, image_counter, state)