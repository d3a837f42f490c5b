"""Redrawing of animated tiles in the visible part of the level."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Container, Sequence

SCREEN_WIDTH = 20
SCREEN_HEIGHT = 12


@dataclass
class ScrollState:
    """Scroll position and the tile animation flags of the game loop.

    ``bitmap_x``/``bitmap_y`` are the level tile at the top left of the
    screen; ``bitmap_xm``/``bitmap_ym`` are where that tile sits in the
    wrapping 20x12 tile screen.
    """

    permut_flag: bool = True
    loop_cycle: int = 0
    bitmap_x: int = 0
    bitmap_xm: int = 0
    bitmap_y: int = 0
    bitmap_ym: int = 0


def bloc_animation(
    state: ScrollState,
    tilemap: Sequence[Sequence[int]],
    animated_tiles: Container[int],
    draw_char: Callable[[int, int, int], None],
) -> None:
    """Redraw every animated tile on screen via ``draw_char(tile, y, x)``.

    Runs only when animated tiles were seen last time and the loop cycle is
    at zero; ``state.permut_flag`` ends up telling whether any were found.
    """
    if not state.permut_flag or state.loop_cycle != 0:
        return
    state.permut_flag = False
    for row in range(SCREEN_HEIGHT):
        screen_y = (state.bitmap_ym + row) % SCREEN_HEIGHT
        level_row = tilemap[(state.bitmap_y + row) & 0xFF]
        for column in range(SCREEN_WIDTH):
            tile = level_row[(state.bitmap_x + column) & 0xFF]
            if tile in animated_tiles:
                state.permut_flag = True
                draw_char(tile, screen_y, (state.bitmap_xm + column) % SCREEN_WIDTH)