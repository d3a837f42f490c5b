# titusfox

Pure-Python readers for the data files of *Titus the Fox: To Marrakech and
Back* and *Moktar*. You supply the game files yourself. The package uses
only the standard library.

## Install

    pip install titusfox

## Modules

### `titusfox.sqz`

Unpacks SQZ-compressed files. The four byte header gives the unpacked
length and the method: LZW (variable width codes, 9 to 12 bits) or Huffman
with run-length codes.

- `read_sqz(path)` reads and unpacks a file.
- `unsqz(data)` unpacks bytes held in memory, header included.
- `lzw_decode(data, out_len)` and `huffman_decode(data, out_len)` decode a
  payload without its header.

Truncated or malformed data raises `SqzError`, which is a `ValueError`.

### `titusfox.settings`

Reads a `titus.conf` configuration file.

- `read_config(path, check_files=True)` reads a file. With `check_files` it
  also verifies that every level file and the sprite file exist.
- `parse_config(text, source="<string>")` parses text and returns a
  `Settings` object.
- `Settings.check_files(base_dir=None)` checks the files named by the
  settings. Relative names are resolved against `base_dir`.
- `Settings.levels` lists the level files in play.
- `level_codes()` returns the sixteen level passwords.
- `level_titles(game)` returns the level titles for Titus (`0`) or Moktar
  (`1`), and an empty list for any other value.

A missing file or an inconsistent level list raises `ConfigError`. Unknown
commands are logged as warnings and otherwise ignored.

### `titusfox.sprites`

Decodes four-plane sprite and tile graphics and keeps sprite state.

- `decode_planar(data, width, height, offset=0)` and
  `decode_tile(data, index)` return a `Surface` of palette indices.
- `load_sprites(data, dimensions)` decodes consecutive sprites into
  `SpriteData`. Each entry in `dimensions` is
  `(width, height, collwidth, collheight, refwidth, refheight)`.
- `copy_surface(surface, flip=False, flash=False)` mirrors a surface, flashes
  it, or both.
- `Sprite.update(...)` and `Sprite.copy_from(...)` change the image a
  sprite shows.
- `animate_sprite`, `animate_sprites` and `animate_player` run the per-frame
  animations: cage, flying carpet, springs and the player's idle pose. The
  shared flags live in an `AnimationState`.
- `SpriteCache` holds a fixed number of slots for prepared images.

### `titusfox.images`

Decodes 320x200 full-screen pictures.

- `decode_image(data, image_format)` takes unpacked picture data.
- `load_image(path, image_format)` reads and decodes an SQZ-packed picture.
- `ImageFormat.PLANAR_GRAYSCALE` is four bit planes shown with a 16-step
  grey ramp.
- `ImageFormat.PALETTE_256` is a 256-colour VGA palette followed by one byte
  per pixel.
- `ImageFormat.PLANAR` is rejected with `ValueError`.
- `Image.to_rgb()` returns packed 8-bit RGB triplets.
- `fade_alpha(elapsed_ms, fade_time=1000, skip=0)` gives the opacity step
  (0 to 255) reached partway through a fade.

### `titusfox.tile_animation`

`bloc_animation(state, tilemap, animated_tiles, draw_char)` finds the
animated tiles in the visible 20x12 window. For each one it calls
`draw_char(tile, y, x)`. The window position and flags are held in a
`ScrollState`.

## Example

```python
from titusfox.sqz import read_sqz
from titusfox.images import ImageFormat, decode_image

raw = read_sqz("MENU.SQZ")
image = decode_image(raw, ImageFormat.PALETTE_256)
rgb = image.to_rgb()
```

## What it does not do

This is a library for reading and preparing game data. It does not play the
game. It has no command, opens no window, plays no sound or music, reads no
keyboard input, and does not load or run levels.

## Tests

    pip install -e .[test]
    pytest