# tvscramble

Line-level data encoders for analogue television signals, in pure Python
with no dependencies outside the standard library.

- **Videocrypt I / II** (`tvscramble.videocrypt.Videocrypt`): builds the VBI
  data packets for each frame, drives the PRBS that picks the cut point for
  each active line, and rotates a line's samples around that cut.
  Videocrypt I accepts the modes `"free"` and `"conditional"`; Videocrypt II
  accepts `"free"`. Either may be `None` to leave that system off.
- **Videocrypt S** (`tvscramble.videocrypts.VideocryptS`): builds the VBI
  packets for each frame in `"free"` or `"conditional"` mode.
- **VITC** (`tvscramble.vitc.Vitc`): works out the 32-bit BCD timecode words
  and the packed 90-bit packets for 625 and 525 line rasters. Frame rates up
  to 30/1 are accepted, and 30000/1001 uses drop-frame counting.
- **WSS** (`tvscramble.wss.Wss`): builds the 137-bit widescreen signalling
  bit stream for line 23. The modes are `"4:3"`, `"16:9"`,
  `"14:9-letterbox"`, `"16:9-letterbox"` and `"auto"` (case does not
  matter). In auto mode, `packet()` picks 4:3 or 16:9 from the source's pixel
  aspect ratio.

The shared helpers in `tvscramble.vbicode` do the bit reversal, the Hamming
coding and the bit interleaving of the 40-byte Videocrypt VBI frames
(`reverse_byte`, `reverse_bits`, `swap_nibbles`, `interleave`, `encode_vbi`).

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from fractions import Fraction

from tvscramble.videocrypt import Videocrypt
from tvscramble.vitc import Vitc
from tvscramble.wss import Wss

vc = Videocrypt(width=1135, hsync_width=4.7e-6, mode="free", mode2=None)
vc.start_frame()                # call once at the start of every frame
data = vc.vbi_line(12)          # 5 bytes for a VBI line, or None
cut = vc.scramble_cut(24)       # cut point for an active line, or None

vitc = Vitc(raster=625, frame_rate=(25, 1))
word = vitc.timecode(frame=1234, line=19)
packet = vitc.packet(frame=1234, line=19)   # 12 bytes, LSB first, or None

wss = Wss("auto", active_width=702, active_lines=576)
bits = wss.packet(pixel_aspect_ratio=Fraction(16, 11))  # 18 bytes, MSB first
```

`scramble_cut()` must be called for every line in order, because it advances
the PRBS for each scrambled line. `rotate_line(cut, output, delay)` takes the
current line's samples and a delayed line's samples as sequences, one value
per sample, and returns the new line as a list.

An unknown mode makes the constructor raise `ValueError`, as does an
unsupported raster or frame rate for `Vitc`.

## What it does not do

- The classes produce data only: bytes for VBI lines and cut points. They do
  not render waveform samples, modulate or transmit anything; hand the data
  to your own renderer.
- `VideocryptS` does not shuffle lines; it only builds the VBI packets.
- There is no audio processing and no command-line program.