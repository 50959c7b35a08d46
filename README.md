# drawkit

drawkit is the computational core of an image viewer that has a waveform
monitor. It does not include any GUI. It is made up of these modules:

- `drawkit.waveform`: `generate_waveform` builds a level histogram for each
  output column of a 2-D array. Row zero of the histogram holds the highest
  level. `resize` stretches that histogram to a display size and anchors it
  at the bottom. A vertical scale above one pushes the top levels off the
  display.
- `drawkit.waveform_generator`: `WaveformColormap` turns data into a
  `(height, width, 3)` `uint8` RGB image. It uses HSV gradients
  (`make_waveform_color_range`, `make_waveform_colors`), and columns covered
  by a highlight mask get the highlight colour. `WaveformGenerator` does the
  same work on a worker thread. The settings are held in the frozen
  dataclasses `WaveformSettings`, `WaveformColor`, `ColorRange` and `Hsv`.
- `drawkit.geometry`: the `Point`, `Size` and `Scale` value types, and
  `get_maximum_view_position`.
- `drawkit.view_settings`: `ViewSettings` is an observable model of image
  size, view size, scroll position, zoom and virtual scroll area. It has the
  operations `reset_zoom`, `fit_zoom`, `recenter`, `recenter_view` and
  `update_virtual_size`. Observers register with
  `subscribe("view_position.x", callback)` and similar names.
- `drawkit.view_link`: `ViewLink` mirrors view size, zoom and scroll position
  between two `ViewSettings`, in both directions. `LinkOptions` and `Link`
  choose which axes are shared.
- `drawkit.canvas`: helpers for a scrolling canvas. They cover scroll limits
  (`constrain_scroll`), scroll units (`scroll_units`), centre-pixel
  correction while zooming (`correct_center_pixel`) and window sizing
  (`canvas_window_size`, `CanvasViewOptions`). The module also holds the
  `Modifier` flags.
- `drawkit.waveform_view`: guide-line rows for the waveform display
  (`get_lines`), the even/odd split (`partition_lines`), and the percentage
  labels (`line_labels`).

## Installing

```
pip install .
```

To install and run the tests:

```
pip install .[test]
pytest
```

## Example

```python
import numpy as np

from drawkit.geometry import Size
from drawkit.waveform import generate_waveform, resize

image = np.random.default_rng(0).integers(0, 256, size=(120, 160))

# 256 levels, 64 columns; values are expected to be at most 255.
levels = generate_waveform(image, 255, 256, 64)

# Scale the histogram to a 640x200 display at full vertical scale.
display = resize(levels, Size(640, 200), 1.0)
```

If data exceeds `maximum_value`, a `RuntimeWarning` is issued and the larger
value is used instead.

To produce coloured pixels in the background:

```python
from drawkit.geometry import Size
from drawkit.waveform_generator import WaveformGenerator, WaveformSettings

frames = []

with WaveformGenerator(WaveformSettings(), Size(640, 200), frames.append) as generator:
    generator(image)
```

The callback receives each finished RGB frame, and it runs on the worker
thread. Calling `shutdown()`, or leaving the `with` block, stops the worker.
Frames still waiting in the queue at that point are dropped. If the worker
failed, its error is raised again. Settings, colours and image size can be
changed while the generator runs, through `set_waveform_settings`,
`set_color` and `set_image_size`.

Two views can be linked on their horizontal axis only:

```python
from drawkit.view_link import Link, LinkOptions, ViewLink
from drawkit.view_settings import ViewSettings

main, waveform = ViewSettings(), ViewSettings()

with ViewLink(main, waveform, LinkOptions().set_all(Link.HORIZONTAL)):
    main.set_horizontal_zoom(2.0)
    assert waveform.scale.horizontal == 2.0
```

## What it does not do

drawkit provides no windows, widgets, painting or event handling. It has no
command-line program. The models and helpers above compute the values that a
GUI toolkit would show, and putting them on screen is left to the caller.