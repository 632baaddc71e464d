"""
Screen zone resolution.

Maps screen pixel coordinates to the editor zone they fall in:
left task panel (a), center code editor (c), and the right column split
into hint panel (b, top) and history panel (f, bottom).
"""

from typing import Optional

from config import AOI, ScreenLayout

_DEFAULT_LAYOUT = ScreenLayout()


def resolve_aoi(x: float, y: float, layout: Optional[ScreenLayout] = None) -> AOI:
    """
    Resolve screen coordinates to a task zone.

    Never returns AOI.G; samples outside the tracked content region
    must be tagged by the caller.

    Args:
        x: Screen x coordinate in pixels
        y: Screen y coordinate in pixels
        layout: Screen layout (defaults to 1920x1080, 20/60/20 columns)

    Returns:
        One of AOI.A, AOI.C, AOI.B, AOI.F
    """
    layout = layout or _DEFAULT_LAYOUT
    a_width = layout.width * layout.ratio_a
    c_width = layout.width * layout.ratio_c

    if x < a_width:
        return AOI.A
    if x < a_width + c_width:
        return AOI.C
    return AOI.B if y < layout.height / 2 else AOI.F
