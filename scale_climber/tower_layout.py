"""Geometry of the tower: where blocks sit and where the indicator goes."""

from typing import Optional, Tuple

LEVEL_COUNT = 8
BLOCK_FRACTION = 1.0 / LEVEL_COUNT

# Positions outside this range are not drawn
MIN_DRAWN_POSITION = -1.0
MAX_DRAWN_POSITION = 8.0


def indicator_center_fraction(position: Optional[float]) -> Optional[float]:
    """Height of the indicator's centre as a fraction of the tower, from the bottom.

    Position 0 is the middle of the Do block, so the rest position -0.5 sits
    on the floor of the tower.
    """
    if position is None or not MIN_DRAWN_POSITION <= position <= MAX_DRAWN_POSITION:
        return None
    return position * BLOCK_FRACTION + BLOCK_FRACTION / 2


def block_rect(
    index: int, left: int, top: int, width: int, height: int
) -> Tuple[int, int, int, int]:
    """(x, y, w, h) of block ``index`` (0 = bottom Do) in a tower drawn at the given box."""
    block_height = height / LEVEL_COUNT
    y = top + height - (index + 1) * block_height
    return left, int(round(y)), width, int(round(block_height))


def block_at(y: int, top: int, height: int) -> Optional[int]:
    """Index of the block under screen row ``y``, or None outside the tower."""
    if y < top or y >= top + height:
        return None
    from_bottom = top + height - y
    return min(LEVEL_COUNT - 1, int(from_bottom / (height / LEVEL_COUNT)))
