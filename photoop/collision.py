"""Flash/target collision detection and lane geometry.

Lanes are horizontal bands measured upward from the bottom of the play
area. A flash rises vertically from a fixed horizontal position and hits any
target close enough horizontally whose lane band contains the flash height.
"""

from typing import List, Sequence, Tuple

from photoop.config import DEFAULT_RULES, GameRules
from photoop.models import Target


def lane_bottom(row: int, rules: GameRules = DEFAULT_RULES) -> float:
    """Lower edge of a lane band (percent of play-area height)."""
    return rules.lane_base + row * rules.lane_spacing


def lane_top(row: int, rules: GameRules = DEFAULT_RULES) -> float:
    """Upper edge of a lane band (percent of play-area height)."""
    return lane_bottom(row, rules) + rules.lane_band_height


def is_hit(
    target: Target,
    flash_position: float,
    flash_height: float,
    rules: GameRules = DEFAULT_RULES,
) -> bool:
    """Check whether a flash at (position, height) captures a target.

    Args:
        target: Target to test
        flash_position: Horizontal position fixed when the flash was triggered
        flash_height: Current flash height
        rules: Geometry and tolerance constants

    Returns:
        True if horizontally within tolerance (strict) and the height lies
        inside the target's lane band (inclusive on both edges)
    """
    if abs(target.position - flash_position) >= rules.hit_tolerance:
        return False
    return lane_bottom(target.row, rules) <= flash_height <= lane_top(target.row, rules)


def resolve_flash(
    targets: Sequence[Target],
    flash_position: float,
    flash_height: float,
    rules: GameRules = DEFAULT_RULES,
) -> Tuple[List[Target], List[Target]]:
    """Split targets into survivors and those captured by the flash.

    Every captured target is removed, however many there are. Scoring is
    the caller's concern (at most one point per tick).

    Returns:
        Tuple of (remaining targets in original order, hit targets)
    """
    remaining: List[Target] = []
    hits: List[Target] = []
    for target in targets:
        if is_hit(target, flash_position, flash_height, rules):
            hits.append(target)
        else:
            remaining.append(target)
    return remaining, hits
