#!/usr/bin/env python3
"""
Collision handling for the gravity simulator.

Supports three modes:
- None: collisions are ignored.
- Merge: perfectly inelastic merge conserving mass and momentum. The lower index
  survives in place; the higher index is absorbed and scheduled for removal.
- Elastic: 1D elastic exchange along the collision normal for approaching pairs,
  followed by a symmetric positional correction that removes the overlap.

The resolver runs once per tick after every body has been integrated. Merged
bodies are not deleted mid-scan: their indices are collected and reported so the
store can remove them after the scan, highest index first.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from .data_models import Body, CollisionMode, radius_for_mass
from .vector_utils import vec_dist, vec_dot, vec_rotate, vec_sub

logger = logging.getLogger("gravsim")


@dataclass
class CollisionReport:
    """Outcome of one resolver pass."""
    removed: List[int] = field(default_factory=list)  # descending, ready to delete
    merges: int = 0
    bounces: int = 0
    message: Optional[str] = None

    @property
    def collided(self) -> bool:
        return bool(self.merges or self.bounces)


def handle_collisions(bodies: Sequence[Body], mode, density: float) -> CollisionReport:
    """
    Detect and resolve collisions between bodies.

    Bodies touch when the distance between centres is at most the sum of their
    radii, radius = (mass / density) ** (1/3). Velocities, masses and positions
    are updated in place; absorbed indices are returned, not removed.
    """
    mode = CollisionMode.coerce(mode)
    report = CollisionReport()
    if mode is CollisionMode.NONE or len(bodies) < 2:
        return report

    to_remove: Set[int] = set()
    n = len(bodies)
    for i in range(n):
        if i in to_remove:
            continue
        bi = bodies[i]
        for j in range(i + 1, n):
            if j in to_remove:
                continue
            bj = bodies[j]

            dist = vec_dist(bi.position, bj.position)
            r_sum = radius_for_mass(bi.mass, density) + radius_for_mass(bj.mass, density)
            if dist > r_sum:
                continue

            if mode is CollisionMode.MERGE:
                _merge_pair(bi, bj)
                to_remove.add(j)
                report.merges += 1
                report.message = f"Merged body {j} into body {i}"
                logger.info("merged body %d into body %d (mass %.3g)", j, i, bi.mass)
            elif _apply_elastic(bi, bj, dist, r_sum):
                report.bounces += 1
                report.message = f"Elastic collision: body {i} <-> body {j}"

    report.removed = sorted(to_remove, reverse=True)
    return report


def _merge_pair(survivor: Body, absorbed: Body) -> None:
    """Fold `absorbed` into `survivor`, conserving mass and momentum."""
    m_total = survivor.mass + absorbed.mass
    survivor.velocity = (
        (survivor.velocity[0] * survivor.mass + absorbed.velocity[0] * absorbed.mass) / m_total,
        (survivor.velocity[1] * survivor.mass + absorbed.velocity[1] * absorbed.mass) / m_total,
    )
    survivor.mass = m_total


def _apply_elastic(bi: Body, bj: Body, dist: float, r_sum: float) -> bool:
    """
    Elastic bounce in the collision-normal frame, then overlap removal.

    Returns True when velocities were exchanged (the pair was approaching).
    Immovable bodies act as infinitely massive walls.
    """
    delta = vec_sub(bi.position, bj.position)
    relative_velocity = vec_sub(bi.velocity, bj.velocity)
    exchanged = False

    if vec_dot(delta, relative_velocity) < 0 and (bi.movable or bj.movable):
        angle = math.atan2(delta[1], delta[0])
        ui = vec_rotate(bi.velocity, -angle)
        uj = vec_rotate(bj.velocity, -angle)
        if bi.movable and bj.movable:
            mi, mj = bi.mass, bj.mass
            m_total = mi + mj
            ui_n = ((mi - mj) / m_total) * ui[0] + ((2.0 * mj) / m_total) * uj[0]
            uj_n = ((2.0 * mi) / m_total) * ui[0] + ((mj - mi) / m_total) * uj[0]
        elif bi.movable:
            ui_n, uj_n = 2.0 * uj[0] - ui[0], uj[0]
        else:
            ui_n, uj_n = ui[0], 2.0 * ui[0] - uj[0]
        bi.velocity = vec_rotate((ui_n, ui[1]), angle)
        bj.velocity = vec_rotate((uj_n, uj[1]), angle)
        exchanged = True

    _separate(bi, bj, delta, dist, r_sum)
    return exchanged


def _separate(bi: Body, bj: Body, delta, dist: float, r_sum: float) -> None:
    """Push the pair apart along the separation so that they just touch."""
    overlap = r_sum - dist
    if overlap <= 0:
        return
    # Coincident centres have no separation direction; pick +x.
    nx, ny = (delta[0] / dist, delta[1] / dist) if dist > 0 else (1.0, 0.0)
    if bi.movable and bj.movable:
        share_i = share_j = overlap * 0.5
    elif bi.movable:
        share_i, share_j = overlap, 0.0
    elif bj.movable:
        share_i, share_j = 0.0, overlap
    else:
        return
    bi.position = (bi.position[0] + nx * share_i, bi.position[1] + ny * share_i)
    bj.position = (bj.position[0] - nx * share_j, bj.position[1] - ny * share_j)
