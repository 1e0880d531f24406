# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Alias assignment for modules sharing a flat namespace.

Two files such as `a/util.wgsl` and `b/util.wgsl` cannot both be called
`util` once composed. Every module starts with its bare file stem; names
claimed by more than one module are refined by appending the next path
component up (`util_a`, `util_b`) until every name has exactly one owner.
When a path runs out of components the claimant's position in the
colliding group is appended instead.

Buckets are refined one at a time and refined names go back into the index,
so they may collide again and be refined further.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from .models import Module

logger = logging.getLogger(__name__)


def reduced_names(modules: Iterable[Module]) -> Dict[Module, str]:
    """Assign every module an alias unique among `modules`.

    Args:
        modules: Distinct modules of one resolution pass. Iteration order
            decides which bucket is refined first.

    Returns:
        Mapping of module to alias.
    """
    forwards: Dict[Module, str] = {}
    # alias -> (path components consumed, module) for every current claimant
    backwards: Dict[str, List[Tuple[int, Module]]] = {}

    # Assign names by increasing the amount of the path present until distinguished
    for module in modules:
        backwards.setdefault(module.name, []).append((1, module))

    taken: Dict[str, Module] = {}
    while backwards:
        colliding_name = next(iter(backwards))
        claimants = backwards.pop(colliding_name)

        # A lone claimant keeps the name unless a module already owns it
        if len(claimants) == 1 and colliding_name not in taken:
            _, module = claimants[0]
            forwards[module] = colliding_name
            taken[colliding_name] = module
            continue

        logger.debug(f"Refining alias `{colliding_name}` shared by {len(claimants)} module(s)")
        for i, (path_size, module) in enumerate(claimants):
            extra_component = module.nth_path_component(path_size)
            if extra_component is not None:
                new_name = f"{colliding_name}_{extra_component}"
            else:
                new_name = f"{colliding_name}{i}"
            backwards.setdefault(new_name, []).append((path_size + 1, module))

    return forwards
