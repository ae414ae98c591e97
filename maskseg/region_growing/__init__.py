"""
Seeded region growing.

Grows one region per seed with an intensity-similarity flood fill and merges
all regions into a single foreground mask.
"""

from .region_growing import region_growing, neighbour_offsets

__all__ = ['region_growing', 'neighbour_offsets']
