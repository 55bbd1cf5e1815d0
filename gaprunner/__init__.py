"""
GapRunner Package
=================

Core engine for GapRunner, a tile-matching arcade game: a scrolling run of
numbered tiles has gaps, and the player fills them left to right by tapping
matching tiles from a grid before the run scrolls off screen.

The engine covers:

- Sequence and gap generation
- Selection pool layout
- Gap resolution and scoring
- Lives, rounds and session end
- Record persistence

All tunable parameters are in game_config.yaml.
"""
