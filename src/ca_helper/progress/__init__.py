"""
Player progress.

Components:
- decoder.py: completion bitfield decoding + point totals
- tiers.py: tier thresholds and progress towards the next tier
- manual.py: tasks marked done by hand
- sync.py: completed ids from the wiki's sync service
"""
