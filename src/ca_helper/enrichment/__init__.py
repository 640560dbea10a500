"""
Wiki enrichment.

Components:
- wiki.py: page fetch + table parsing
- cache.py: on-disk JSON cache with TTL
- index.py: normalized-name lookup
- merge.py: combine host tasks with wiki records
- service.py: load lifecycle (cache, background fetch, listeners)
"""
