"""Combat achievement helper: decode progress, enrich it from the wiki, recommend what to do next."""
