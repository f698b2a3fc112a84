"""Users -- the single default owner of all records until authentication exists."""
