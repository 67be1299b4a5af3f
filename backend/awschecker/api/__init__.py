"""HTTP exposition surface."""
