"""Flask web surface for TÄFFÄ."""
