"""Blueprints for the TÄFFÄ web surface."""
