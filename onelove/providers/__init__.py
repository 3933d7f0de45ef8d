"""Concrete adapters for the interfaces in onelove/interfaces/."""
