"""Toolkit-neutral UI layer: controllers that front-ends drive."""
