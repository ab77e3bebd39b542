"""Gameplay services.

Each public function is one player operation: it validates ownership and
state through ``guards``, reads and writes through ``parallax.repositories``
inside a single ``atomic()`` scope, and returns plain dict views.
"""
