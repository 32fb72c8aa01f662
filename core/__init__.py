"""core package initialization.

Making `core` an explicit package so imports like `import core.ecs`
work reliably when running `main.py` from the project root.

Nothing in here imports pygame except ``app`` and ``assets``; the rest
runs headless.
"""

__all__ = [
    "app", "assets", "bootstrap", "collision", "constants", "data", "ecs",
    "errors", "events", "geometry", "scene", "tiles", "tuning", "zone",
]
