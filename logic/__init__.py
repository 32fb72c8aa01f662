"""logic — Per-frame systems and the rules of the tile world.

Modules
-------
tick            — per-frame orchestrator: clock, inventory toggle,
                  dialog input or movement + talk, event drain
movement        — player movement with per-axis tile/actor collision
transitions     — waypoint and edge-link map changes
dialogue        — NPC scripts, the conversation state machine, proximity
inventory       — slot inventory with once-only grants and drag/drop
input_manager   — raw pygame input → intents → ``InputSnapshot``
entity_factory  — player / NPC spawning from loader descriptors
camera          — camera placement over the active map
"""
