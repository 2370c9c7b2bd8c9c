"""Engine layer: tick context, colony loop, task runner, hauling, production.

Modules are imported directly (``colonybot.engine.colony_loop``) to keep the
hive and engine layers free of import cycles.
"""
