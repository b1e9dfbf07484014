"""Engine layer — runtime, expressions, contexts, matrices, and tiered dispatch.

The engine may import from domain, infrastructure, config, and plugins.
It must never import from services, commands, or output.
"""
