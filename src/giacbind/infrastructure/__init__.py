"""Infrastructure layer — native library discovery, the cffi boundary, the global lock.

This layer depends on stdlib and cffi.
It must never import from domain, engine, services, commands, or output.
The engine layer bridges between domain models and the native boundary.
"""
