"""core/ -- Configuration, error taxonomy, and the shared storage handle.

Layer rule: core/ is the kernel and imports nothing from api/, auth/, or journal/.
"""
