"""
Persistence package: saving and restoring the current state through a
key-value byte store.
"""
