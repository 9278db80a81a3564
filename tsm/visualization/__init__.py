"""
Diagram rendering of the current state and history.
"""
