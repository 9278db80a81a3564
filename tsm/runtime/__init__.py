"""
Runtime package: serialized access to a state machine from threads or
asyncio tasks.
"""
