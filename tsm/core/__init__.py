"""
Core package: the transition engine, its history ledger and logging policy.
"""
