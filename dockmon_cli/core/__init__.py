"""
Container operations and log streaming.
"""
