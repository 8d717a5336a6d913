"""
Command line interface for dockmon.
"""
