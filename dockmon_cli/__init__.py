"""
dockmon - Docker container management and log monitoring CLI

This package lists, removes and updates running containers and streams
merged, timestamped logs from many containers at once.
"""

__version__ = "1.0.0"
