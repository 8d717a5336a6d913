"""
System level helpers.
"""
