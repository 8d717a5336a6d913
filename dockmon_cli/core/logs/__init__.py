"""
Concurrent log streaming: formatter, channel, pumps and aggregator.
"""
