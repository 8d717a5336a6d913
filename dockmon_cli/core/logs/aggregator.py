"""
Fan-in of container log pumps into one output stream.
"""

import logging
import sys
from typing import List, Optional, TextIO

from dockmon_cli.core.containers import ContainerManager, ContainerRef
from dockmon_cli.core.logs.channel import open_channel
from dockmon_cli.core.logs.pump import LogPump

logger = logging.getLogger(__name__)


class LogAggregator:
    """
    Owns the log channel and writes every received line in arrival order.

    Pumps are added with ``add()``; ``run()`` then prints until every pump
    has finished or the aggregator is stopped. Stopping closes the receiver,
    stops every pump and joins them all before ``run()`` returns.

    Example:
        >>> aggregator = LogAggregator(ContainerManager(), tail=10)
        >>> aggregator.add(ContainerRef.from_name("web"))
        >>> aggregator.run()
    """

    def __init__(
        self,
        manager: ContainerManager,
        tail: int = 20,
        use_color: bool = False,
        output: Optional[TextIO] = None
    ):
        self.manager = manager
        self.tail = tail
        self.use_color = use_color
        self.output = output
        self.pumps: List[LogPump] = []
        self._sender, self._receiver = open_channel()

    def add(self, container: ContainerRef) -> LogPump:
        """Start a pump for a container."""
        pump = LogPump(
            container,
            self._sender.clone(),
            self.manager,
            tail=self.tail,
            use_color=self.use_color
        )
        self.pumps.append(pump)
        logger.debug(f"Starting log pump for {container}")
        return pump.start()

    def run(self) -> int:
        """
        Print lines until all pumps are done or the aggregator is stopped.

        Returns:
            Number of lines written
        """
        # only the pumps hold senders from here on
        self._sender.close()
        output = self.output or sys.stdout

        written = 0
        try:
            for line in self._receiver:
                print(line, file=output, flush=True)
                written += 1
        except KeyboardInterrupt:
            logger.debug("Interrupted, stopping log pumps")
            raise
        except BrokenPipeError:
            logger.debug("Output closed, stopping log pumps")
        finally:
            self.shutdown()
        return written

    def stop(self) -> None:
        """Close the receiver. Safe to call from another thread."""
        self._receiver.close()

    def shutdown(self) -> None:
        """Close the receiver, stop every pump and wait for all of them."""
        self._receiver.close()
        self._sender.close()
        for pump in self.pumps:
            pump.stop()
        for pump in self.pumps:
            pump.join()
        logger.debug(f"Stopped {len(self.pumps)} log pumps")
