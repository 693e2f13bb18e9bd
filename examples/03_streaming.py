"""
Example 03: Streaming and Duration Loads

This example demonstrates load_async, cancellation and load_with_duration.
"""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Annotated

from tik_objects import (
    QueueSentenceSource,
    SourceClosedError,
    StreamCommand,
    TikField,
    aload_list,
    load_async,
    load_with_duration,
)


@dataclass
class Traffic:
    """Sample from /interface/monitor-traffic"""
    name: Annotated[str, TikField(mandatory=True)] = ""
    rx_bits_per_second: Annotated[int | None, TikField()] = None


def produce(source, count, delay=0.05):
    """Feed samples the way a protocol reader thread would."""
    for i in range(count):
        time.sleep(delay)
        try:
            source.push(["!re", "=name=ether1", f"=rx-bits-per-second={i * 1000}"])
        except SourceClosedError:
            return  # cancelled


def main():
    logging.basicConfig(level=logging.INFO)
    print("=== Streaming ===\n")

    print("1. load_async with cancel_and_join:")
    source = QueueSentenceSource()
    command = StreamCommand("/interface/monitor-traffic", source)
    enough = threading.Event()
    samples = []

    def on_item(sample):
        samples.append(sample)
        if len(samples) == 3:
            enough.set()

    threading.Thread(target=produce, args=(source, 10), daemon=True).start()
    load_async(Traffic, command, on_item, on_error=print, on_done=lambda: print("   done"))
    enough.wait(5)
    command.cancel_and_join(5)
    print(f"   received {len(samples)} samples, state={command.state.value}\n")

    print("2. load_with_duration:")
    source = QueueSentenceSource()
    threading.Thread(target=produce, args=(source, 100), daemon=True).start()
    command = StreamCommand("/interface/monitor-traffic", source)
    collected = load_with_duration(Traffic, command, 0.3)
    print(f"   collected {len(collected)} samples in about 0.3s\n")

    print("3. aload_list from a coroutine:")
    command = StreamCommand(
        "/interface/monitor-traffic",
        QueueSentenceSource.from_rows([["!re", "=name=ether2"], ["!done"]]),
    )
    print(f"   {asyncio.run(aload_list(Traffic, command))}")


if __name__ == "__main__":
    main()
