"""
Example 02: Mapping Declarations

This example demonstrates the fluent builder and Pydantic models.
"""

from typing import Annotated

from pydantic import BaseModel

from tik_objects import QueueSentenceSource, StreamCommand, TikField, entity, load_list


class Route(BaseModel):
    """Route declared with Annotated markers on a Pydantic model"""
    dst_address: Annotated[str, TikField(mandatory=True)] = ""
    gateway: Annotated[str, TikField()] = ""
    distance: Annotated[int | None, TikField(default="1")] = None


class Queue:
    """Plain class mapped with the builder"""

    def __init__(self):
        self.name = ""
        self.upload = ""
        self.download = ""


def set_max_limit(queue, raw):
    queue.upload, _, queue.download = raw.partition("/")


def main():
    print("=== Mapping Declarations ===\n")

    print("1. Pydantic model:")
    routes = StreamCommand(
        "/ip/route/print",
        QueueSentenceSource.from_rows(
            [
                ["!re", "=dst-address=0.0.0.0/0", "=gateway=10.0.0.1"],
                ["!re", "=dst-address=10.0.0.0/24", "=distance=0"],
                ["!done"],
            ]
        ),
    )
    for route in load_list(Route, routes):
        print(f"   - {route.dst_address} via {route.gateway or '-'} (distance {route.distance})")
    print()

    print("2. Builder with a custom setter:")
    entity(Queue).field("name", mandatory=True).field(
        "upload", "max-limit", setter=set_max_limit
    ).register()
    queues = StreamCommand(
        "/queue/simple/print",
        QueueSentenceSource.from_rows([["!re", "=name=guest", "=max-limit=10M/20M"], ["!done"]]),
    )
    for queue in load_list(Queue, queues):
        print(f"   - {queue.name}: up {queue.upload}, down {queue.download}")


if __name__ == "__main__":
    main()
