"""
Example 01: Loading Entities

This example demonstrates loading typed entities from recorded device replies.
"""

from dataclasses import dataclass
from typing import Annotated

from tik_objects import (
    CardinalityError,
    QueueSentenceSource,
    StreamCommand,
    TikField,
    load_list,
    load_single,
    load_single_or_default,
)


@dataclass
class Interface:
    """Interface entry from /interface/print"""
    id: Annotated[str, TikField(".id", mandatory=True)] = ""
    name: Annotated[str, TikField(mandatory=True)] = ""
    running: Annotated[bool, TikField(default="false")] = False
    mtu: Annotated[int | None, TikField()] = None


REPLIES = [
    ["!re", "=.id=*1", "=name=ether1", "=running=true", "=mtu=1500"],
    ["!re", "=.id=*2", "=name=ether2", "=running=false"],
    ["!re", "=.id=*3", "=name=wlan1", "=mtu=2290"],
    ["!done"],
]


def interface_print(replies=REPLIES):
    return StreamCommand("/interface/print", QueueSentenceSource.from_rows(replies))


def main():
    print("=== Loading Entities ===\n")

    print("1. load_list:")
    for iface in load_list(Interface, interface_print()):
        print(f"   - {iface.name} (id={iface.id}, running={iface.running}, mtu={iface.mtu})")
    print()

    print("2. load_single:")
    ether1 = load_single(Interface, interface_print([REPLIES[0], ["!done"]]))
    print(f"   {ether1}\n")

    print("3. load_single_or_default on an empty reply:")
    print(f"   {load_single_or_default(Interface, interface_print([['!done']]))}\n")

    print("4. load_single with several rows:")
    try:
        load_single(Interface, interface_print())
    except CardinalityError as e:
        print(f"   {e}\n")


if __name__ == "__main__":
    main()
