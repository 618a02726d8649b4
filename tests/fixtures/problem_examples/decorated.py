"""Decorated fixtures (E1103, E1803, E1808). Findings land on the def/class line, not the decorator."""

import dataclasses
import functools


@functools.lru_cache(maxsize=None)
def e1103_bad_decorated_signature(host, port, user, password, database, timeout):
    return (host, port, user, password, database, timeout)


@functools.lru_cache(maxsize=None)
def e1103_good_decorated_signature(host, port):
    return (host, port)


def e1803_bad_decorated_class():
    @dataclasses.dataclass
    class order_record:
        total: int = 0

    return order_record


@functools.wraps(print)
def e1808_bad_decorated_mutable_default(items=[]):
    return items
