"""Naming, documentation and default-argument fixtures (E1803, E1805, E1808)."""


def e1803_bad_camelCaseName(value):
    """Mixed-case function name."""
    return value


def e1803_bad_lowercase_class():
    """Class names use CapWords."""

    class request_handler:
        pass

    return request_handler


def e1803_good_pep8_names():
    """Snake-case function with a CapWords class."""

    class RequestHandler:
        def handle_request(self):
            return self

    return RequestHandler


def e1805_bad_undocumented(value):
    return value * 2


def e1805_good_documented(value):
    """Return twice the value."""

    def helper(item):
        return item

    return helper(value) * 2


def e1808_bad_list_default(item, items=[]):
    items.append(item)
    return items


def e1808_bad_dict_factory_default(key, cache=dict()):
    return cache.get(key)


def e1808_good_none_default(item, items=None):
    items = list(items or ())
    items.append(item)
    return items


def e1808_good_tuple_default(key, allowed=("a", "b")):
    return key in allowed
