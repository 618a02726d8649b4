"""Error-handling fixtures (E13xx)."""

import contextlib
import logging

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


def e1301_bad_bare_except(path):
    try:
        return open(path).read()
    except:
        return None


def e1301_good_specific_except(path):
    try:
        return open(path).read()
    except OSError:
        return None


def e1303_bad_suppress_everything(path):
    with contextlib.suppress(Exception):
        return open(path).read()


def e1303_good_suppress_specific(path):
    with contextlib.suppress(FileNotFoundError):
        return open(path).read()


def e1306_bad_swallowed(path):
    try:
        return open(path).read()
    except OSError:
        pass


def e1306_bad_swallowed_in_loop(paths):
    for path in paths:
        try:
            open(path).close()
        except OSError:
            continue


def e1306_good_logged(path):
    try:
        return open(path).read()
    except OSError as exc:
        logger.warning("cannot read %s: %s", path, exc)
        return None


def e1307_bad_generic_raise(value):
    if value is None:
        raise Exception("value is required")
    return value


def e1307_good_specific_raise(value):
    if value is None:
        raise ValueError("value is required")
    return value


def e1309_bad_raise_in_del():
    class Handle:
        def __del__(self):
            raise RuntimeError("handle leaked")

    return Handle


def e1309_good_quiet_del():
    class Handle:
        def __del__(self):
            logger.debug("handle released")

    return Handle


def e1310_bad_lost_context(mapping, key):
    try:
        return mapping[key]
    except KeyError:
        raise StorageError(f"missing {key}")


def e1310_good_chained(mapping, key):
    try:
        return mapping[key]
    except KeyError as exc:
        raise StorageError(f"missing {key}") from exc


def e1310_good_reraise(mapping, key):
    try:
        return mapping[key]
    except KeyError as exc:
        logger.error("missing %s", key)
        raise exc
