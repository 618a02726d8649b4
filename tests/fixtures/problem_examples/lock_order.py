"""Lock acquisition fixtures (E1217, E1506). Lock names are unique to each fixture.

E1217 reports one violation per function pair, placed at the earlier function
(by file, then line). The partner of e1217_bad_transfer is therefore an
_entry fixture: it is part of the cycle but never carries the violation.
"""

import threading

accounts_lock = threading.Lock()
ledger_lock = threading.Lock()
cache_lock = threading.Lock()
index_lock = threading.Lock()
alpha_mutex = threading.Lock()
beta_mutex = threading.Lock()
queue_lock = threading.Lock()
stats_lock = threading.Lock()


def e1217_bad_transfer(amount):
    with accounts_lock:
        with ledger_lock:
            return amount


def e1217_entry_audit(amount):
    with ledger_lock:
        with accounts_lock:
            return amount


def e1217_good_same_order_first():
    cache_lock.acquire()
    index_lock.acquire()
    index_lock.release()
    cache_lock.release()


def e1217_good_same_order_second():
    with cache_lock, index_lock:
        return True


def e1217_good_released_before_next():
    cache_lock.acquire()
    cache_lock.release()
    with index_lock:
        pass
    index_lock.acquire()
    index_lock.release()
    with cache_lock:
        return True


def e1217_good_methods_share_order():
    class Store:
        def __init__(self):
            self.read_lock = threading.Lock()
            self.write_lock = threading.Lock()

        def load(self):
            with self.read_lock:
                with self.write_lock:
                    return 1

        def save(self):
            with self.read_lock, self.write_lock:
                return 2

    return Store


def e1506_bad_nested_locks(item):
    with alpha_mutex:
        with beta_mutex:
            return item


def e1506_good_sequential_locks(item):
    with queue_lock:
        value = item
    with stats_lock:
        return value
