""" Test package for the dev launcher. __init__.py holds small helpers shared by the test modules. """

import time


def wait_for(predicate, timeout=5.0, interval=0.01) -> bool:
    """ Poll <predicate> until it returns True or <timeout> seconds pass. Background threads need a moment. """
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
