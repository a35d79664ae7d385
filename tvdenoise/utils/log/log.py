import math
import sys
import time
from contextlib import contextmanager


class Log:
    enable_output = True
    depth = 0
    max_depth = math.inf
    stream = None

    @staticmethod
    def native_print(*args, sep=' ', end='\n'):
        print(*args, sep=sep, end=end, file=Log.stream or sys.stdout)


def lprint(*args, sep=' ', end='\n'):
    """
    Prints a log line indented according to the current section depth.
    """
    if Log.enable_output and Log.depth <= Log.max_depth:
        level = min(Log.max_depth, Log.depth)
        Log.native_print('│ ' * level + '├ ', end='')
        Log.native_print(*args, sep=sep, end=end)


@contextmanager
def lsection(section_header):
    """
    Opens a log section: lines printed inside are indented one level deeper and
    the time spent in the section is reported when it closes.

    :param section_header: header line of the section
    """
    if Log.enable_output and Log.depth + 1 <= Log.max_depth:
        Log.native_print('│ ' * Log.depth + '├╗ ' + section_header)

    Log.depth += 1
    start = time.time()
    try:
        yield
    finally:
        stop = time.time()
        Log.depth -= 1

        if Log.enable_output and Log.depth + 1 <= Log.max_depth:
            elapsed_ms = (stop - start) * 1000
            Log.native_print('│ ' * (Log.depth + 1) + '┴' + f'« {elapsed_ms:.2f} ms')
            Log.native_print('│ ' * Log.depth)
