import sys
from threading import Lock
from time import strftime
from typing import List, TextIO


class ProgressLog:
    """ Writes the launcher's progress lines to the console and to any number of open text files.
        The console is whatever sys.stdout is at the time of the write. Socket clients swap it for a
        per-thread proxy, and a message logged on a client's thread belongs on that client's screen. """

    def __init__(self, *files:TextIO, to_console=True, time_fmt="[%b %d %Y %H:%M:%S]: ") -> None:
        self._files = files            # Text files open for appending. Only these lines get timestamps.
        self._to_console = to_console  # If True, also write to the current standard output.
        self._time_fmt = time_fmt      # Format for file timestamps using time.strftime. If None, do not add them.
        self._lock = Lock()            # Lines from different threads must not interleave.

    def _stamped(self, line:str) -> str:
        if self._time_fmt is None:
            return line
        return strftime(self._time_fmt) + line

    def _destinations(self, line:str) -> List[tuple]:
        """ Pair each stream with the text it should receive. """
        pairs = []
        if self._to_console:
            pairs.append((sys.stdout, line))
        if self._files:
            stamped = self._stamped(line)
            pairs += [(fp, stamped) for fp in self._files]
        return pairs

    def log(self, message:str) -> None:
        """ Write <message> to every destination with a trailing newline. """
        line = message + '\n'
        with self._lock:
            for stream, text in self._destinations(line):
                try:
                    # A shell may take over the process for hours. Lines must not sit in a buffer until it ends.
                    stream.write(text)
                    stream.flush()
                except Exception:
                    # A bad log file (full disk, closed console) must not stop the others, or the launcher.
                    continue

    __call__ = log

    def close(self) -> None:
        """ Close the log files. The console is not ours to close. """
        for fp in self._files:
            fp.close()


def open_log(*filenames:str, encoding='utf-8', **kwargs) -> ProgressLog:
    """ Open a progress log that prints to the console and appends to each of <filenames>.
        Log files remain open until the program is closed. """
    files = [open(f, 'a', encoding=encoding) for f in filenames]
    return ProgressLog(*files, **kwargs)
