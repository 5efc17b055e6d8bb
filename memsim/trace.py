import logging
from collections import namedtuple
from typing import Iterable, Iterator, Tuple

from .mem_allocator import FirstFitAllocator

logger = logging.getLogger(__name__)

Request = namedtuple("Request", ["name", "size", "lineno"])
Release = namedtuple("Release", ["name", "lineno"])


class TraceError(Exception):
    def __init__(self, message, lineno=None):
        super().__init__(message)
        self.lineno = lineno

    def __str__(self):
        msg = super().__str__()
        if self.lineno is not None:
            return f"{msg} (line {self.lineno})"
        return msg


def _parse_int(token, lineno, what):
    # int() alone would also take signs, underscores and non-ascii digits
    if not token.isdigit() or not token.isascii():
        raise TraceError(f"Error parsing number: {what} {token!r} is not a non-negative integer", lineno)
    return int(token)


def _skip(msg, lineno, strict):
    if strict:
        raise TraceError(msg, lineno)
    logger.warning(f"line {lineno}: {msg}, skipped")


def _parse_ops(lines, strict) -> Iterator:
    for lineno, line in lines:
        parts = line.split()
        if not parts:
            continue
        verb = parts[0]
        if verb == "REQUEST":
            if len(parts) != 3:
                _skip(f"malformed REQUEST line {line.strip()!r}", lineno, strict)
                continue
            size = _parse_int(parts[2], lineno, "size")
            if size == 0:
                _skip(f"zero-sized REQUEST for {parts[1]}", lineno, strict)
                continue
            yield Request(parts[1], size, lineno)
        elif verb == "RELEASE":
            if len(parts) != 2:
                _skip(f"malformed RELEASE line {line.strip()!r}", lineno, strict)
                continue
            yield Release(parts[1], lineno)
        else:
            _skip(f"unknown command {verb!r}", lineno, strict)


def parse_trace(lines:Iterable[str], strict=False) -> Tuple[int, Iterator]:
    '''
    The first non-empty line is the total memory in KB, the rest are
    REQUEST/RELEASE commands. Commands are parsed lazily, so a bad number deep
    in the trace only surfaces after the commands before it have been run.
    '''
    numbered = enumerate(lines, start=1)
    for lineno, line in numbered:
        parts = line.split()
        if not parts:
            continue
        if len(parts) != 1:
            raise TraceError(f"Error parsing number: expected total memory size, got {line.strip()!r}", lineno)
        total = _parse_int(parts[0], lineno, "total memory")
        if total < 1:
            raise TraceError("total memory must be at least 1 KB", lineno)
        return total, _parse_ops(numbered, strict)
    raise TraceError("trace is empty, expected total memory size on the first line")


class Simulator:
    def __init__(self, total_size, check=False):
        self.allocator = FirstFitAllocator(total_size)
        self.successful_allocations = 0
        self.failed_allocations = 0
        self.check = check

    def request(self, name, size):
        addr = self.allocator.allocate(name, size)
        if addr is None:
            self.failed_allocations += 1
            msg = f"FAILED: Could not allocate {size} KB to {name} (insufficient memory)"
        else:
            self.successful_allocations += 1
            msg = f"SUCCESS: Allocated {size} KB to {name} at position {addr}"
        print(msg)
        return msg

    def release(self, name):
        released = self.allocator.release(name)
        if released is None:
            msg = f"WARNING: Process {name} not found for deallocation"
        else:
            msg = f"RELEASED: {released.size} KB from {name} at position {released.start}"
        print(msg)
        return msg

    def run(self, commands):
        for cmd in commands:
            if isinstance(cmd, Request):
                self.request(cmd.name, cmd.size)
            elif isinstance(cmd, Release):
                self.release(cmd.name)
            else:
                raise TypeError(f"unsupported trace command {cmd!r}")
            if self.check:
                self.allocator.check_invariants()
            logger.debug(f"line {cmd.lineno}: {len(self.allocator)} blocks, {self.allocator.free_size} KB free")
        return self


def simulate(file_path, strict=False, check=False):
    '''
    Run the trace in file_path and return the Simulator.

    Errors propagate. When the error happens after the total size was read,
    the simulator holding the state reached so far is attached to the
    exception as `partial`, so the caller can still report it.
    '''
    with open(file_path, encoding="utf-8") as file:
        total, commands = parse_trace(file, strict=strict)
        print(f"Initialized memory: {total} KB\n")
        sim = Simulator(total, check=check)
        try:
            sim.run(commands)
        except (TraceError, OSError, UnicodeDecodeError) as e:
            e.partial = sim
            raise
    return sim
