from .mem_allocator import FirstFitAllocator, MemoryBlock, BlockInfo, Free, Owned, FREE
from .trace import Simulator, TraceError, Request, Release, parse_trace, simulate
from .report import MemoryStats, collect_stats, format_layout, format_stats, print_report
