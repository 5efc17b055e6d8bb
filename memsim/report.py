from collections import namedtuple

import numpy as np

SEPARATOR = "=" * 40

MemoryStats = namedtuple("MemoryStats", [
    "total", "allocated", "free",
    "allocated_pct", "free_pct",
    "process_blocks", "free_blocks",
    "largest_free", "fragmentation",
    "successful_allocations", "failed_allocations",
])


def collect_stats(allocator, successful_allocations=0, failed_allocations=0):
    blocks = allocator.blocks()
    # object dtype keeps exact python ints, block sizes are unbounded
    sizes = np.array([b.size for b in blocks], dtype=object)
    free_mask = np.array([b.is_free for b in blocks], dtype=bool)

    total = allocator.total_size
    free = int(sizes[free_mask].sum())
    allocated = int(sizes[~free_mask].sum())
    largest_free = int(sizes[free_mask].max()) if free_mask.any() else 0
    # share of free memory outside the largest free block
    fragmentation = 100.0 * (free - largest_free) / free if free > 0 else 0.0

    return MemoryStats(
        total=total,
        allocated=allocated,
        free=free,
        allocated_pct=100.0 * allocated / total,
        free_pct=100.0 * free / total,
        process_blocks=int(np.count_nonzero(~free_mask)),
        free_blocks=int(np.count_nonzero(free_mask)),
        largest_free=largest_free,
        fragmentation=fragmentation,
        successful_allocations=successful_allocations,
        failed_allocations=failed_allocations,
    )


def format_layout(allocator):
    lines = [SEPARATOR, "Final Memory State", SEPARATOR]
    for i, b in enumerate(allocator, start=1):
        pad = " " * max(1, 10 - len(str(b.end)))
        tag = "" if b.is_free else " - ALLOCATED"
        lines.append(f"Block {i}: [{b.start}-{b.end}]{pad}{b.status} ({b.size} KB){tag}")
    return lines


def format_stats(stats:MemoryStats):
    return [
        SEPARATOR,
        "Memory Statistics",
        SEPARATOR,
        f"Total Memory:           {stats.total} KB",
        f"Allocated Memory:       {stats.allocated} KB ({stats.allocated_pct:.2f}%)",
        f"Free Memory:            {stats.free} KB ({stats.free_pct:.2f}%)",
        f"Number of Processes:    {stats.process_blocks}",
        f"Number of Free Blocks:  {stats.free_blocks}",
        f"Largest Free Block:     {stats.largest_free} KB",
        f"External Fragmentation: {stats.fragmentation:.2f}%",
        "",
        f"Successful Allocations: {stats.successful_allocations}",
        f"Failed Allocations:     {stats.failed_allocations}",
        SEPARATOR,
    ]


def print_report(sim):
    stats = collect_stats(sim.allocator, sim.successful_allocations, sim.failed_allocations)
    print()
    print("\n".join(format_layout(sim.allocator)))
    print()
    print("\n".join(format_stats(stats)))
    return stats
