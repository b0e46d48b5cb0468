# poolkit

Three small tools for studying how pooled resources behave:

- **`poolkit.mempool`**: a memory pool over a simulated address space. It
  hands out small blocks from fixed-size pages and sends large requests to a
  separate large-block list.
- **`poolkit.leakcheck`**: an allocation tracker that records every live
  allocation as a file in a directory. Anything that is never freed stays
  visible as a leak, and freeing an address twice raises an error.
- **`poolkit.threadpool`**: a fixed set of worker threads that pull tasks from
  a bounded queue. `poolkit.bench` measures its throughput.

## Installation

```
pip install poolkit
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install "poolkit[test]"
pytest
```

## Memory pool

`MemoryPool(size)` creates a pool whose first page has `size` usable bytes.
Addresses are plain integers. `pool.max` is the small-block limit: `size`, but
never more than 4095. Requests up to that limit are carved out of pages, and a
new page of the same size is added when the existing ones have no room.
Larger requests are kept on their own list and can be released one at a time
with `free`. `free` ignores addresses the pool does not track.

`align(n, alignment)` rounds `n` up to the next multiple of `alignment`, which
must be a power of two.

```python
from poolkit.mempool import MemoryPool, align

assert align(17, 32) == 32

with MemoryPool(4096) as pool:
    small = pool.alloc(512)          # aligned to 32 bytes
    packed = pool.nalloc(10)         # no alignment
    zeroed = pool.calloc(32)         # filled with zeros
    view = pool.buffer(zeroed, 32)   # writable memoryview of the bytes behind an address

    big = pool.alloc(8192)           # goes on the large-block list
    pool.free(big)

    aligned = pool.memalign(1024, 64)

    pool.reset()                     # drop large blocks, rewind every page
```

`memalign` raises `ValueError` unless the alignment is a power of two and a
multiple of 8. A negative size raises `ValueError`, and so does `buffer` for a
range that was never allocated. Leaving the `with` block closes the pool; you
can also call `close()` directly. A closed pool raises `ValueError` when it is
used.

To run the demonstration, which makes a series of small, zeroed, large and
dense allocations and prints a few pool values:

```
poolkit-mempool
```

## Leak tracking

`LeakTracker(directory)` creates `directory` if needed (default `mem`). Every
`malloc(size)` returns a new address and writes a file `<address>.mem` holding
the caller's file, function and line, the address and the size. `free` removes
the file. Freeing an address that has no file raises `DoubleFreeError`, whose
`address` attribute holds the address. `leaks()` returns a dict from each
address that still has a file to its record line.

```python
from poolkit.leakcheck import DoubleFreeError, LeakTracker

tracker = LeakTracker("mem")
a = tracker.malloc(10)
b = tracker.malloc(15)
tracker.free(b)

try:
    tracker.free(b)
except DoubleFreeError:
    print("double free caught")

print(tracker.leaks())   # the allocation at `a` is still live
```

To run the demonstration, which allocates three blocks, frees two and prints
the record of the one left behind:

```
poolkit-leakcheck
poolkit-leakcheck --directory /tmp/records
```

## Thread pool

`ThreadPool(thread_number, max_requests)` starts `thread_number` worker
threads and prints a line for each one it creates. Both numbers must be
positive, otherwise `ValueError` is raised. A task is any object with a
`process()` method; workers take tasks in the order they were queued.
`append_task` returns `False` if the queue already holds `max_requests` tasks
or the pool is closed. Closing the pool, directly with `close()` or by leaving
a `with` block, lets the workers drain the queue and then joins them.

```python
from poolkit.threadpool import ThreadPool

class Greet:
    def __init__(self, name):
        self.name = name

    def process(self):
        print("hello,", self.name)

with ThreadPool(4, 100) as pool:
    for name in ["ada", "grace", "linus"]:
        pool.append_task(Greet(name))
```

### Benchmark

`run_benchmark(thread_num, max_tasks)` (defaults 16 and 10000) submits
`max_tasks` `CountingTask` objects, each summing a fixed range of numbers. It
waits until all of them are done and returns a `BenchmarkResult` with
`threads`, `tasks`, `elapsed_ms`, `throughput` (tasks per second) and
`report()`, the results as text. From the command line:

```
poolkit-bench
poolkit-bench --threads 8 --tasks 2000
```

It shows a running count of completed tasks, then prints the thread count, the
task count, the elapsed time and the tasks per second.

## What poolkit does not do

- `MemoryPool` does not manage the process's real memory. Its addresses are
  numbers in a simulated address space, backed by Python byte arrays.
- `LeakTracker` does not intercept Python's own allocations. It only knows
  about the blocks handed out by its `malloc` and released by its `free`.