# xvtools

The user-level tools and several kernel building blocks of a small teaching
Unix, as an ordinary Python library. It is meant for studying how such a
system works, for experimenting with its algorithms, and for running its
small command-line tools on your own machine.

## What is inside

| Module | Contents |
| --- | --- |
| `xvtools.fmt` | The minimal `printf` family (`format`, `fprintf`, `printf`): `%d`, `%l`, `%x`, `%p`, `%s`, `%c`, `%%` |
| `xvtools.ulib` | Small C-library helpers: `atoi`, `strcmp`, `gets` |
| `xvtools.umalloc` | A first-fit free-list allocator over a simulated, growable heap (`Heap`) |
| `xvtools.layout` | Physical memory layout constants and address helpers, `FileType` and `Stat` |
| `xvtools.virtio` | Virtio register offsets and ring / block-request structures that pack to and from bytes |
| `xvtools.prng` | The Park–Miller "minimal standard" generator (`do_rand`, `ParkMiller`) |
| `xvtools.grep` | The tiny regular-expression matcher (`^ . * $`), `grep` and its command |
| `xvtools.sh` | The shell's command-line parser, producing a command tree |
| `xvtools.coreutils` | `cat`, `echo`, `wc`, `ls`, `mkdir`, `rm`, `ln`, `kill` |
| `xvtools.vm` | A simulated Sv39 three-level page table over simulated physical memory |
| `xvtools.bench` | The CPU (matrix multiply) and file I/O benchmarks |

No third-party packages are needed.

## Installing

```
pip install xvtools
```

To run the test suite:

```
pip install "xvtools[test]"
pytest
```

## Commands

Each tool is installed as a command with an `xv-` prefix, so it never
shadows the tools of your own system:

```
xv-echo hello world
xv-cat notes.txt
xv-grep '^a.*z$' words.txt
xv-wc notes.txt
xv-ls .
xv-mkdir scratch
xv-ln notes.txt notes-link.txt
xv-rm notes-link.txt
xv-kill 12345
xv-cpubench
xv-iobench
```

The tools keep their deliberately small behaviour:

- `xv-grep` knows only `^`, `.`, `*` and `$`, and prints only lines that end
  with a newline.
- `xv-ls` prints each name padded to 14 characters, then the type
  (1 directory, 2 file, 3 other), inode number and size; for a directory it
  lists `.`, `..` and then the entries in sorted order.
- `xv-wc` prints lines, words and bytes followed by the file name.
- `xv-mkdir` and `xv-rm` stop at the first path that fails; `xv-rm` removes
  files and empty directories.
- `xv-kill` sends `SIGKILL` (or `SIGTERM` where that is unavailable) to each
  id and ignores ids that are zero or not numbers.
- `xv-cpubench` and `xv-iobench` each run for about 210 seconds and print a
  measurement per interval, then a total. `xv-iobench` writes and reads a
  file named `NNiops` in the current directory, where `NN` is the last two
  digits of its process id.

## Using the library

Formatting in the style of the system's own `printf`:

```python
from xvtools.fmt import format

format("%d %x %s", 42, 255, "hi")   # '42 FF hi'
```

Matching with the small regular-expression engine:

```python
from xvtools.grep import match

if match("^ab*c$", "abbbc"):
    print("matched")
```

Parsing a shell line into a command tree of `ExecCmd`, `RedirCmd`,
`PipeCmd`, `ListCmd` and `BackCmd`:

```python
from xvtools.sh import parse_command, PipeCmd

tree = parse_command("cat README | grep fs > out")
isinstance(tree, PipeCmd)   # True
```

Syntax errors raise `ShellSyntaxError`.

Allocating from a simulated heap:

```python
from xvtools.umalloc import Heap

heap = Heap(1 << 20)
address = heap.malloc(100)
heap.free(address)
```

Running out of heap raises `MemoryError`.

Building a user address space over simulated physical memory:

```python
from xvtools.vm import PhysicalMemory, AddressSpace

memory = PhysicalMemory(64)
space = AddressSpace(memory)
space.load_first(b"\x13\x00\x00\x00")
space.copyin(0, 4)          # b'\x13\x00\x00\x00'
```

Misuse that the kernel would treat as fatal raises `KernelPanic`; a bad user
address passed to `copyin`, `copyout` or `copyinstr` raises `ValueError`.

Drawing pseudo-random numbers with the Park–Miller generator:

```python
from xvtools.prng import ParkMiller

ParkMiller(1).next()        # 33613
```

## What it does not do

- There is no shell command: `xvtools.sh` parses command lines but does not
  run them.
- There is no kernel, file system or disk image: `xvtools.vm`,
  `xvtools.umalloc` and `xvtools.virtio` are self-contained models of single
  parts, and the tools work on the files of the machine they run on.
- There is no stress tester or system-call test suite; only the
  pseudo-random generator is provided.