# nachos

A small instructional operating system kernel written in Python.

- **Threads and scheduling**: `nachos.thread.Thread` provides `fork`,
  `yield_cpu`, `sleep`, `begin` and `finish`. `nachos.scheduler.Scheduler`
  keeps a first-in, first-out ready list. Each kernel thread runs on its own
  host thread, and only one of them executes at a time.
- **Synchronization**: `nachos.synch` has `Semaphore` (`p`, `v`), `Lock`
  (`acquire`, `release`, `is_held_by_current_thread`, usable in a `with`
  block) and a Mesa-style `Condition` (`wait`, `signal`, `broadcast`).
  `nachos.synchlist.SynchList` is a list whose `remove_front` waits until an
  item is there.
- **Console**: `nachos.synchconsole.SynchConsoleInput.get_char` and
  `SynchConsoleOutput.put_char` read and write one character at a time. They
  default to standard input and standard output.
- **Kernel**: `nachos.kernel.Kernel` holds the running thread, the scheduler
  and the console. It provides `thread_self_test`, `console_test` and `idle`.
  `parse_kernel_args` reads the options `-rs seed`, `-s`, `-ci file`,
  `-co file`, `-f`, `-n reliability`, `-m id` and `-u` into a
  `KernelOptions`.
- **Address spaces**: `nachos.addrspace.AddrSpace` loads a NOFF program image
  into a memory byte array. It sizes the page table and translates virtual
  addresses. A failed translation raises `TranslationFault`, whose `kind` is an
  `ExceptionType`.
- **System calls**: `nachos.exception.SystemCalls` handles the system calls
  that user programs make:
  - console input and output of numbers, characters and strings;
  - random numbers;
  - file create, remove, open, close, read, write and seek.

  `nachos.syscalls.SyscallCode` lists the call numbers.
  `nachos.errors.Errno` lists the error codes, and `Errno.describe()` gives a
  description of each.
- **Object files**: `nachos.coff` reads the headers of little-endian MIPS COFF
  files. `nachos.noff` reads and writes NOFF headers: `parse_noff_header`
  accepts either byte order, and `NoffHeader.to_bytes` writes little-endian.

## Installation

```
pip install .
```

## Converting an executable

A little-endian MIPS COFF executable must be linked with no shared text. The
`coff2noff` command turns it into a NOFF file:

```
coff2noff program.coff program.noff
```

- It prints the number of sections and one line for each section.
- It copies `.text` and `.data` into the output.
- It records the address and size of `.bss`.
- It writes the NOFF header in little-endian order.

Some inputs make the conversion fail:

- a file that is too short;
- a wrong magic number;
- an unknown section;
- a `.bss` section that follows on directly from an earlier one.

On failure, the command removes the partial output file, prints the reason and
exits with status 1.

The conversion is also available from Python:

```python
from nachos.coff2noff import convert

header = convert("program.coff", "program.noff")
print(header.code.size, header.init_data.size, header.uninit_data.size)
```

`convert` raises `ConversionError` on failure.

## Loading a program into an address space

```python
from nachos.addrspace import AddrSpace

memory = bytearray(128 * 32)
space = AddrSpace(memory, page_size=128, num_phys_pages=32)
with open("program.noff", "rb") as f:
    space.load(f.read())
physical = space.translate(0x40, writing=False)
registers = space.initial_registers()   # {"pc": 0, "next_pc": 4, "sp": ...}
```

The address space covers the program's code and data. It also covers 1024
bytes of stack (`USER_STACK_SIZE`), rounded up to whole pages. `load` raises
`ValueError` if the program needs more pages than there are.

## Running the kernel self test

```python
from nachos.kernel import Kernel, parse_kernel_args

with Kernel(parse_kernel_args(["-rs", "7"])) as kernel:
    kernel.thread_self_test()
```

The self test does three things:

- It ping-pongs two threads that each print five lines and yield.
- It passes a semaphore back and forth between two threads.
- It passes values between two threads through two synchronized lists.

## System calls

```python
from nachos.exception import SystemCalls
from nachos.kernel import Kernel
from nachos.syscalls import SyscallCode

memory = bytearray(1024)
memory[0:9] = b"data.txt\0"
with Kernel() as kernel, SystemCalls(
    kernel.synch_console_in, kernel.synch_console_out, "files", memory
) as calls:
    calls.print_num(-42)
    calls.create(0)                        # 0 on success, -1 on failure
    file_id = calls.open(0)                # an id from 2 to 9, or -1
    print(calls.dispatch(SyscallCode.ADD, (2, 3)))   # 5
```

Each handler returns the value that goes back to the user program:

- `remove` and `close` return 1 on success and -1 on failure.
- `read` returns the number of bytes read, -1 on failure, or -2 at end of
  file.
- `write` returns the number of bytes written, or -1 on failure.
- `seek` returns the new position, or -1 on failure. A position of -1 means
  the end of the file.

File ids 0 and 1 stand for console input and console output. Files are kept in
the host directory given as `file_root`.

`dispatch` behaves as follows for calls it does not run:

- It raises `Halt` for `SyscallCode.HALT`.
- It raises `ValueError` for a call it does not handle: exit, exec, join and
  the user-level thread calls.

## What the package does not do

- There is no simulated MIPS processor. A program can be loaded into an
  address space and its addresses translated, but it cannot be executed. The
  system call handlers are called directly from Python.
- There is no simulated disk or on-disk file system. System call files live
  in an ordinary host directory. The `-f` option is recorded but formats
  nothing.
- There is no network. The `-n` and `-m` options are recorded, but no
  messages are sent.
- There is no timer and no time slicing. Threads switch only when they yield,
  block or finish. Interrupts are console callbacks that `Kernel.idle` runs in
  turn.
- The only command is `coff2noff`. The kernel is used from Python.

## Tests

```
pip install .[test]
pytest
```