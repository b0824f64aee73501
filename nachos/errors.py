"""Error numbers returned by system calls."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["Errno"]


class Errno(IntEnum):
    """System call error codes; every code is a negative number."""

    EPERM = -1
    ENOENT = -2
    ESRCH = -3
    EINTR = -4
    EIO = -5
    ENXIO = -6
    E2BIG = -7
    ENOEXEC = -8
    EBADF = -9
    ECHILD = -10
    EAGAIN = -11
    ENOMEM = -12
    EACCES = -13
    EFAULT = -14
    ENOTBLK = -15
    EBUSY = -16
    EEXIST = -17
    EXDEV = -18
    ENODEV = -19
    ENOTDIR = -20
    EISDIR = -21
    EINVAL = -22
    ENFILE = -23
    EMFILE = -24
    ENOTTY = -25
    ETXTBSY = -26
    EFBIG = -27
    ENOSPC = -28
    ESPIPE = -29
    EROFS = -30
    EMLINK = -31
    EPIPE = -32
    EDOM = -33
    ERANGE = -34
    EDEADLK = -35
    ENAMETOOLONG = -36
    ENOLCK = -37
    ENOSYS = -38
    ENOTEMPTY = -39
    ELOOP = -40
    EWOULDBLOCK = -11
    ENOMSG = -42
    EIDRM = -43
    ECHRNG = -44
    EL2NSYNC = -45
    EL3HLT = -46
    EL3RST = -47
    ELNRNG = -48
    EUNATCH = -49
    ENOCSI = -50
    EL2HLT = -51
    EBADE = -52
    EBADR = -53
    EXFULL = -54
    ENOANO = -55
    EBADRQC = -56
    EBADSLT = -57

    def describe(self) -> str:
        """Return a short human-readable description of the error."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    Errno.EPERM: "Operation not permitted",
    Errno.ENOENT: "No such file or directory",
    Errno.ESRCH: "No such process",
    Errno.EINTR: "Interrupted system call",
    Errno.EIO: "I/O error",
    Errno.ENXIO: "No such device or address",
    Errno.E2BIG: "Arg list too long",
    Errno.ENOEXEC: "Exec format error",
    Errno.EBADF: "Bad file number",
    Errno.ECHILD: "No child processes",
    Errno.EAGAIN: "Try again",
    Errno.ENOMEM: "Out of memory",
    Errno.EACCES: "Permission denied",
    Errno.EFAULT: "Bad address",
    Errno.ENOTBLK: "Block device required",
    Errno.EBUSY: "Device or resource busy",
    Errno.EEXIST: "File exists",
    Errno.EXDEV: "Cross-device link",
    Errno.ENODEV: "No such device",
    Errno.ENOTDIR: "Not a directory",
    Errno.EISDIR: "Is a directory",
    Errno.EINVAL: "Invalid argument",
    Errno.ENFILE: "File table overflow",
    Errno.EMFILE: "Too many open files",
    Errno.ENOTTY: "Not a typewriter",
    Errno.ETXTBSY: "Text file busy",
    Errno.EFBIG: "File too large",
    Errno.ENOSPC: "No space left on device",
    Errno.ESPIPE: "Illegal seek",
    Errno.EROFS: "Read-only file system",
    Errno.EMLINK: "Too many links",
    Errno.EPIPE: "Broken pipe",
    Errno.EDOM: "Math argument out of domain of func",
    Errno.ERANGE: "Math result not representable",
    Errno.EDEADLK: "Resource deadlock would occur",
    Errno.ENAMETOOLONG: "File name too long",
    Errno.ENOLCK: "No record locks available",
    Errno.ENOSYS: "Function not implemented",
    Errno.ENOTEMPTY: "Directory not empty",
    Errno.ELOOP: "Too many symbolic links encountered",
    Errno.ENOMSG: "No message of desired type",
    Errno.EIDRM: "Identifier removed",
    Errno.ECHRNG: "Channel number out of range",
    Errno.EL2NSYNC: "Level 2 not synchronized",
    Errno.EL3HLT: "Level 3 halted",
    Errno.EL3RST: "Level 3 reset",
    Errno.ELNRNG: "Link number out of range",
    Errno.EUNATCH: "Protocol driver not attached",
    Errno.ENOCSI: "No CSI structure available",
    Errno.EL2HLT: "Level 2 halted",
    Errno.EBADE: "Invalid exchange",
    Errno.EBADR: "Invalid request descriptor",
    Errno.EXFULL: "Exchange full",
    Errno.ENOANO: "No anode",
    Errno.EBADRQC: "Invalid request code",
    Errno.EBADSLT: "Invalid slot",
}