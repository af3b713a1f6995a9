"""Building blocks for a TFTP service: digests, dumps, queues, sockets, settings and logging."""

__version__ = "0.1.0"

__all__ = [
    "asynclog",
    "challenge",
    "cmdline",
    "dump",
    "inisettings",
    "md5",
    "msgqueue",
    "ping",
    "scandir",
    "tcp4u",
]