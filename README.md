# tftpkit

Building blocks for a small TFTP service, in pure Python with no
third-party dependencies.

## Modules

- `tftpkit.md5` – MD5 digests (`MD5`, `md5`). `MD5` has `update`, `digest`,
  `hexdigest` and `copy`, much like a `hashlib` object.
- `tftpkit.dump` – hexadecimal dumps, 16 bytes per line with an ASCII column.
  `dump_lines(data, prefix)` returns the lines; `bin_dump(data, prefix, write)`
  writes them through `write` (standard error by default). The prefix is cut
  to 19 characters and an empty frame gives a single `Empty Message` line.
- `tftpkit.msgqueue` – `MessageQueue(max_items)`, a thread-safe FIFO holding
  at most `max_items - 1` messages. `push(data, type)` returns an identifier
  counting up from 1 and raises `QueueFullError` when the queue stays full
  after a few short waits; `pop()` returns a `Message` (`data`, `msg_id`,
  `type`) or `None`; `wait_until_empty()` blocks until the queue is drained.
- `tftpkit.tcp4u` – socket helpers: `get_listen_socket`, `tcp_connect`,
  `tcp_recv` (with a timeout in seconds), `tcp_send`, length-prefixed frames
  with `pp_send` / `pp_recv` (two-byte big-endian length, at most
  `MAX_FRAME` = 0x7FFF bytes), and `udp_send` from a chosen local port.
  Failures raise `Tcp4uError` or its subclasses `Tcp4uTimeout`,
  `SocketClosed`, `FrameOverflow` and `BindError`.
- `tftpkit.challenge` – a version-and-challenge handshake over framed TCP.
  `exchange_challenge(sock, seed, version, key)` returns the peer's version or
  raises `VersionMismatch` / `BadAuthentication`. `sym_crypt`,
  `pack_challenge` and `unpack_challenge` are usable on their own.
- `tftpkit.ping` – ICMP echo over a raw IPv4 socket. `ping(address,
  timeout_ms, ttl)` returns `(round_trip_ms, reply_ttl)` and raises
  `PingError` or one of `PingPrivilegeError`, `PingTimeout`,
  `PingUnreachable`, `PingTtlExpired`. `in_cksum`, `build_echo_request` and
  `parse_echo_reply` (which returns an `EchoReply`) work without a socket.
- `tftpkit.inisettings` – settings in INI files. The section is the last
  backslash-separated part of a settings path (`section_name`).
  `read_key(reg_path, key, kind, ini_file)` returns an `int` or `str`, or
  `None` when missing; `save_key(reg_path, key, value, ini_file)` writes into
  an existing file and raises `FileNotFoundError` otherwise.
- `tftpkit.scandir` – `scan_dir(directory)` yields one
  `name<TAB>dd/mm/yyyy<TAB>size` line per plain file, sorted by name;
  `format_line` builds one line and `is_valid_directory` checks a path.
- `tftpkit.cmdline` – `split_command_line` splits on spaces, honouring
  double quotes; `parse_command_line` maps `-s`, `-l` and `-i` to
  `TFTP_DIR`, `TFTP_LOG` and `TFTP_INI`; `apply_command_line` stores them in
  `os.environ` or a mapping you pass.
- `tftpkit.asynclog` – `AsyncLogger(sink, level, log_file)` calls
  `sink(kind, text, retain)` with a `MessageKind`. `log` drops entries above
  `level`, lets about 100 entries a second through, adds a
  `[dd/mm hh:mm:ss.mmm]` stamp and appends to `log_file`; `error` and
  `warning` report without a stamp, and `error` also goes to the optional
  `event_log` callable. `append_to_file` and `log_to_monitor` are also
  available.

## Example

```python
from tftpkit.md5 import MD5
from tftpkit.cmdline import parse_command_line

MD5(b"abc").hexdigest()              # '900150983cd24fb0d6963f7d28e17f72'
parse_command_line('-s "C:\\tftp root" -l log.txt')
# {'TFTP_DIR': 'C:\\tftp root', 'TFTP_LOG': 'log.txt'}
```

Raw ICMP needs the privileges your operating system asks for raw sockets;
without them `ping` raises `PingPrivilegeError`.

## What it does not do

This is a library of parts. It has no TFTP, DHCP, SNTP or syslog server,
no console or graphical interface and no command to run. Settings are read
from and written to INI files only; there is no other settings store.