# zcommon

Building blocks for long-running services. The package uses only the Python
standard library.

| Module | What it offers |
| --- | --- |
| `zcommon.zprint` | `Printer`: levelled, timestamped diagnostic output. `get_printer()`, `read_level_config(path)`, `format_ms_timestamp(moment)` |
| `zcommon.bufmodel` | `BufferRing`: a fixed number of byte slots shared between threads. `BufferRingError` |
| `zcommon.sigslot` | `Signal` and `connect(sender, signal_name, slot)` |
| `zcommon.bundle` | `Bundle`: string keys mapped to loosely typed values |
| `zcommon.fields` | `FieldType`, `FieldMeta`, `EnumEntry`, `byte_swap`, `bit_clear`, `bit_set`, `convert_text` |
| `zcommon.reflect` | `StructParser`: fills described fields from text, XML elements and bundles |
| `zcommon.xmlprocess` | `XmlWriter`: writes described objects out as `<lh .../>` elements |
| `zcommon.timers` | `Timer` and `TimerEvent`: interval callbacks on a worker thread. `delay`, `deadline` |
| `zcommon.netprint` | `UpdateSocket`, `PrintServer`, `PrintClient`: diagnostic lines sent over UDP |
| `zcommon.sockets` | `SocketAddress`, `SocketEndpoint` |
| `zcommon.tcp` | `TcpConnection`, `TcpClient` |
| `zcommon.udp` | `UdpSocket`, `MulticastUdp`, `BroadcastUdp` |

## Install

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Printing

`get_printer()` returns one `Printer` for the whole process. A printer stays
silent until `configure()` enables it:

- `configure("stdout")` writes to standard output.
- `configure(directory)` requires `directory` to exist. It opens a log file
  `directory + "MM-DD_HH_MM_SS.log"` in append mode, or the file given as
  `name`. It reads a level from `directory + "m_level"`, so give the directory
  with a trailing `/`.

Each method writes only when the printer is enabled and the level is high
enough. The default level is 4.

| Method | Minimum level | Output |
| --- | --- | --- |
| `timemsprintf` | 1 | `YYYY-MM-DD HH:MM:SS.uuuuuu ` prefix |
| `timeprintf` | 2 | date and time prefix |
| `zprintf` | 3 | the plain message |
| `hprintf` | 4 | the plain message, always to stdout |

Messages are `%`-formatted. `open(name, fd)` switches to stdout when `fd` is 1.
Otherwise it switches to the file `name`.

## Buffers and signals

```python
from zcommon.bufmodel import BufferRing
from zcommon.sigslot import Signal

ring = BufferRing(2, 16)          # 2 slots of at most 16 bytes
ring.write(b"hello", extra=1)
data, extra = ring.peek()         # (b"hello", 1); None when empty
ring.advance()                    # releases the oldest slot

changed = Signal()
changed.bind(print)
changed("value updated")          # calls every slot in binding order
```

`write` raises `BufferRingError` when the ring is full or the data is larger
than a slot. `advance` raises it when the ring is empty.

`write_from_file(fp, num, extra)` reads `num` bytes into a slot. It then
rewrites the first four bytes as a header holding the length of the rest.

## Reflection and XML

```python
from xml.etree.ElementTree import Element
from zcommon.fields import ENUM_TYPE, EnumEntry, FieldMeta, FieldType
from zcommon.reflect import StructParser
from zcommon.xmlprocess import XmlWriter

fields = [
    FieldMeta("a", FieldType.INT),
    FieldMeta("b", FieldType.DOUBLE),
    FieldMeta("c", FieldType.STRING),
    FieldMeta("d", FieldType.INT, style=ENUM_TYPE),
]
enums = [EnumEntry(3, "open", 0), EnumEntry(3, "out", 1)]
parser = StructParser(dict, fields, enums)

record = parser.parse({}, "a=5;b=6.0;c=hello;d=0")
other = parser.from_element(Element("item", a="7", d="out"))   # d == 1

root = Element("root")
XmlWriter(parser).write_doc(root, "records", [record, other])
```

Objects may be mappings or plain objects with attributes.

- A field given as a `(FieldMeta, storage)` pair is a bit range of the member
  `storage`. Its `bit` and `bit_size` say which bits.
- Enum-styled fields are set by entry name.
- `set_bundle(obj, bundle)` fills the fields whose names are keys of a
  `Bundle`.

## Timers

```python
from zcommon.timers import Timer, delay

with Timer() as timer:
    event_id = timer.add_event(0.5, lambda event: print(event.arg), arg="tick")
    delay(2)
    timer.delete_event(event_id)
```

Events repeat unless `repeat=False`. `stop()` drops every event.
`deadline(seconds)` returns the epoch time `seconds` from now.

## Network printing and sockets

A `PrintServer` queues `netprintf` messages once it has received
`"start printf!"` from a client. Its worker thread then sends each message to
the broadcast address with a microsecond timestamp. A `PrintClient` sends
that request when it is created, and collects the lines it receives in
`messages`.

Neither class reads on its own: call `process_pending()` to handle the
datagrams that have arrived.

The socket classes wrap Python's `socket` module:

- `TcpClient.connect()`
- `UdpSocket.send`, `bind_for_read`, `read`, `read_from`, `bind_port`,
  `set_timeout`, `set_ms_timeout`
- `MulticastUdp.join` and `set_ttl`
- `BroadcastUdp.enable_broadcast`

Failures raise `OSError`.

## What it does not do

There is no command-line program and no server process. Every piece is a
library for your own code to drive. Network printing needs the caller to poll
`process_pending()`. Messages live only in memory and are not stored anywhere.