# cloudstore

Building blocks for a small self-hosted file store and for writing log data
in the background:

- keeping records of stored files and saving them as JSON,
- reading, writing, compressing and decompressing stored files,
- base64 encoding and decoding (used for file names sent in headers),
- a byte buffer, a background writer, a thread pool and log destinations
  (standard output, a single file, rolling files),
- a TCP receiver that appends incoming log messages to a file.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Stored files

### Configuration

`cloudstore.config.ServerConfig` holds the storage settings. `get_config()`
loads them once from the file named by the `CLOUDSTORE_CONFIG` environment
variable (default `Storage.conf`), falling back to the defaults when the file
is missing or invalid; `set_config()` replaces them, and `set_config(None)`
makes the next `get_config()` load again.

| key                | default            | meaning                                   |
|--------------------|--------------------|-------------------------------------------|
| `server_port`      | `8081`             | port of the storage server                |
| `server_ip`        | `127.0.0.1`        | address of the storage server             |
| `download_prefix`  | `/download/`       | URL prefix for downloads                  |
| `remove_prefix`    | `/remove/`         | URL prefix for removals                   |
| `low_storage_dir`  | `./low_storage/`   | directory for files kept as they are      |
| `deep_storage_dir` | `./deep_storage/`  | directory for files kept compressed       |
| `storage_info`     | `./storage.data`   | JSON file holding the stored-file records |
| `bundle_format`    | `3`                | compression format for deep storage       |

`ServerConfig.from_json(text)` and `ServerConfig.load(path)` build one
directly; keys that are absent keep their defaults.

### Records

`cloudstore.datamanager.StorageInfo` describes one stored file (`mtime`,
`atime`, `fsize`, `storage_path`, `url`). `StorageInfo.from_path(path)` reads
them from the file on disk and builds the URL with `build_url`, the download
prefix followed by the file name; `remove_path()` gives the removal URL.

`cloudstore.datamanager.DataManager(storage_file)` is a thread-safe table of
records keyed by URL. It loads the storage file when created and writes it
back after every `insert`, `update` and successful `remove`. Lookups are
`get_by_url`, `get_by_storage_path` (both return `None` when nothing matches)
and `all()`.

```python
from cloudstore.datamanager import DataManager, StorageInfo

data = DataManager("./storage.data")
data.insert(StorageInfo.from_path("./low_storage/report.pdf"))
info = data.get_by_url("/download/report.pdf")
```

### File helpers

`cloudstore.storage_util.FileUtil(path)` offers `size()`,
`last_access_time()`, `last_modify_time()`, `file_name()`,
`read()`, `read_range(pos, length)`, `write(data)`, `exists()`,
`create_directory()`, `scan_directory()` (sorted paths of the non-directory
entries) and `remove()`.

`compress(content, fmt)` writes `content` compressed behind a 32-byte header;
`uncompress(destination)` writes the decompressed data to another file, and
data without such a header is copied unchanged. Supported formats:

| `fmt` | compression                |
|-------|----------------------------|
| `0`   | none                       |
| `3`   | deflate                    |
| `5`   | LZMA, 1 MiB dictionary     |
| `10`  | LZMA, 32 MiB dictionary    |
| `23`  | bzip2                      |

Other values raise `ValueError`, as does compressing empty content.

`url_decode(text)` decodes `%XX` escapes and leaves `+` as it is; a malformed
escape raises `ValueError`.

### Base64

`cloudstore.base64codec` has `encode(data, url=False)`, `encode_pem(data)`
(a line break every 64 characters), `encode_mime(data)` (every 76) and
`decode(encoded, remove_linebreaks=False)`. The URL alphabet uses `-`, `_`
and `.` as padding; the decoder accepts either alphabet, with or without
padding, and raises `ValueError` on other characters.

## Writing log data

`cloudstore.logconf.LogConfig` holds the logging settings: buffer size,
growth threshold and linear growth step, `flush_log` (`0` leaves flushing to
Python, `1` flushes after each write, `2` also calls `fsync`),
`log_file_mode` (`LogFileMode.TIME_ROLL` or `LogFileMode.SIZE_ROLL`),
`rolling_interval` in seconds, `retention_days`, `write_thread_count`, and
the backup receiver's `backup_addr` and `backup_port`. `get_config()` loads
them once from the file named by `CLOUDSTORE_LOG_CONFIG` (default
`config.conf`), falling back to the defaults.

The pieces:

- `cloudstore.buffer.Buffer` — a byte buffer with read and write positions
  that grows threefold below the threshold and linearly above it.
- `cloudstore.worker.AsyncWorker(callback)` — `push(data)` queues bytes;
  background threads hand each queued `Buffer` to the callback. `stop()`
  drains the queue and joins the threads.
- `cloudstore.flush` — `StdoutFlush`, `FileFlush(filename)` (appends to one
  file) and `RollFileFlush(basename, max_size)` (starts a new file by size or
  by time, named from the base name, the current date and time and a counter,
  and deletes files in its directory older than the retention period).
  `create_flush(flush_type, *args)` builds one.
- `cloudstore.threadpool.ThreadPool(threads)` — `submit(fn, *args)` returns
  a `concurrent.futures.Future`; usable as a context manager.

```python
from cloudstore.flush import RollFileFlush
from cloudstore.worker import AsyncWorker

out = RollFileFlush("./logfile/RollFile_log", 1024 * 1024)
worker = AsyncWorker(lambda buf: out.flush(buf.peek(buf.readable_size())))
worker.push(b"stored report.pdf\n")
worker.stop()
out.close()
```

### Backing up log messages over TCP

```
cloudstore-logbackup 9000
```

starts a receiver on port 9000 that appends every message it gets, prefixed
with the sender's `ip:port`, to `./logfile.log`. Messages are sent to it with
`cloudstore.backup.send_backup(message)`, which tries to connect five times
before raising `ConnectionError`. `BackupServer(port, callback)` can also be
used directly with any callback.

## What this package does not do

- It has no HTTP server: nothing answers upload, download, removal or
  file-list requests. The configuration and records above are all that it
  keeps for one.
- It has no upload client that watches directories and sends files.
- It has no logger front end: there are no log levels, no formatted log
  lines and no registry of named loggers. Log data is whatever bytes are
  pushed to a worker or written to a flush.