# snapdiff

A terminal tool for comparing two restic snapshots directory by directory.

snapdiff lists the snapshots in a repository. You pick a newer and an older
snapshot, and it shows how the size of each entry changed between them. You
can open directories to go deeper and copy the paths of the selected entry to
the clipboard.

## Requirements

- A POSIX system and an interactive terminal (snapdiff puts the terminal in
  raw mode; it refuses to run when standard input is not a terminal).
- The `restic` command on your `PATH`.
- The repository mounted with `restic mount`. snapdiff reads the snapshot
  trees from the `snapshots/` directory of the mount point.

## Installation

```
pip install .
```

## Usage

Mount the repository first, then start snapdiff with the repository path and
the mount point:

```
snapdiff --repo /path/to/repo --mount /path/to/mountpoint
```

`-r` and `-m` are short forms of the two options. Instead of passing them, you
can set `RESTIC_REPOSITORY` and `RESTIC_MOUNTPOINT`. `snapdiff --version` (or
`-v`) prints the version.

At start-up snapdiff runs `restic -r <repo> snapshots`; restic may ask for the
repository password. Every directory under `<mount>/snapshots` (except the
`latest` link) must match a snapshot from that list by its time, otherwise
snapdiff prints the error, suggests mounting the repository and exits with
status 1.

### Choosing snapshots

| Key           | Action                              |
|---------------|-------------------------------------|
| `space`       | Mark the newer snapshot `[1]`, then the older one `[2]` |
| `backspace`   | Clear the selection                 |
| `enter`       | Compare the two selected snapshots  |
| `?`           | Show or hide the full help          |
| `q`, `ctrl+c` | Quit                                |

The cursor moves with `up`/`k`, `down`/`j`, `pgup`/`b`, `pgdown`/`f`,
`u`/`ctrl+u`, `d`/`ctrl+d`, `home`/`g` and `end`/`G`. When the newer snapshot
is marked, only older snapshots remain in the list, and the older one must be
above it.

### Comparing

Each row shows an entry's size in the newer snapshot, its size in the older
snapshot, and the difference. Rows are sorted by difference, with the largest
growth at the top. An entry that exists in only one snapshot shows `???` on
the other side. Sizes use decimal units (`kB`, `MB`, `GB`, ...).

| Key                        | Action                               |
|----------------------------|--------------------------------------|
| `l`, `right`, `enter`      | Open the selected directory          |
| `h`, `left`, `backspace`   | Go back to the parent directory      |
| `1`, `2`, `3`              | Copy a path to the clipboard         |
| `?`                        | Show or hide the full help           |
| `q`, `ctrl+c`              | Quit                                 |

A directory can only be opened when it has entries in the newer snapshot.
The three paths you can copy are:

1. the entry's path in the newer snapshot,
2. the entry's path in the older snapshot,
3. the entry's path on the original file system.

Copying writes an OSC 52 escape sequence to the terminal, so it works only in
terminals that accept clipboard writes that way.

## Using it as a library

- `snapdiff.snapshots.get_snapshots(repo_path, mount_path)` lists snapshots and
  attaches their mount directories; `parse_snapshots(output)` parses the
  table printed by `restic snapshots`. Errors raise `SnapshotError`.
- `snapdiff.tree.get_dir_entries(root)` reads a directory tree into `DirData`
  nodes with accumulated sizes.
- `snapdiff.compare.create_rows(dir_a, dir_b, metadata)` pairs the children of
  two directories and orders them by size difference.
- `snapdiff.sizes.format_bytes(size)` formats a byte count, e.g. `"83 MB"`.

## Limitations

- Snapshot times from `restic snapshots` are read with a fixed UTC offset of
  `-03:00` (`snapdiff.snapshots.TIMEZONE_OFFSET`); they have to agree with the
  directory names under the mount point.
- The snapshot size column is shown as restic prints it; sizes in the
  comparison come from reading the mounted trees.

## Debugging

Set `DEBUG` to any non-empty value to write debug messages to `debug.log` in
the current directory.