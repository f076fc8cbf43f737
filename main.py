import argparse
import os
import sys

from archiver import Archiver
from container import (
    load_container,
    persist_container,
    read_all_bytes,
    write_all_bytes,
)


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Huffman-based single-file compressor"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    zip_cmd = subparsers.add_parser(
        "zip", aliases=["z"], help="Compress a file"
    )
    zip_cmd.add_argument("source", help="File to compress")
    zip_cmd.add_argument(
        "-o", "--output", required=True, help="Output archive file path"
    )
    zip_cmd.add_argument(
        "-P",
        "--no-progress",
        action="store_true",
        help="Hide the progress line",
    )

    unzip_cmd = subparsers.add_parser(
        "unzip", aliases=["u"], help="Restore a compressed file"
    )
    unzip_cmd.add_argument("archive", help="Archive file to restore")
    unzip_cmd.add_argument(
        "-o", "--output", required=True, help="Destination file path"
    )
    unzip_cmd.add_argument(
        "-P",
        "--no-progress",
        action="store_true",
        help="Hide the progress line",
    )

    info_cmd = subparsers.add_parser(
        "info", aliases=["i"], help="Describe an archive"
    )
    info_cmd.add_argument("archive", help="Archive file to inspect")

    return parser


def _print_progress(line: str) -> None:
    """Render and flush a single progress line in-place (carriage return).

    :param line: The textual progress line to display.
    :type line: str
    :returns: None
    :rtype: None
    """
    sys.stdout.write("\r" + line)
    sys.stdout.flush()


def _fmt_pct(done: int, total: int) -> str:
    """Format a completion percentage string like ``12.34%``.

    :param done: Units completed.
    :type done: int
    :param total: Total units to complete.
    :type total: int
    :returns: Percentage.
    :rtype: str
    """
    if total <= 0:
        return "0%"
    pct = 100.0 * (done / float(total))
    return f"{pct:6.2f}%"


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


class FileProgress:
    """Callable progress reporter for one compression or restore pass.

    Redraws the progress line only when the whole percentage changes.

    :ivar label: Action label (e.g., "Compressing" or "Restoring").
    :type label: str
    :ivar path: Path displayed for the file being processed.
    :type path: str
    """

    def __init__(self, label: str, path: str) -> None:
        self.label = label
        self.path = path
        self._last_reported = -1

    def __call__(self, done: int, total: int) -> None:
        """Update the progress display.

        :param done: Units (bytes or bits) processed so far.
        :type done: int
        :param total: Total units of the pass.
        :type total: int
        :returns: None
        :rtype: None
        """
        if total <= 0:
            return
        percent_bucket = int((done * 100) / total)
        if percent_bucket == self._last_reported:
            return
        self._last_reported = percent_bucket
        _print_progress(f"{self.label} {self.path}  {_fmt_pct(done, total)}")


def _report_missing_output(output_path: str) -> None:
    """Print the ``[!]`` line for an output whose directory does not exist.

    :param output_path: Destination that could not be created.
    :type output_path: str
    :returns: None
    :rtype: None
    """
    print(f"[!] Output directory not found for: {output_path}")


def compress_file(source: str, output_path: str, hide_progress: bool) -> None:
    """Compress ``source`` into ``output_path`` and print size statistics.

    :param source: File to compress.
    :type source: str
    :param output_path: Destination archive file path.
    :type output_path: str
    :param hide_progress: Whether to hide the progress line.
    :type hide_progress: bool
    :returns: None
    :rtype: None
    """
    try:
        data = read_all_bytes(source)
    except FileNotFoundError:
        print(f"[!] File not found: {source}")
        return
    on_prog = None if hide_progress else FileProgress("Compressing", source)
    container = Archiver().compress(data, on_progress=on_prog)
    if not hide_progress:
        sys.stdout.write("\n")
        sys.stdout.flush()
    try:
        persist_container(container, output_path)
    except FileNotFoundError:
        _report_missing_output(output_path)
        return
    compressed = os.path.getsize(output_path)
    print("Size before compression: ", _fmt_bytes(container.original_size))
    print("Size after compression: ", _fmt_bytes(compressed))
    print(f"Compression ratio: {container.original_size / compressed:.2f}")


def restore_file(archive_path: str, output_path: str, hide_progress: bool) -> None:
    """Restore the file stored in ``archive_path`` to ``output_path``.

    :param archive_path: Archive produced by :func:`compress_file`.
    :type archive_path: str
    :param output_path: Destination file path.
    :type output_path: str
    :param hide_progress: Whether to hide the progress line.
    :type hide_progress: bool
    :returns: None
    :rtype: None
    :raises ValueError: If the archive is invalid or uses an unsupported
        version.
    """
    try:
        container = load_container(archive_path)
    except FileNotFoundError:
        print(f"[!] Archive file not found: {archive_path}")
        return
    on_prog = None if hide_progress else FileProgress("Restoring", archive_path)
    data = Archiver().decompress(container, on_progress=on_prog)
    if not hide_progress:
        sys.stdout.write("\n")
        sys.stdout.flush()
    try:
        write_all_bytes(output_path, data)
    except FileNotFoundError:
        _report_missing_output(output_path)


def describe_archive(archive_path: str) -> None:
    """Print what an archive holds without decoding it.

    :param archive_path: Archive to inspect.
    :type archive_path: str
    :returns: None
    :rtype: None
    :raises ValueError: If the archive is invalid.
    """
    try:
        container = load_container(archive_path)
    except FileNotFoundError:
        print(f"[!] Archive file not found: {archive_path}")
        return
    compressed = os.path.getsize(archive_path)
    print("Distinct bytes: ", len(container.frequencies))
    print("Original size: ", _fmt_bytes(container.original_size))
    print("Encoded bits: ", len(container.bits))
    print(f"Compression ratio: {container.original_size / compressed:.2f}")


def main():
    """Entry point for the CLI tool.

    :returns: None
    :rtype: None
    """
    parser = get_parser()
    args = parser.parse_args()

    if args.cmd in ["zip", "z"]:
        compress_file(
            args.source, args.output, getattr(args, "no_progress", False)
        )
    elif args.cmd in ["unzip", "u"]:
        restore_file(
            args.archive, args.output, getattr(args, "no_progress", False)
        )
    elif args.cmd in ["info", "i"]:
        describe_archive(args.archive)


if __name__ == "__main__":
    main()
