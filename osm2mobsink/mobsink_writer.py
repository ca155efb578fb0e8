import os
import stat
import tempfile
import xml.etree.ElementTree as ET
from typing import BinaryIO, List, Union

from .errors import OutputWriteError
from .geometry import STATIC_CONTROL_SLOT, Flow, PathSegment
from .projection import NetworkDimensions

OutputSink = Union[str, "os.PathLike[str]", BinaryIO]


def format_coordinate(value: float) -> str:
    return "%f" % value


def format_speed(value: float) -> str:
    """Whole speeds print as integers ("60"), the rest as %g."""
    if float(value).is_integer():
        return str(int(value))
    return "%g" % value


def build_network_element(dimensions: NetworkDimensions, segments: List[PathSegment]) -> ET.Element:
    root = ET.Element("network", {
        "width": str(dimensions.width),
        "height": str(dimensions.height),
        "speedlimit": str(dimensions.speed_limit),
    })

    for segment in segments:
        path_el = ET.SubElement(root, "path", {
            "xa": format_coordinate(segment.a.x),
            "ya": format_coordinate(segment.a.y),
            "xb": format_coordinate(segment.b.x),
            "yb": format_coordinate(segment.b.y),
            "name": segment.name,
        })
        if segment.flow is Flow.A_TO_B:
            path_el.set("flow", "ab")

        # Static marker, not a real schedule
        if segment.speed_limit is not None:
            ET.SubElement(path_el, "traffic", {
                "time": str(STATIC_CONTROL_SLOT),
                "speedlimit": format_speed(segment.speed_limit),
                "traffic": "1",
            })

    return root


def serialize_network(dimensions: NetworkDimensions, segments: List[PathSegment]) -> bytes:
    """Render the complete MobSink document as UTF-8 bytes."""
    tree = ET.ElementTree(build_network_element(dimensions, segments))
    ET.indent(tree, space="  ")
    return ET.tostring(tree.getroot(), encoding="utf-8", xml_declaration=True) + b"\n"


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _output_mode(output_path: str) -> int:
    """Mode a plain open() would give the file, or the existing file's mode."""
    try:
        return stat.S_IMODE(os.stat(output_path).st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def _write_atomically(data: bytes, output_path: str) -> None:
    directory = os.path.dirname(os.path.abspath(output_path))
    fd, tmp_path = tempfile.mkstemp(prefix=".mobsink-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates the file as 0600
        os.chmod(tmp_path, _output_mode(output_path))
        os.replace(tmp_path, output_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def write_network(dimensions: NetworkDimensions, segments: List[PathSegment], sink: OutputSink) -> int:
    """Write the MobSink document to a path or a binary stream.

    Paths are replaced atomically, so a failed run never leaves a partial
    file behind. Streams receive the whole document in a single write and
    must be opened in binary mode.

    Returns:
        Number of bytes written

    Raises:
        OutputWriteError: If the destination cannot be written, including
            a text-mode stream that rejects bytes
    """
    data = serialize_network(dimensions, segments)
    try:
        if isinstance(sink, (str, os.PathLike)):
            _write_atomically(data, os.fspath(sink))
        else:
            sink.write(data)
    except (OSError, TypeError) as exc:
        raise OutputWriteError(f"Cannot write MobSink network: {exc}") from exc
    return len(data)
