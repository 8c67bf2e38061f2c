"""Pytest configuration and fixtures for ClassDiagram CLI tests."""

import shutil
import struct
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Dict, Generator, Iterable, Optional, Sequence, Tuple

import pytest

from classdiagram_cli.models import TypeRef


# ---------------------------------------------------------------------------
# Minimal class file writer
# ---------------------------------------------------------------------------

class _ClassWriter:
    """Writes just enough of the class file format for the decoder to read."""

    def __init__(self) -> None:
        self.pool = bytearray()
        self.index: Dict[tuple, int] = {}
        self.next_index = 1

    def _add(self, key: tuple, data: bytes, slots: int = 1) -> int:
        if key not in self.index:
            self.pool += data
            self.index[key] = self.next_index
            self.next_index += slots
        return self.index[key]

    def utf8(self, text: str) -> int:
        raw = text.encode("utf-8")
        return self._add(("utf8", text), b"\x01" + struct.pack(">H", len(raw)) + raw)

    def cls(self, internal_name: str) -> int:
        name = self.utf8(internal_name)
        return self._add(("class", internal_name), b"\x07" + struct.pack(">H", name))

    def long(self, value: int) -> int:
        return self._add(("long", value), b"\x05" + struct.pack(">q", value), slots=2)

    def string(self, text: str) -> int:
        name = self.utf8(text)
        return self._add(("string", text), b"\x08" + struct.pack(">H", name))


def build_class(
    name: str,
    super_name: Optional[str] = "java/lang/Object",
    interfaces: Sequence[str] = (),
    fields: Iterable[Tuple] = (),
    methods: Iterable[Tuple[str, str]] = (),
    is_interface: bool = False,
    inner_classes: Iterable[Tuple[str, Optional[str], Optional[str]]] = (),
    extra_constants: bool = True,
) -> bytes:
    """Build ``.class`` bytes.

    ``fields`` items are ``(name, descriptor)`` or ``(name, descriptor, signature)``.
    ``inner_classes`` items are ``(inner, outer, simple_name)``; a None simple
    name marks an anonymous class.
    """
    w = _ClassWriter()
    body = bytearray()

    access = 0x0601 if is_interface else 0x0021
    body += struct.pack(">HH", access, w.cls(name))
    body += struct.pack(">H", w.cls(super_name) if super_name else 0)
    body += struct.pack(">H", len(interfaces))
    for iface in interfaces:
        body += struct.pack(">H", w.cls(iface))

    fields = list(fields)
    body += struct.pack(">H", len(fields))
    for entry in fields:
        fname, desc = entry[0], entry[1]
        signature = entry[2] if len(entry) > 2 else None
        body += struct.pack(">HHH", 0x0002, w.utf8(fname), w.utf8(desc))
        if signature:
            body += struct.pack(">HHIH", 1, w.utf8("Signature"), 2, w.utf8(signature))
        else:
            body += struct.pack(">H", 0)

    methods = list(methods)
    body += struct.pack(">H", len(methods))
    for mname, desc in methods:
        body += struct.pack(">HHHH", 0x0001, w.utf8(mname), w.utf8(desc), 0)

    inner_classes = list(inner_classes)
    if inner_classes:
        table = struct.pack(">H", len(inner_classes))
        for inner, outer, simple in inner_classes:
            table += struct.pack(
                ">HHHH",
                w.cls(inner),
                w.cls(outer) if outer else 0,
                w.utf8(simple) if simple else 0,
                0x0009,
            )
        body += struct.pack(">HHI", 1, w.utf8("InnerClasses"), len(table)) + table
    else:
        body += struct.pack(">H", 0)

    if extra_constants:
        # Entries the decoder must step over, including a two-slot Long.
        w.long(42)
        w.string("hello")

    header = struct.pack(">IHHH", 0xCAFEBABE, 0, 52, w.next_index)
    return bytes(header + w.pool + body)


def write_jar(path: Path, entries: Dict[str, bytes]) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return path


def ref(qualified_name: str, array_dims: int = 0, *type_args: TypeRef) -> TypeRef:
    """TypeRef whose simple name is the last dotted segment."""
    return TypeRef(qualified_name, qualified_name.rsplit(".", 1)[-1], array_dims, list(type_args))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(temp_dir: Path, monkeypatch) -> Path:
    """Point the config file at an empty temp location."""
    config_file = temp_dir / "home" / "config.toml"
    monkeypatch.setattr("classdiagram_cli.config.CONFIG_FILE", config_file)
    return config_file


@pytest.fixture
def make_jar(temp_dir: Path) -> Callable[..., Path]:
    def _make(entries: Dict[str, bytes], name: str = "app.jar") -> Path:
        return write_jar(temp_dir / name, entries)
    return _make


@pytest.fixture
def sample_jar(make_jar) -> Path:
    """A small shapes library plus entries the provider has to skip."""
    entries = {
        "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n",
        "module-info.class": b"not a type",
        "com/acme/": b"",
        "com/acme/Shape.class": build_class(
            "com/acme/Shape",
            is_interface=True,
            methods=[("area", "()D")],
        ),
        "com/acme/Base.class": build_class(
            "com/acme/Base",
            methods=[("<init>", "()V")],
        ),
        "com/acme/Point.class": build_class(
            "com/acme/Point",
            fields=[("x", "I"), ("y", "I")],
            methods=[("<init>", "(II)V")],
        ),
        "com/acme/Circle.class": build_class(
            "com/acme/Circle",
            super_name="com/acme/Base",
            interfaces=["com/acme/Shape"],
            fields=[
                ("center", "Lcom/acme/Point;"),
                ("cache", "Lcom/acme/internal/Cache;"),
            ],
            methods=[
                ("<clinit>", "()V"),
                ("<init>", "(Lcom/acme/Point;)V"),
                ("area", "()D"),
                ("moveTo", "(Lcom/acme/Point;)V"),
            ],
        ),
        "com/acme/internal/Cache.class": build_class("com/acme/internal/Cache"),
        "com/acme/Broken.class": b"\xca\xfe\xba\xbe\x00",
    }
    return make_jar(entries)
