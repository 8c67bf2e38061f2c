"""Decoder for JVM ``.class`` files.

Reads just enough of the class file format to build a
:class:`~classdiagram_cli.models.TypeDescriptor`:

- the constant pool (only UTF-8 and Class entries are kept)
- access flags, this class, super class, and interfaces
- fields with their descriptors and optional ``Signature`` attribute
- methods and constructors from their descriptors
- the ``InnerClasses`` attribute, for Java-style simple names of nested types

Anything malformed raises :class:`UnresolvableDescriptorError`.
"""

from __future__ import annotations

import re
import struct
from typing import Dict, List, Optional, Tuple

from .errors import UnresolvableDescriptorError
from .models import ConstructorInfo, FieldInfo, MethodInfo, TypeDescriptor, TypeRef

MAGIC = 0xCAFEBABE
ACC_INTERFACE = 0x0200

BASE_TYPES: Dict[str, str] = {
    "B": "byte",
    "C": "char",
    "D": "double",
    "F": "float",
    "I": "int",
    "J": "long",
    "S": "short",
    "Z": "boolean",
    "V": "void",
}

# Constant pool tag -> fixed payload size, for entries we skip over.
_CP_SKIP_SIZES: Dict[int, int] = {
    3: 4,   # Integer
    4: 4,   # Float
    5: 8,   # Long
    6: 8,   # Double
    8: 2,   # String
    9: 4,   # Fieldref
    10: 4,  # Methodref
    11: 4,  # InterfaceMethodref
    12: 4,  # NameAndType
    15: 3,  # MethodHandle
    16: 2,  # MethodType
    17: 4,  # Dynamic
    18: 4,  # InvokeDynamic
    19: 2,  # Module
    20: 2,  # Package
}
_CP_UTF8 = 1
_CP_CLASS = 7
_CP_WIDE = {5, 6}

_LEADING_DIGITS = re.compile(r"^\d+")


class _Reader:
    """Big-endian cursor over class file bytes."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def take(self, size: int) -> bytes:
        end = self.pos + size
        if end > len(self.data):
            raise UnresolvableDescriptorError(
                f"Truncated class file (wanted {size} bytes at offset {self.pos})"
            )
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def u1(self) -> int:
        return self.take(1)[0]

    def u2(self) -> int:
        return struct.unpack(">H", self.take(2))[0]

    def u4(self) -> int:
        return struct.unpack(">I", self.take(4))[0]


class _ConstantPool:
    def __init__(self) -> None:
        self.utf8: Dict[int, str] = {}
        self.classes: Dict[int, int] = {}

    def text(self, index: int) -> str:
        try:
            return self.utf8[index]
        except KeyError:
            raise UnresolvableDescriptorError(f"Constant #{index} is not a UTF-8 entry") from None

    def class_name(self, index: int) -> str:
        try:
            return self.text(self.classes[index])
        except KeyError:
            raise UnresolvableDescriptorError(f"Constant #{index} is not a Class entry") from None


def _read_constant_pool(reader: _Reader) -> _ConstantPool:
    pool = _ConstantPool()
    count = reader.u2()
    index = 1
    while index < count:
        tag = reader.u1()
        if tag == _CP_UTF8:
            raw = reader.take(reader.u2())
            # Modified UTF-8 only differs for NUL and supplementary characters.
            pool.utf8[index] = raw.decode("utf-8", errors="replace")
        elif tag == _CP_CLASS:
            pool.classes[index] = reader.u2()
        elif tag in _CP_SKIP_SIZES:
            reader.take(_CP_SKIP_SIZES[tag])
        else:
            raise UnresolvableDescriptorError(f"Unknown constant pool tag {tag} at #{index}")
        index += 2 if tag in _CP_WIDE else 1
    return pool


def _read_attributes(reader: _Reader, pool: _ConstantPool) -> Dict[str, bytes]:
    attributes: Dict[str, bytes] = {}
    for _ in range(reader.u2()):
        name = pool.text(reader.u2())
        attributes[name] = reader.take(reader.u4())
    return attributes


# ===================================================================
# Names
# ===================================================================

class _Names:
    """Internal (``com/acme/Outer$Inner``) to qualified/simple name mapping."""

    def __init__(self, inner_names: Optional[Dict[str, str]] = None) -> None:
        self.inner_names = inner_names or {}

    def ref(self, internal_name: str) -> TypeRef:
        qualified = internal_name.replace("/", ".")
        return TypeRef(qualified, self.simple_name(internal_name))

    def simple_name(self, internal_name: str) -> str:
        if internal_name in self.inner_names:
            return self.inner_names[internal_name]
        tail = internal_name.rsplit("/", 1)[-1]
        if "$" in tail:
            # Not listed in InnerClasses: best guess, anonymous classes get "".
            tail = _LEADING_DIGITS.sub("", tail.rsplit("$", 1)[-1])
        return tail


def _read_inner_names(data: bytes, pool: _ConstantPool) -> Dict[str, str]:
    reader = _Reader(data)
    names: Dict[str, str] = {}
    for _ in range(reader.u2()):
        inner_class = reader.u2()
        reader.u2()  # outer_class_info_index
        inner_name = reader.u2()
        reader.u2()  # inner_class_access_flags
        names[pool.class_name(inner_class)] = pool.text(inner_name) if inner_name else ""
    return names


# ===================================================================
# Descriptors and signatures
# ===================================================================

def parse_field_descriptor(descriptor: str, names: _Names, pos: int = 0) -> Tuple[TypeRef, int]:
    """Parse one field type (``I``, ``[Ljava/lang/String;``) starting at *pos*."""
    dims = 0
    while pos < len(descriptor) and descriptor[pos] == "[":
        dims += 1
        pos += 1
    if pos >= len(descriptor):
        raise UnresolvableDescriptorError(f"Bad type descriptor: {descriptor!r}")

    code = descriptor[pos]
    if code in BASE_TYPES:
        ref = TypeRef(BASE_TYPES[code], BASE_TYPES[code])
        pos += 1
    elif code == "L":
        end = descriptor.find(";", pos)
        if end < 0:
            raise UnresolvableDescriptorError(f"Bad type descriptor: {descriptor!r}")
        ref = names.ref(descriptor[pos + 1:end])
        pos = end + 1
    else:
        raise UnresolvableDescriptorError(f"Bad type descriptor: {descriptor!r}")

    ref.array_dims = dims
    return ref, pos


def parse_method_descriptor(descriptor: str, names: _Names) -> Tuple[List[TypeRef], TypeRef]:
    """Parse ``(Ljava/lang/String;I)V`` into parameter types and return type."""
    if not descriptor.startswith("("):
        raise UnresolvableDescriptorError(f"Bad method descriptor: {descriptor!r}")
    params: List[TypeRef] = []
    pos = 1
    while pos < len(descriptor) and descriptor[pos] != ")":
        ref, pos = parse_field_descriptor(descriptor, names, pos)
        params.append(ref)
    if pos >= len(descriptor):
        raise UnresolvableDescriptorError(f"Bad method descriptor: {descriptor!r}")
    return_type, _ = parse_field_descriptor(descriptor, names, pos + 1)
    return params, return_type


class _SignatureParser:
    """Reads field type signatures (JVMS 4.7.9.1).

    Only *concrete* type arguments are kept on the resulting TypeRef: plain,
    non-parameterized class types and arrays of them.  Type variables,
    wildcards, and parameterized arguments are dropped.
    """

    def __init__(self, signature: str, names: _Names) -> None:
        self.sig = signature
        self.names = names
        self.pos = 0

    def peek(self) -> str:
        if self.pos >= len(self.sig):
            raise UnresolvableDescriptorError(f"Truncated signature: {self.sig!r}")
        return self.sig[self.pos]

    def reference(self) -> Tuple[Optional[TypeRef], bool]:
        """Return ``(ref, concrete)``; ref is None for type variables."""
        code = self.peek()
        if code == "T":
            end = self.sig.find(";", self.pos)
            if end < 0:
                raise UnresolvableDescriptorError(f"Bad signature: {self.sig!r}")
            self.pos = end + 1
            return None, False
        if code == "[":
            self.pos += 1
            if self.peek() in BASE_TYPES:
                base = BASE_TYPES[self.peek()]
                self.pos += 1
                return TypeRef(base, base, 1), True
            ref, concrete = self.reference()
            if ref is not None:
                ref.array_dims += 1
            return ref, concrete
        if code == "L":
            return self.class_type()
        raise UnresolvableDescriptorError(f"Bad signature: {self.sig!r}")

    def class_type(self) -> Tuple[TypeRef, bool]:
        self.pos += 1
        internal = ""
        args: List[TypeRef] = []
        parameterized = False
        while True:
            ch = self.peek()
            if ch == "<":
                self.pos += 1
                parameterized = True
                args = []
                while self.peek() != ">":
                    arg, concrete = self.type_argument()
                    if concrete and arg is not None:
                        args.append(arg)
                self.pos += 1
            elif ch == ".":
                # Outer<X>.Inner: arguments belong to the innermost segment.
                self.pos += 1
                internal += "$"
                args = []
            elif ch == ";":
                self.pos += 1
                break
            else:
                internal += ch
                self.pos += 1
        ref = self.names.ref(internal)
        ref.type_args = args
        return ref, not parameterized

    def type_argument(self) -> Tuple[Optional[TypeRef], bool]:
        ch = self.peek()
        if ch == "*":
            self.pos += 1
            return None, False
        if ch in "+-":
            self.pos += 1
            ref, _ = self.reference()
            return ref, False
        return self.reference()


def parse_field_signature(signature: str, names: _Names) -> Optional[TypeRef]:
    ref, _ = _SignatureParser(signature, names).reference()
    return ref


# ===================================================================
# Class file
# ===================================================================

def parse_class(data: bytes) -> TypeDescriptor:
    """Decode raw ``.class`` bytes into a :class:`TypeDescriptor`."""
    reader = _Reader(data)
    if reader.u4() != MAGIC:
        raise UnresolvableDescriptorError("Not a class file (bad magic number)")
    reader.u2()  # minor_version
    reader.u2()  # major_version

    pool = _read_constant_pool(reader)
    access_flags = reader.u2()
    this_internal = pool.class_name(reader.u2())
    super_index = reader.u2()
    super_internal = pool.class_name(super_index) if super_index else None
    interface_names = [pool.class_name(reader.u2()) for _ in range(reader.u2())]

    raw_fields = _read_members(reader, pool)
    raw_methods = _read_members(reader, pool)
    class_attributes = _read_attributes(reader, pool)

    inner = class_attributes.get("InnerClasses")
    names = _Names(_read_inner_names(inner, pool) if inner is not None else None)

    is_interface = bool(access_flags & ACC_INTERFACE)
    this_ref = names.ref(this_internal)
    descriptor = TypeDescriptor(
        qualified_name=this_ref.qualified_name,
        simple_name=this_ref.simple_name,
        is_interface=is_interface,
        # Interfaces name java/lang/Object as super_class but do not extend it.
        superclass=names.ref(super_internal) if super_internal and not is_interface else None,
        interfaces=[names.ref(n) for n in interface_names],
    )

    for name, desc, attributes in raw_fields:
        field_type, _ = parse_field_descriptor(desc, names)
        signature = attributes.get("Signature")
        if signature is not None:
            generic = parse_field_signature(pool.text(_Reader(signature).u2()), names)
            # Generic arrays (List<X>[]) are not parameterized types themselves.
            if generic is not None and not generic.is_array:
                field_type.type_args = generic.type_args
        descriptor.fields.append(FieldInfo(name, field_type))

    for name, desc, _ in raw_methods:
        if name == "<clinit>":
            continue
        params, return_type = parse_method_descriptor(desc, names)
        if name == "<init>":
            descriptor.constructors.append(ConstructorInfo(params))
        else:
            descriptor.methods.append(MethodInfo(name, params, return_type))

    return descriptor


def _read_members(reader: _Reader, pool: _ConstantPool) -> List[Tuple[str, str, Dict[str, bytes]]]:
    members = []
    for _ in range(reader.u2()):
        reader.u2()  # access_flags
        name = pool.text(reader.u2())
        desc = pool.text(reader.u2())
        members.append((name, desc, _read_attributes(reader, pool)))
    return members
