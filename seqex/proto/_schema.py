#
#   Copyright 2025 Hopsworks AB
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#

"""Helpers to declare protobuf schemas at import time.

The message classes of this package are built from `FileDescriptorProto`s
registered in a private descriptor pool, so they can live next to a full
TensorFlow installation without clashing on the `tensorflow.*` names.
"""

from __future__ import annotations

from typing import Iterable, Optional

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory


FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto

LABEL_OPTIONAL = FieldDescriptorProto.LABEL_OPTIONAL
LABEL_REPEATED = FieldDescriptorProto.LABEL_REPEATED

TYPE_BOOL = FieldDescriptorProto.TYPE_BOOL
TYPE_BYTES = FieldDescriptorProto.TYPE_BYTES
TYPE_DOUBLE = FieldDescriptorProto.TYPE_DOUBLE
TYPE_ENUM = FieldDescriptorProto.TYPE_ENUM
TYPE_FLOAT = FieldDescriptorProto.TYPE_FLOAT
TYPE_INT32 = FieldDescriptorProto.TYPE_INT32
TYPE_INT64 = FieldDescriptorProto.TYPE_INT64
TYPE_MESSAGE = FieldDescriptorProto.TYPE_MESSAGE
TYPE_STRING = FieldDescriptorProto.TYPE_STRING

POOL = descriptor_pool.DescriptorPool()


def new_file(
    name: str, package: str, dependencies: Iterable[str] = ()
) -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = name
    file_proto.package = package
    file_proto.syntax = "proto3"
    file_proto.dependency.extend(dependencies)
    return file_proto


def add_message(
    file_proto: descriptor_pb2.FileDescriptorProto, name: str
) -> descriptor_pb2.DescriptorProto:
    message = file_proto.message_type.add()
    message.name = name
    return message


def add_field(
    message: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    label: int = LABEL_OPTIONAL,
    type_name: Optional[str] = None,
    packed: bool = False,
    oneof_index: Optional[int] = None,
) -> FieldDescriptorProto:
    field = message.field.add()
    field.name = name
    field.number = number
    field.type = field_type
    field.label = label
    if type_name is not None:
        field.type_name = type_name
    if packed:
        field.options.packed = True
    if oneof_index is not None:
        field.oneof_index = oneof_index
    return field


def add_map_field(
    message: descriptor_pb2.DescriptorProto,
    scope: str,
    name: str,
    number: int,
    value_type: int,
    value_type_name: Optional[str] = None,
) -> FieldDescriptorProto:
    """Declare `map<string, value_type> name = number` on `message`.

    # Arguments
        message: The message receiving the field.
        scope: Fully qualified name of `message`, e.g. `tensorflow.FeatureLists`.
        name: Field name, the map entry type is derived from it.
        number: Field number.
        value_type: Protobuf type of the map values.
        value_type_name: Fully qualified type name when values are messages or enums.
    """
    entry = message.nested_type.add()
    entry.name = "".join(part.capitalize() for part in name.split("_")) + "Entry"
    entry.options.map_entry = True
    add_field(entry, "key", 1, TYPE_STRING)
    add_field(entry, "value", 2, value_type, type_name=value_type_name)
    return add_field(
        message,
        name,
        number,
        TYPE_MESSAGE,
        label=LABEL_REPEATED,
        type_name=".{}.{}".format(scope, entry.name),
    )


def register(file_proto: descriptor_pb2.FileDescriptorProto):
    return POOL.AddSerializedFile(file_proto.SerializeToString())


def message_class(full_name: str):
    return message_factory.GetMessageClass(POOL.FindMessageTypeByName(full_name))
