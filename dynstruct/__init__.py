"""
# Dynstruct: declarative decoding of binary containers.

A format is described with a composition of types (see fields.py) and it's
used to decode a buffer into a tree of instances that can be navigated and
displayed; nothing of the format is hand-written parsing code.

The types available are

 1. Blob: a fixed number of bytes, shown as hex or as text
 2. Numeric: little endian unsigned integer of 2 or 4 bytes
 3. EnumeratedNumeric: a Numeric with symbolic names for its values
 4. Struct: ordered named fields
 5. List: repetition of a type

Container formats (executables in particular) have fields whose position or
number of repetitions is indicated by values decoded before, for this reason
a field can be anchored to an offset and a list can have its count given by
a path expression like "root.header.count" (see expression.py).

The decoding is done by core.decode(), if it fails the tree decoded up to the
failure is returned anyway, with placeholders where the decoding didn't
complete.
"""
