"""Protocol layer: frame building, byte-order helpers, tag conversion and command builders."""

from .framing import build_frame, build_header, parse_frame, parse_header, reverse_bytes
from .commands import Command, build_command
from .tags import to_device_form, to_split_decimal
