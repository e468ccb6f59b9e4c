"""Record encoders."""

from solulog.core.encoding.json_lines import (
    DEFAULT_KEYS,
    EncoderKeys,
    encode_record,
    record_to_dict,
)

__all__ = ["DEFAULT_KEYS", "EncoderKeys", "encode_record", "record_to_dict"]
