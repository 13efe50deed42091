"""Wire format of the completion protocol and cursor-relative splicing.

Modules:
    codec: argument encoding and result-record decoding.
    splice: replacing the word under the cursor with a completion.
"""

from completers.protocol.codec import (
    decode_result,
    encode_arguments,
    encode_result,
    parse_point,
)
from completers.protocol.splice import query_range, replace_query, splice

__all__ = [
    "decode_result",
    "encode_arguments",
    "encode_result",
    "parse_point",
    "query_range",
    "replace_query",
    "splice",
]
