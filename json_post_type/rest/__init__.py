from .response import RestResponse
from .shaping import decode_document, shape_json_response

__all__ = ["RestResponse", "decode_document", "shape_json_response"]
