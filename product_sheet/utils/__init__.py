"""Utils package initialization."""
from product_sheet.utils.logger import get_logger, LayerLogger, set_trace_id, get_trace_id
from product_sheet.utils.text import normalize

__all__ = ["get_logger", "LayerLogger", "set_trace_id", "get_trace_id", "normalize"]
