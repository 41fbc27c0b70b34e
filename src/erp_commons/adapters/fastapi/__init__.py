"""FastAPI adapter – query-string binding and result rendering."""
from erp_commons.adapters.fastapi.deps import result_response, result_status, search_request_dependency

__all__ = ["result_response", "result_status", "search_request_dependency"]
