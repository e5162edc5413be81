from .scan import router as scan_router
from .history import router as history_router
from .wines import router as wines_router
from .catalog import router as catalog_router
from .imports import router as imports_router
