from .upload_router import router as upload_router
from .file_router import router as file_router
defined_routers = [
    upload_router,
    file_router,
    ]
