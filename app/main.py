from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.common.error_handlers import register_error_handlers
from app.api.v1 import sale, item, user

app = FastAPI(title="Back Office API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Register API routers
app.include_router(sale.router, prefix="/api/v1/sales", tags=["sales"])
app.include_router(item.router, prefix="/api/v1/items", tags=["items"])
app.include_router(user.router, prefix="/api/v1/users", tags=["users"])


@app.get("/")
def read_root():
    return {"message": "Welcome to the Back Office APIs!"}
