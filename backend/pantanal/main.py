# backend/pantanal/main.py
"""FastAPI 應用程式入口"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pantanal.api.v1 import compare, meta, series
from pantanal.config import settings

app = FastAPI(
    title=settings.app_name,
    description="Pantanal 月級氣候序列的趨勢與相關分析 API",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """健康檢查端點"""
    return {"status": "ok", "version": "0.1.0"}


# 註冊 API 路由
app.include_router(
    series.router,
    prefix="/api/v1/series",
    tags=["series"]
)
app.include_router(
    compare.router,
    prefix="/api/v1/compare",
    tags=["compare"]
)
app.include_router(
    meta.router,
    prefix="/api/v1/meta",
    tags=["meta"]
)
