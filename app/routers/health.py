"""健康检查路由（含内存监控）"""

from fastapi import APIRouter
from datetime import datetime
import psutil
import gc

from app.config import settings

router = APIRouter(prefix="/api/v1", tags=["Health"])


@router.get("/health")
async def health_check():
    """服务状态（不访问任何外部依赖）"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": settings.PROJECT_VERSION,
    }


@router.get("/health/memory")
async def memory_status():
    """内存使用情况"""
    try:
        process = psutil.Process()
        memory_info = process.memory_info()

        return {
            "status": "ok",
            "memory": {
                "rss_mb": round(memory_info.rss / 1024 / 1024, 2),  # 实际占用
                "vms_mb": round(memory_info.vms / 1024 / 1024, 2),  # 虚拟内存
                "percent": round(process.memory_percent(), 2),
                "available_mb": round(psutil.virtual_memory().available / 1024 / 1024, 2)
            },
            "gc_stats": {
                "collected": gc.collect(),
                "counts": gc.get_count()
            },
            "timestamp": datetime.utcnow().isoformat()
        }
    except psutil.Error as e:
        return {
            "status": "error",
            "error": str(e),
            "timestamp": datetime.utcnow().isoformat()
        }


def _key_status(value: str) -> dict:
    return {"status": "ok" if value else "not_configured"}


@router.get("/health/deep")
async def deep_health_check():
    """检查 AI 与地图服务的配置是否齐全（不发起外部请求）"""
    provider = (settings.AI_PROVIDER or "openai").lower()
    ai_key = settings.GEMINI_API_KEY if provider == "gemini" else settings.OPENAI_API_KEY

    checks = {
        "ai_provider": {"provider": provider, **_key_status(ai_key)},
        "amap_api": _key_status(settings.AMAP_API_KEY),
    }
    all_ok = all(check["status"] == "ok" for check in checks.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.ENV,
        "checks": checks,
    }
