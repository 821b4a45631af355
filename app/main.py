from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.routers import health, travel_plan
from app.config import settings
from app.utils.logger import get_logger

# FastAPI 应用
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description="AI 旅游规划 API：目的地解析、行程生成与地图地点校验",
)

# logger 需要在 CORS 设置之前初始化
logger = get_logger("api")

allowed_origins = settings.allowed_origins_list
logger.info(f"CORS Origins 设置: {allowed_origins}")

if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("应用关闭")


# 路由
app.include_router(health.router)
app.include_router(travel_plan.router)


def _describe_validation_error(error: dict) -> str:
    field = error.get("loc", ())[-1] if error.get("loc") else ""
    error_type = error.get("type", "")
    if field == "prompt":
        if error_type in ("string_too_short", "missing"):
            return "旅游需求不能为空"
        if error_type == "string_too_long":
            return "旅游需求过长"
    return f"{field}: {error.get('msg', '格式错误')}" if field else error.get("msg", "格式错误")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """请求参数校验失败时返回 400 和简短的中文说明"""
    logger.error(f"请求参数校验失败: {exc.errors()}")
    message = ", ".join(_describe_validation_error(error) for error in exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"请求参数错误: {message}"},
    )


@app.get("/", tags=["基础"])
async def read_root():
    """根路径，兼作简单的健康检查"""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}!",
        "status": "healthy",
        "version": settings.PROJECT_VERSION,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
