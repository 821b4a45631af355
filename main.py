import os

import uvicorn

from app.config import settings
from app.main import app  # noqa: F401  (uvicorn "main:app" 入口)

if __name__ == "__main__":
    # 部署环境使用 PORT 环境变量
    port = int(os.getenv("PORT", settings.PORT))
    host = "0.0.0.0" if settings.ENV == "production" else settings.HOST

    print(f"🚀 {settings.PROJECT_NAME} 启动: http://{host}:{port}")
    print(f"📚 API 文档: http://{host}:{port}/docs")
    print("   - POST /api/v1/ai/plan (AI 旅游规划)")
    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=settings.ENV == "development",
    )
