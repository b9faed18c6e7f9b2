"""
api/app.py — FastAPI 앱 인스턴스 + 시험 컨트롤러 수명 관리
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from exam_simulator.services.exam_controller import ExamSessionController
from exam_simulator.services.storage import ExamStore

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[ExamStore] = None,
    controller: Optional[ExamSessionController] = None,
) -> FastAPI:
    """
    단일 사용자용 앱. 컨트롤러 하나를 app.state 에 두고 모든 요청이 공유한다.
    controller 를 넘기면 그대로 쓰고 (테스트용), 아니면 store 로 새로 만든다.
    """
    if controller is None:
        store = store or ExamStore()
        store.ensure_data_dir()
        controller = ExamSessionController(store)
        controller.load()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # 종료 시 타이머가 남지 않도록
        app.state.controller.close()
        logger.info("시험 컨트롤러 종료")

    app = FastAPI(title="Exam Simulator", docs_url=None, redoc_url=None, lifespan=lifespan)
    app.state.controller = controller

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app
