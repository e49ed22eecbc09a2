from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .bootstrap import conectar_com_retentativas
from .config import settings
from .database import Database
from .exceptions import ErroEscritorio, ErrorType
from .routes import router
from .schemas import ErrorDetail
from .services import ProcessoStore, ConfiguracoesStore, GestaoService

logger = logging.getLogger(__name__)

STATUS_POR_TIPO = {
    ErrorType.VALIDATION_ERROR: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.CONFLICT: 409,
    ErrorType.DATABASE_ERROR: 503,
    ErrorType.PROCESSING_ERROR: 500,
}


def create_app(database: Database | None = None) -> FastAPI:
    """
    Cria a aplicação.

    `database` permite injetar o handle do banco (testes); sem ele o handle
    é criado a partir das configurações no início do lifespan.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database.from_settings()
        # Sem banco a aplicação não sobe
        await conectar_com_retentativas(
            db,
            tentativas=settings.DATABASE_CONNECT_RETRIES,
            intervalo=settings.DATABASE_CONNECT_RETRY_DELAY,
        )
        app.state.db = db
        app.state.processos = ProcessoStore(db)
        app.state.configuracoes = ConfiguracoesStore(db)
        app.state.gestao = GestaoService(db)
        logger.info(f"API pronta (versão {settings.API_VERSION})")
        try:
            yield
        finally:
            await db.fechar()

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def health_check():
        return {
            "status": "ok",
            "version": settings.API_VERSION,
        }

    @app.exception_handler(ErroEscritorio)
    async def erro_escritorio_handler(request: Request, exc: ErroEscritorio):
        status_code = STATUS_POR_TIPO.get(exc.tipo, 500)
        if exc.tipo == ErrorType.DATABASE_ERROR and not exc.retryable:
            status_code = 500
        error_detail = ErrorDetail(
            type=exc.tipo,
            message=exc.mensagem,
            details={**exc.detalhes, "retryable": exc.retryable},
        )
        return JSONResponse(
            status_code=status_code,
            content={"status": "error", "error": error_detail.model_dump(mode="json")},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Erro não tratado em {request.method} {request.url.path}")
        error_detail = ErrorDetail(
            type=ErrorType.PROCESSING_ERROR,
            message="Erro interno do servidor",
            details={"error": str(exc)}
        )
        return JSONResponse(
            status_code=500,
            content={"status": "error", "error": error_detail.model_dump(mode="json")}
        )

    app.include_router(router)
    return app


app = create_app()
