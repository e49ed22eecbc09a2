from fastapi import APIRouter
from .processos import router as processos_router
from .configuracoes import router as configuracoes_router
from .gestao import router as gestao_router

router = APIRouter(prefix="/api")

router.include_router(processos_router, prefix="/processes", tags=["Processos"])
router.include_router(configuracoes_router, prefix="/settings", tags=["Configurações"])
router.include_router(gestao_router, tags=["Gestão"])
