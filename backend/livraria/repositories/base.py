"""
Repository base com operações CRUD genéricas.

Os repositories apenas leem e fazem flush; commit e rollback ficam
com a unidade de trabalho do service (db.session.transaction).
"""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from livraria.db.session import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Repository base com operações CRUD.

    Fornece métodos genéricos para:
    - get_by_id: Buscar por ID (opcionalmente com lock de linha)
    - get_all: Listar (paginado, mais recentes primeiro)
    - add: Inserir registro
    - update: Atualizar campos informados
    - delete: Remover registro
    - count: Contar registros
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def get_by_id(self, id: int, for_update: bool = False) -> ModelType | None:
        """
        Busca registro por ID.

        Args:
            id: ID do registro
            for_update: Se True, trava a linha (SELECT ... FOR UPDATE)
                até o fim da transação e relê os valores do banco, mesmo
                que o objeto já esteja na identity map da sessão
        """
        query = select(self.model).where(self.model.id == id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ModelType]:
        """Lista registros com paginação."""
        result = await self.db.execute(
            select(self.model)
            .order_by(self.model.criado_em.desc(), self.model.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def add(self, **kwargs: Any) -> ModelType:
        """Insere novo registro e faz flush para obter o ID."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def update(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """Atualiza os campos informados (valores None são ignorados)."""
        for key, value in kwargs.items():
            if value is not None:
                setattr(instance, key, value)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        """Remove registro."""
        await self.db.delete(instance)
        await self.db.flush()

    async def count(self) -> int:
        """Conta total de registros."""
        result = await self.db.execute(
            select(func.count(self.model.id))
        )
        return result.scalar_one()
