"""
Demo contest data: the 2025 judges and the six competing dishes.
"""
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from quilo_backend.models.dish import Dish
from quilo_backend.models.judge import Judge

logger = logging.getLogger(__name__)

DEMO_JUDGES = [
    {"name": "Ana Paula", "email": "ana@oquiloenosso.com"},
    {"name": "Bruno Silva", "email": "bruno@oquiloenosso.com"},
    {"name": "Carla Mendes", "email": "carla@oquiloenosso.com"},
    {"name": "Diego Rocha", "email": "diego@oquiloenosso.com"},
    {"name": "Fernanda Alves", "email": "fernanda@oquiloenosso.com"},
]

DEMO_DISHES = [
    {
        "name": "Presunto Artesanal de Frango com Pequi",
        "restaurant": "Junior Cozinha Brasileira",
        "description": "Presunto artesanal de frango com pequi recheado, empanado em semente de abóbora, "
                       "acompanhado de musseline de agrião e crispy de casca de maçã",
        "region": "Goiás",
        "chef": "Alex Ricardo dos Reis Martins",
        "image": "/images/prato1.jpg",
    },
    {
        "name": "Café da Manhã Inglês Completo",
        "restaurant": "Sabores Internacionais",
        "description": "Café da manhã tradicional inglês com ovos, bacon, linguiça, feijão, cogumelos e torradas",
        "region": "São Paulo",
        "chef": "Maria Santos",
        "image": "/images/prato2.jpg",
    },
    {
        "name": "Salada Caesar com Camarão",
        "restaurant": "Tempero da Bahia",
        "description": "Salada caesar tradicional com camarões grelhados e molho especial",
        "region": "Bahia",
        "chef": "João Oliveira",
        "image": "/images/prato3.jpg",
    },
    {
        "name": "Sopa Oriental de Ervilha",
        "restaurant": "Pantanal Gourmet",
        "description": "Sopa cremosa de ervilha com temperos orientais",
        "region": "Mato Grosso do Sul",
        "chef": "Carlos Lima",
        "image": "/images/prato4.jpg",
    },
    {
        "name": "Penne com Molho de Tomate",
        "restaurant": "Massa & Arte",
        "description": "Penne al dente com molho de tomate artesanal e manjericão fresco",
        "region": "Rio de Janeiro",
        "chef": "Giuseppe Rossi",
        "image": "/images/prato5.jpg",
    },
    {
        "name": "Salada Caesar Gourmet",
        "restaurant": "Verde & Sabor",
        "description": "Versão gourmet da salada caesar com ingredientes premium",
        "region": "Minas Gerais",
        "chef": "Patricia Costa",
        "image": "/images/prato6.jpg",
    },
]


async def seed_demo_data(session: AsyncSession) -> bool:
    """Insert the demo judges and dishes into an empty database.

    Returns False without touching anything when judges or dishes already exist.
    """
    judges = (await session.execute(select(func.count()).select_from(Judge))).scalar_one()
    dishes = (await session.execute(select(func.count()).select_from(Dish))).scalar_one()
    if judges or dishes:
        logger.info(f"Skipping demo seed: {judges} judges and {dishes} dishes already present")
        return False

    for data in DEMO_JUDGES:
        session.add(Judge(**data))
    for data in DEMO_DISHES:
        session.add(Dish(**data))
    await session.commit()
    logger.info(f"Seeded {len(DEMO_JUDGES)} demo judges and {len(DEMO_DISHES)} demo dishes")
    return True
