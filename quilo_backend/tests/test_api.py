"""
API endpoint tests for all routes.
Uses a per-test SQLite file + dependency-overridden FastAPI test client.
"""
from sqlalchemy import select

from quilo_backend.models.evaluation import Evaluation
from quilo_backend.models.recipe import Recipe


async def _score(client, judge, dish, criterion="sabor", score=8):
    return await client.post("/api/avaliacoes", json={
        "judge_id": judge.id, "dish_id": dish.id, "criterion": criterion, "score": score,
    })


# ===================== HEALTH / ROOT =====================


async def test_root(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


async def test_health(client):
    r = await client.get("/api/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert body["timestamp"].endswith("Z")
    assert body["uptime"] >= 0


async def test_unknown_route(client):
    r = await client.get("/api/nada")
    assert r.status_code == 404
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Rota não encontrada"
    assert body["message"] == "Rota GET /api/nada não existe"


# ===================== DISHES =====================


async def test_list_dishes(client, seed_data):
    r = await client.get("/api/pratos")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["total"] == 3
    assert {d["name"] for d in body["data"]} == {
        "Presunto de Frango com Pequi", "Sopa Oriental de Ervilha", "Penne com Molho de Tomate",
    }


async def test_create_dish_with_portuguese_fields(client):
    r = await client.post("/api/pratos", json={
        "nome": "Salada Caesar Gourmet",
        "restaurante": "Verde & Sabor",
        "estado": "Minas Gerais",
        "chef": "Patricia Costa",
    })
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Prato criado com sucesso"
    assert body["data"]["name"] == "Salada Caesar Gourmet"
    assert body["data"]["region"] == "Minas Gerais"

    r = await client.get(f"/api/pratos/{body['data']['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["restaurant"] == "Verde & Sabor"


async def test_create_dish_missing_name(client):
    r = await client.post("/api/pratos", json={"restaurant": "Sem Nome"})
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Requisição inválida"
    assert body["details"]


async def test_update_dish(client, seed_data):
    dish = seed_data["penne"]
    r = await client.put(f"/api/pratos/{dish.id}", json={"chef": "Giuseppe Rossi"})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["chef"] == "Giuseppe Rossi"
    assert data["name"] == "Penne com Molho de Tomate"


async def test_update_dish_rejects_null_required_fields(client, seed_data):
    dish = seed_data["penne"]
    for field in ("name", "nome", "restaurant"):
        r = await client.put(f"/api/pratos/{dish.id}", json={field: None})
        assert r.status_code == 422
        assert r.json()["error"] == "Requisição inválida"

    r = await client.put(f"/api/pratos/{dish.id}", json={"chef": None})
    assert r.status_code == 200
    r = await client.get(f"/api/pratos/{dish.id}")
    assert r.json()["data"]["name"] == "Penne com Molho de Tomate"


async def test_get_missing_dish(client):
    r = await client.get("/api/pratos/999")
    assert r.status_code == 404
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Não encontrado"
    assert "999" in body["message"]


async def test_delete_dish_removes_evaluations_and_recipes(client, db_session, seed_data):
    dish = seed_data["pequi"]
    await _score(client, seed_data["ana"], dish)
    await _score(client, seed_data["ana"], seed_data["sopa"])
    r = await client.post("/api/receitas", json={"dish_id": dish.id, "title": "Presunto"})
    assert r.status_code == 201

    r = await client.delete(f"/api/pratos/{dish.id}")
    assert r.status_code == 200
    assert r.json()["message"] == "Prato excluído com sucesso"

    remaining = (await db_session.execute(select(Evaluation))).scalars().all()
    assert [e.dish_id for e in remaining] == [seed_data["sopa"].id]
    recipes = (await db_session.execute(select(Recipe))).scalars().all()
    assert recipes == []

    r = await client.get("/api/ranking")
    assert dish.id not in [entry["dish_id"] for entry in r.json()["data"]]


# ===================== JUDGES =====================


async def test_list_judges_ordered_by_name(client, seed_data):
    r = await client.get("/api/jurados")
    assert r.status_code == 200
    assert [j["name"] for j in r.json()["data"]] == ["Ana Paula", "Bruno Silva"]


async def test_create_judge(client):
    r = await client.post("/api/jurados", json={
        "nome": "Carla Mendes", "email": "Carla@OQuiloENosso.com", "especialidade": "Confeitaria",
    })
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["email"] == "carla@oquiloenosso.com"
    assert data["specialty"] == "Confeitaria"
    assert data["is_active"] is True


async def test_create_judge_duplicate_email(client, seed_data):
    r = await client.post("/api/jurados", json={"name": "Outra Ana", "email": "ANA@oquiloenosso.com"})
    assert r.status_code == 409
    body = r.json()
    assert body["error"] == "Conflito"
    assert body["success"] is False


async def test_update_judge_rejects_null_required_fields(client, seed_data):
    judge = seed_data["ana"]
    for body in ({"email": None}, {"is_active": None}, {"ativo": None}, {"name": None}):
        r = await client.put(f"/api/jurados/{judge.id}", json=body)
        assert r.status_code == 422
        assert r.json()["success"] is False

    r = await client.get(f"/api/jurados/{judge.id}")
    data = r.json()["data"]
    assert data["email"] == "ana@oquiloenosso.com"
    assert data["is_active"] is True


async def test_update_judge_to_taken_email(client, seed_data):
    r = await client.put(f"/api/jurados/{seed_data['ana'].id}", json={"email": "bruno@oquiloenosso.com"})
    assert r.status_code == 409
    assert r.json()["error"] == "Conflito"


async def test_inactive_judge_cannot_score(client, seed_data):
    judge = seed_data["bruno"]
    await client.put(f"/api/jurados/{judge.id}", json={"is_active": False})

    r = await _score(client, judge, seed_data["pequi"])
    assert r.status_code == 400
    assert "inativo" in r.json()["message"]

    r = await client.post("/api/avaliacoes/ficha", json={
        "judge_id": judge.id, "dish_id": seed_data["pequi"].id, "scores": {"sabor": 7},
    })
    assert r.status_code == 400

    r = await client.get("/api/avaliacoes")
    assert r.json()["total"] == 0


async def test_deactivated_judge_filtered(client, seed_data):
    r = await client.put(f"/api/jurados/{seed_data['bruno'].id}", json={"ativo": False})
    assert r.status_code == 200
    assert r.json()["data"]["is_active"] is False

    r = await client.get("/api/jurados", params={"active_only": True})
    assert [j["name"] for j in r.json()["data"]] == ["Ana Paula"]


async def test_delete_judge_removes_their_evaluations(client, db_session, seed_data):
    await _score(client, seed_data["ana"], seed_data["pequi"])
    await _score(client, seed_data["bruno"], seed_data["pequi"])

    r = await client.delete(f"/api/jurados/{seed_data['ana'].id}")
    assert r.status_code == 200

    remaining = (await db_session.execute(select(Evaluation))).scalars().all()
    assert [e.judge_id for e in remaining] == [seed_data["bruno"].id]


# ===================== RECIPES =====================


async def test_create_recipe_splits_lines(client, seed_data):
    r = await client.post("/api/receitas", json={
        "prato_id": seed_data["sopa"].id,
        "titulo": "Sopa de Ervilha",
        "ingredientes": "500g de ervilha\n1 cebola\n\ngengibre",
        "modo_preparo": ["Refogue a cebola", "Cozinhe a ervilha"],
        "tempo_preparo": 40,
    })
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["ingredients"] == ["500g de ervilha", "1 cebola", "gengibre"]
    assert data["steps"] == ["Refogue a cebola", "Cozinhe a ervilha"]
    assert data["prep_time_minutes"] == 40


async def test_create_recipe_for_missing_dish(client):
    r = await client.post("/api/receitas", json={"dish_id": 999, "title": "Fantasma"})
    assert r.status_code == 404


async def test_update_recipe_rejects_null_required_fields(client, seed_data):
    r = await client.post("/api/receitas", json={"dish_id": seed_data["sopa"].id, "title": "Sopa"})
    recipe_id = r.json()["data"]["id"]

    for body in ({"title": None}, {"dish_id": None}, {"ingredients": None}, {"modo_preparo": None}):
        r = await client.put(f"/api/receitas/{recipe_id}", json=body)
        assert r.status_code == 422

    r = await client.put(f"/api/receitas/{recipe_id}", json={"servings": None})
    assert r.status_code == 200


async def test_update_and_delete_recipe(client, seed_data):
    r = await client.post("/api/receitas", json={"dish_id": seed_data["penne"].id, "title": "Penne"})
    recipe_id = r.json()["data"]["id"]

    r = await client.put(f"/api/receitas/{recipe_id}", json={"difficulty": "fácil"})
    assert r.status_code == 200
    assert r.json()["data"]["difficulty"] == "fácil"

    r = await client.delete(f"/api/receitas/{recipe_id}")
    assert r.status_code == 200
    r = await client.get(f"/api/receitas/{recipe_id}")
    assert r.status_code == 404


# ===================== EVALUATIONS =====================


async def test_submit_evaluation_created_then_updated(client, seed_data):
    r = await _score(client, seed_data["ana"], seed_data["pequi"], score=7)
    assert r.status_code == 201
    body = r.json()
    assert body["created"] is True
    assert body["data"]["score"] == 7
    assert body["data"]["judge_name"] == "Ana Paula"
    assert body["data"]["dish_name"] == "Presunto de Frango com Pequi"

    r = await _score(client, seed_data["ana"], seed_data["pequi"], score=9)
    assert r.status_code == 200
    assert r.json()["created"] is False

    r = await client.get(f"/api/avaliacoes/prato/{seed_data['pequi'].id}")
    data = r.json()["data"]
    assert len(data) == 1
    assert data[0]["score"] == 9


async def test_submit_evaluation_portuguese_fields(client, seed_data):
    r = await client.post("/api/avaliacoes", json={
        "jurado_id": seed_data["bruno"].id,
        "prato_id": seed_data["sopa"].id,
        "criterio": "Apresentacao",
        "nota": 10,
    })
    assert r.status_code == 201
    assert r.json()["data"]["criterion"] == "apresentacao"


async def test_submit_evaluation_invalid_criterion(client, seed_data):
    r = await _score(client, seed_data["ana"], seed_data["pequi"], criterion="aroma")
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Erro de validação"
    assert "aroma" in body["message"]


async def test_submit_evaluation_score_out_of_range(client, seed_data):
    r = await _score(client, seed_data["ana"], seed_data["pequi"], score=11)
    assert r.status_code == 400
    r = await _score(client, seed_data["ana"], seed_data["pequi"], score=-1)
    assert r.status_code == 400


async def test_submit_evaluation_unknown_judge(client, seed_data):
    r = await client.post("/api/avaliacoes", json={
        "judge_id": 999, "dish_id": seed_data["pequi"].id, "criterion": "sabor", "score": 5,
    })
    assert r.status_code == 404
    assert "Jurado" in r.json()["message"]


async def test_submit_evaluation_sheet(client, seed_data):
    r = await client.post("/api/avaliacoes/ficha", json={
        "judge_id": seed_data["ana"].id,
        "dish_id": seed_data["penne"].id,
        "scores": {"originalidade": 8, "receita": 9, "sabor": 10},
    })
    assert r.status_code == 201
    body = r.json()
    assert body["total"] == 3
    assert body["created"] is True

    r = await client.get(f"/api/avaliacoes/jurado/{seed_data['ana'].id}")
    assert r.json()["total"] == 3


async def test_evaluation_sheet_rejected_entirely_on_bad_entry(client, seed_data):
    r = await client.post("/api/avaliacoes/ficha", json={
        "judge_id": seed_data["ana"].id,
        "dish_id": seed_data["penne"].id,
        "scores": {"sabor": 10, "aroma": 5},
    })
    assert r.status_code == 400

    r = await client.get("/api/avaliacoes")
    assert r.json()["total"] == 0


async def test_list_evaluations_for_missing_dish(client):
    r = await client.get("/api/avaliacoes/prato/999")
    assert r.status_code == 404


# ===================== RANKING / STATS / CRITERIA =====================


async def test_ranking_lists_every_dish(client, seed_data):
    for criterion in ("originalidade", "receita", "apresentacao", "harmonia", "sabor", "adequacao"):
        await _score(client, seed_data["ana"], seed_data["sopa"], criterion=criterion, score=10)

    r = await client.get("/api/ranking")
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 3
    top = body["data"][0]
    assert top["dish_id"] == seed_data["sopa"].id
    assert top["position"] == 1
    assert top["final_score"] == 100.0
    assert top["total_judges"] == 1
    assert [entry["final_score"] for entry in body["data"][1:]] == [0.0, 0.0]


async def test_statistics(client, seed_data):
    await _score(client, seed_data["ana"], seed_data["pequi"])
    await _score(client, seed_data["bruno"], seed_data["pequi"])

    r = await client.get("/api/estatisticas")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["dish_count"] == 3
    assert data["active_judge_count"] == 2
    assert data["evaluation_count"] == 2
    assert data["recipe_count"] == 0


async def test_criteria(client):
    r = await client.get("/api/criterios")
    assert r.status_code == 200
    body = r.json()
    assert body["total_weight"] == 13
    assert body["score_min"] == 0
    assert body["score_max"] == 10
    weights = {c["value"]: c["weight"] for c in body["data"]}
    assert weights == {
        "originalidade": 2, "receita": 3, "apresentacao": 2,
        "harmonia": 2, "sabor": 3, "adequacao": 1,
    }
