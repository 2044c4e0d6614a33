from .admission_api import unwrap_list

CREATED = "Evaluator account created successfully!"
DELETED = "Evaluator account deleted successfully!"
DELETE_PROMPT = "Are you sure you want to delete this evaluator account? This action cannot be undone."


def list_evaluators(client) -> list:
    return unwrap_list(client.get("/guidance/evaluators"), "evaluators")


def create_evaluator(client, data: dict):
    return client.post("/guidance/evaluators", data)


def delete_evaluator(client, evaluator_id):
    return client.delete(f"/guidance/evaluators/{evaluator_id}")
